# app/main.py
# Start backend using uvicorn app.main:app --reload --host 0.0.0.0
import logging
import logging.config
import logging.handlers
import json
import pathlib
from contextlib import asynccontextmanager
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from fastapi.routing import APIRoute
from app.core.config import settings
from app.api import admin as admin_router
from app.api import auth as auth_router
from app.api import events as events_router
from app.api.deps import AdminLoginRequired, signin_url
from app.db.base import Base # Registers every model on Base.metadata
from app.db.session import engine

_queue_handler_instance: Optional[logging.handlers.QueueHandler] = None # Module-level variable
_api_stats = {"total_requests": 0, "errors_5xx": 0}

async def metrics_middleware(request: Request, call_next):
    _api_stats["total_requests"] += 1
    start_time = time.time()
    try:
        response = await call_next(request)
    except Exception as e:
        _api_stats["errors_5xx"] += 1
        logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {e}")
        raise
    if response.status_code >= 500:
        _api_stats["errors_5xx"] += 1
    elapsed_ms = (time.time() - start_time) * 1000
    logger.debug(f"{request.method} {request.url.path} -> {response.status_code} in {elapsed_ms:.1f}ms")
    return response

def configure_logging_from_file():
    """Loads logging configuration from the JSON file and identifies the QueueHandler."""
    global _queue_handler_instance
    config_file = pathlib.Path(__file__).parent / "logging_config.json"
    try:
        with open(config_file) as f_in:
            config = json.load(f_in)

        log_dir = pathlib.Path("logs")
        log_dir.mkdir(exist_ok=True)

        logging.config.dictConfig(config)

        # Find the QueueHandler instance to start/stop its listener later
        root_logger = logging.getLogger()
        for handler in root_logger.handlers:
            if isinstance(handler, logging.handlers.QueueHandler):
                _queue_handler_instance = handler
                break

        if not _queue_handler_instance:
            logging.getLogger("app.main.logging_setup_check").error(
                "QueueHandler not found in root logger. Off-thread logging will not work as intended."
            )
    except FileNotFoundError:
        print(f"ERROR: Logging configuration file not found at {config_file}. Falling back to basic stdout logging.")
        logging.basicConfig(level=logging.INFO, format='%(levelname)-8s [%(name)s] %(message)s')
        logging.getLogger("app.main.logging_setup_fallback").error("Logging configuration file missing.", exc_info=True)
    except json.JSONDecodeError as e:
        print(f"ERROR: Failed to parse logging configuration file {config_file}: {e}. Falling back to basic stdout logging.")
        logging.basicConfig(level=logging.INFO, format='%(levelname)-8s [%(name)s] %(message)s')
        logging.getLogger("app.main.logging_setup_fallback").error("Logging configuration JSON error.", exc_info=True)
    except Exception as e:
        print(f"ERROR: Failed to configure logging from file: {e}. Falling back to basic stdout logging.")
        logging.basicConfig(level=logging.INFO, format='%(levelname)-8s [%(name)s] %(message)s')
        logging.getLogger("app.main.logging_setup_fallback").error("General logging configuration failed.", exc_info=True)


# Configure logging when the module is loaded. Listener is started/stopped by lifespan.
configure_logging_from_file()
logger = logging.getLogger("app.main") # Logger for this module

def create_tables():
    Base.metadata.create_all(bind=engine)
create_tables()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup sequence initiated...")
    if _queue_handler_instance and getattr(_queue_handler_instance, 'listener', None):
        try:
            _queue_handler_instance.listener.start()
            logger.info("Logging QueueListener started successfully via lifespan.")
        except Exception as e:
            logger.error(f"Failed to start QueueListener in lifespan: {e}", exc_info=True)
    else:
        logger.warning("QueueHandler or its listener not found during startup; off-thread logging might not be active.")

    yield

    logger.info("Application shutdown sequence initiated...")
    if _queue_handler_instance and getattr(_queue_handler_instance, 'listener', None):
        try:
            logger.info("Attempting to stop Logging QueueListener...")
            _queue_handler_instance.listener.stop()
        except Exception as e:
            logger.error(f"Failed to stop QueueListener gracefully in lifespan: {e}", exc_info=True)

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)
app.middleware("http")(metrics_middleware)


@app.exception_handler(AdminLoginRequired)
async def admin_login_required_handler(request: Request, exc: AdminLoginRequired):
    return RedirectResponse(url=signin_url(exc.next_url), status_code=303)


# Include Routers
app.include_router(auth_router.router, prefix=settings.API_V1_STR + "/auth", tags=["Auth"])
app.include_router(events_router.router, prefix=settings.API_V1_STR + "/events", tags=["Events"])
app.include_router(admin_router.router, prefix="/admin", include_in_schema=False)  # Admin routes are not in OpenAPI schema

logger.info("--- FastAPI Registered Routes ---")
for route in app.routes:
    if isinstance(route, APIRoute):
        logger.info(f"Path: {route.path}, Methods: {route.methods}, Name: {route.name}")
logger.info("--- End Registered Routes ---")


@app.get(settings.API_V1_STR + "/health", tags=["Health Check"])
async def health_check():
    return {
        "status": "healthy",
        "project": settings.PROJECT_NAME,
        "total_requests": _api_stats["total_requests"],
        "errors_5xx": _api_stats["errors_5xx"],
    }

# For development with uvicorn: uvicorn app.main:app --reload
