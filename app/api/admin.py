# app/api/admin.py
import logging
from fastapi import APIRouter, Query, Request, Depends, Form
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session
from typing import Any, Dict, List
from urllib.parse import quote
import datetime

from app.api import deps
from app.core import security
from app.crud import crud_user
from app.models.enums import FilterMode, GateDecision, SubmissionStatus
from app.models.submission import SubmissionRecord
from app.models.user import AdminUserPublic
from app.services.event_view import gate_event_view, load_event_view
from app.services.submission_filter import normalize_status
from app.core.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()

templates = Jinja2Templates(directory=str(settings.TEMPLATES_DIR))

FILTER_OPTIONS = [
    (FilterMode.ALL, "All"),
    (FilterMode.APPROVED, "Approved"),
    (FilterMode.PENDING, "Pending"),
    (FilterMode.REJECTED, "Rejected (no approvals)"),
]

STATUS_COLORS = {
    SubmissionStatus.PENDING.value: "yellow",
    SubmissionStatus.APPROVED.value: "green",
    SubmissionStatus.REJECTED.value: "red",
}
DEFAULT_STATUS_COLOR = "#f8fbff"


def _display_row(record: SubmissionRecord) -> Dict[str, Any]:
    return {
        "name": record.name,
        "email": record.email,
        "status": record.status or "Pending",
        "status_color": STATUS_COLORS.get(normalize_status(record.status), DEFAULT_STATUS_COLOR),
        "website": record.website,
        # Only http(s) targets become links
        "website_is_link": bool(record.website) and record.website.lower().startswith(("http://", "https://")),
        "decision_reason": record.decision_reason or "—",
    }

# --- UNPROTECTED AUTH ROUTES ---

@router.get("/login", response_class=HTMLResponse, tags=["Admin Auth"])
async def admin_login_page(request: Request):
    """Serves the admin login page."""
    return templates.TemplateResponse("admin_login.html", {
        "request": request,
        "message": request.query_params.get("message"),
        "next": request.query_params.get("next", "/admin/"),
    })

@router.post("/login", response_class=RedirectResponse, include_in_schema=False)
async def handle_admin_login(
    request: Request,
    db: Session = Depends(deps.get_db),
    username: str = Form(...),
    password: str = Form(...),
    next_url: str = Form("/admin/", alias="next"),
):
    """Handles admin login form submission, sets cookie, and redirects."""
    user = crud_user.authenticate(db, email=username, password=password)
    if not user:
        # Same message whether or not the email exists
        logger.info(f"Failed admin login attempt for {username}")
        error_msg = quote("Incorrect email or password.")
        return RedirectResponse(url=f"{settings.SIGNIN_PATH}?message={error_msg}", status_code=303)

    crud_user.update_user_login_info(db, user=user)
    access_token_expires = datetime.timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = security.create_access_token(
        data={"sub": str(user.id)}, expires_delta=access_token_expires
    )

    # Only same-site paths are accepted as redirect targets
    redirect_url = next_url if next_url.startswith("/") and not next_url.startswith("//") else "/admin/"
    response = RedirectResponse(url=redirect_url, status_code=303)
    response.set_cookie(
        key=settings.ACCESS_TOKEN_COOKIE_NAME,
        value=access_token,
        httponly=True,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    logger.info(f"Admin {user.email} logged in")
    return response

@router.get("/logout", response_class=RedirectResponse, tags=["Admin Auth"])
async def handle_admin_logout():
    """Logs the admin out by clearing the auth cookie."""
    response = RedirectResponse(url=settings.SIGNIN_PATH, status_code=303)
    response.delete_cookie(key=settings.ACCESS_TOKEN_COOKIE_NAME)
    return response


# --- PROTECTED ADMIN ROUTES ---

@router.get("/", response_class=HTMLResponse, tags=["Admin"])
async def admin_dashboard(request: Request, current_user: AdminUserPublic = Depends(deps.get_current_admin_user)):
    """Serves the admin dashboard with the event code lookup form."""
    return templates.TemplateResponse("admin_index.html", {"request": request, "user": current_user})

@router.get("/events", response_class=RedirectResponse, tags=["Admin"])
async def open_event_by_code(
    code: str = Query("", description="Event code typed into the dashboard form"),
    current_user: AdminUserPublic = Depends(deps.get_current_admin_user),
):
    code = code.strip()
    if not code:
        return RedirectResponse(url="/admin/", status_code=303)
    return RedirectResponse(url=f"/admin/events/{quote(code, safe='')}", status_code=303)

@router.get("/events/{event_code}", tags=["Admin"])
async def admin_event_page(
    request: Request,
    event_code: str,
    status_filter: FilterMode = Query(FilterMode.ALL, alias="status"),
    refresh: bool = Query(False),
    session: deps.AdminSession = Depends(deps.get_admin_session),
):
    """
    Lists the submissions of one event, filtered by status.

    Unauthenticated admins are redirected to sign in before anything is
    fetched; an unresolved session renders nothing.
    """
    decision = gate_event_view(session.status, event_code)
    if decision == GateDecision.REDIRECT:
        return RedirectResponse(url=deps.signin_url(request.url.path), status_code=303)
    if decision == GateDecision.WAIT:
        return Response(status_code=204)

    view = await load_event_view(session.key, event_code, status_filter, refresh=refresh)
    rows: List[Dict[str, Any]] = [_display_row(r) for r in view.rows]

    return templates.TemplateResponse("admin_event.html", {
        "request": request,
        "user": session.user,
        "event_code": view.event_code,
        "status_filter": view.filter_mode.value,
        "filter_options": [(mode.value, label) for mode, label in FILTER_OPTIONS],
        "rows": rows,
        "total_records": view.total_records,
        "error": view.error,
    })
