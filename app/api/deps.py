# app/api/deps.py
import logging
from typing import Optional
from urllib.parse import quote

from pydantic import BaseModel
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from app.core import security
from app.db.session import SessionLocal
from app.models.enums import SessionStatus
from app.models.user import AdminUserPublic
from app.crud import crud_user
from app.core.config import settings

logger = logging.getLogger("app.api.deps")  # Logger for this module

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/token")


class AdminLoginRequired(Exception):
    """Raised by HTML dependencies; turned into a redirect to the sign-in page by app.main."""

    def __init__(self, next_url: str = "/admin/"):
        self.next_url = next_url


def signin_url(next_url: str | None = None) -> str:
    if not next_url:
        return settings.SIGNIN_PATH
    return f"{settings.SIGNIN_PATH}?next={quote(next_url, safe='/')}"


class AdminSession(BaseModel):
    status: SessionStatus
    user: Optional[AdminUserPublic] = None

    @property
    def key(self) -> str:
        return str(self.user.id) if self.user else ""


def _user_from_token(token: str | None, db: Session) -> AdminUserPublic | None:
    if not token:
        return None
    payload = security.decode_access_token(token)
    if payload is None:
        return None
    try:
        user_db_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        logger.warning(f"Invalid user ID format in token 'sub': {payload.get('sub')}")
        return None
    user = crud_user.get_user(db, user_id=user_db_id)
    if user is None or not user.is_active:
        return None
    return AdminUserPublic.model_validate(user)


def get_admin_session(request: Request, db: Session = Depends(get_db)) -> AdminSession:
    """Resolves the cookie session of the admin pages."""
    token = request.cookies.get(settings.ACCESS_TOKEN_COOKIE_NAME)
    user = _user_from_token(token, db)
    if user is None:
        return AdminSession(status=SessionStatus.UNAUTHENTICATED)
    return AdminSession(status=SessionStatus.AUTHENTICATED, user=user)


def get_current_admin_user(
    request: Request, session: AdminSession = Depends(get_admin_session)
) -> AdminUserPublic:
    if session.status != SessionStatus.AUTHENTICATED:
        raise AdminLoginRequired(next_url=request.url.path)
    return session.user


async def get_current_user_from_backend_jwt(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> AdminUserPublic:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = await security.verify_backend_token(token)
    user_id_str: str | None = payload.get("sub")
    if user_id_str is None:
        raise credentials_exception

    try:
        user_db_id = int(user_id_str)
    except ValueError:
        logger.exception(f"Invalid user ID format in token 'sub': {user_id_str}")
        raise credentials_exception

    user = crud_user.get_user(db, user_id=user_db_id)
    if user is None:
        logger.error(f"Admin with DB ID {user_db_id} from valid token not found in database.")
        raise credentials_exception

    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")

    return AdminUserPublic.model_validate(user)


get_current_active_user = get_current_user_from_backend_jwt
