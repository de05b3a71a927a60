# app/api/auth.py
import logging
from datetime import timedelta
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app.api import deps
from app.core.security import create_access_token
from app.crud import crud_user
from app.models.user import AdminUserPublic, BackendToken
from app.core.config import settings

logger = logging.getLogger("app.api.auth")  # Logger for this module
router = APIRouter()


@router.post("/token", response_model=BackendToken)
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(deps.get_db)
):
    """Exchanges admin credentials for a bearer token usable on the JSON API."""
    user = crud_user.authenticate(db, email=form_data.username, password=form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    crud_user.update_user_login_info(db, user=user)
    expires_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES
    access_token = create_access_token(
        data={"sub": str(user.id)}, expires_delta=timedelta(minutes=expires_minutes)
    )
    logger.info(f"Issued API token for admin {user.email}")
    return BackendToken(access_token=access_token, expires_in=expires_minutes * 60)


@router.get("/users/me", response_model=AdminUserPublic)
async def read_users_me(current_user: AdminUserPublic = Depends(deps.get_current_active_user)):
    return current_user
