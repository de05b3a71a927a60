# app/crud/crud_user.py
import logging
from datetime import datetime, timezone
from sqlalchemy.orm import Session
from app.schemas.user import AdminUser
from app.models.user import AdminUserCreate
from app.core.security import get_password_hash, verify_password

logger = logging.getLogger("app.crud.user")  # Logger for this module

def get_user(db: Session, user_id: int) -> AdminUser | None:
    return db.query(AdminUser).filter(AdminUser.id == user_id).first()

def get_user_by_email(db: Session, email: str) -> AdminUser | None:
    return db.query(AdminUser).filter(AdminUser.email == email).first()

def create_admin_user(db: Session, user_in: AdminUserCreate, commit_db: bool = True) -> AdminUser:
    db_user = AdminUser(
        email=user_in.email,
        full_name=user_in.full_name,
        hashed_password=get_password_hash(user_in.password),
        is_active=True,
    )
    db.add(db_user)
    if commit_db:
        db.commit()
    else:
        db.flush()
    db.refresh(db_user)
    logger.info(f"Created admin user {db_user.email} (id={db_user.id})")
    return db_user

def set_password(db: Session, user: AdminUser, password: str) -> AdminUser:
    user.hashed_password = get_password_hash(password)
    db.commit()
    db.refresh(user)
    logger.info(f"Password updated for admin user {user.email}")
    return user

def authenticate(db: Session, email: str, password: str) -> AdminUser | None:
    """Returns the active admin with these credentials, or None."""
    user = get_user_by_email(db, email=email)
    if not user or not user.is_active or not verify_password(password, user.hashed_password):
        return None
    return user

def update_user_login_info(db: Session, user: AdminUser) -> AdminUser:
    user.last_login_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)
    return user
