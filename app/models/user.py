# app/models/user.py
from typing import Optional
from pydantic import BaseModel, EmailStr
from datetime import datetime

class AdminUserBase(BaseModel):
    email: EmailStr
    full_name: Optional[str] = None

class AdminUserCreate(AdminUserBase):
    password: str

class AdminUserPublic(AdminUserBase):
    id: int
    is_active: bool
    created_at: datetime | None = None
    last_login_at: datetime | None = None

    class Config:
        from_attributes = True

# Token issued to API clients after a password login
class BackendToken(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
