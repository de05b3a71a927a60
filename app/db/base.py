# app/db/base.py
# Import all the models, so that Base has them before create_all()
from app.db.base_class import Base
from app.schemas.user import AdminUser
