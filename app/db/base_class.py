# app/db/base_class.py
from sqlalchemy.orm import declarative_base, declared_attr


class _Base:
    # Table name defaults to the lower-cased class name
    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower()


Base = declarative_base(cls=_Base)
