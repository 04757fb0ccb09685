"""SQLAlchemy declarative Base shared by all CodeGuard tables."""

from sqlalchemy import inspect
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base; rows render as <Model id=..>."""

    def __repr__(self) -> str:
        identity = inspect(self).identity
        row_id = identity[0] if identity else getattr(self, "id", None)
        return f"<{type(self).__name__} id={row_id}>"
