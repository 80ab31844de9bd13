"""SQLAlchemy model for user accounts referenced by content and votes."""

from __future__ import annotations

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from claimcheck.db.session import Base

from .enums import UserRole, enum_column


class User(Base):
    """Account identity. Credentials are managed outside this service."""

    __tablename__ = "app_user"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    role: Mapped[UserRole] = mapped_column(
        enum_column(UserRole), nullable=False, default=UserRole.USER
    )

    @property
    def is_moderator(self) -> bool:
        """Return True when the user may review submissions."""
        return self.role in (UserRole.MODERATOR, UserRole.ADMIN)
