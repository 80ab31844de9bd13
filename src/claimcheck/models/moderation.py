"""Append-only audit log of moderator decisions."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from claimcheck.db.session import Base
from claimcheck.db.time import utcnow

from .enums import ModerationAction, enum_column


class ModerationLog(Base):
    """One row per moderation action. Rows are never updated."""

    __tablename__ = "moderation_log"
    __table_args__ = (
        Index("ix_moderation_log_moderator_id", "moderator_id"),
        Index("ix_moderation_log_target", "target_type", "target_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    moderator_id: Mapped[int] = mapped_column(ForeignKey("app_user.id"), nullable=False)
    action: Mapped[ModerationAction] = mapped_column(
        enum_column(ModerationAction), nullable=False
    )
    target_type: Mapped[str] = mapped_column(String(20), nullable=False)
    target_id: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    # "metadata" is reserved on declarative classes.
    details: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSON, nullable=False, default=dict
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
