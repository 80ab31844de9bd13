"""SQLAlchemy model for replies on evidence and perspectives."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, CheckConstraint, DateTime, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from claimcheck.db.session import Base
from claimcheck.db.time import utcnow

from .enums import ContentStatus, ReplyTargetType, enum_column

REPLY_BODY_MIN_LENGTH = 10
REPLY_BODY_MAX_LENGTH = 2000
REPLY_MAX_LINKS = 1


class Reply(Base):
    """Flat reply to an evidence or perspective item (no nesting)."""

    __tablename__ = "reply"
    __table_args__ = (
        CheckConstraint("upvotes >= 0 AND downvotes >= 0", name="ck_reply_votes_non_negative"),
        Index("ix_reply_target", "target_type", "target_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Polymorphic reference; no foreign key.
    target_type: Mapped[ReplyTargetType] = mapped_column(
        enum_column(ReplyTargetType), nullable=False
    )
    target_id: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("app_user.id"), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    links: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    status: Mapped[ContentStatus] = mapped_column(
        enum_column(ContentStatus), nullable=False, default=ContentStatus.APPROVED
    )
    upvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    downvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    score: Mapped[int] = mapped_column(default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
