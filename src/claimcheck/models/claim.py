"""SQLAlchemy model for submitted claims."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from claimcheck.db.session import Base
from claimcheck.db.time import utcnow

from .category import Category
from .enums import ContentStatus, enum_column

TITLE_MAX_LENGTH = 500
SEO_TITLE_MAX_LENGTH = 60
SEO_DESCRIPTION_MAX_LENGTH = 160


class Claim(Base):
    """Factual statement submitted for verification.

    ``total_score`` is derived from approved evidence and perspectives and is
    only ever written by the score aggregator. ``upvotes``/``downvotes`` are
    direct claim-level votes and do not feed the score.
    """

    __tablename__ = "claim"
    __table_args__ = (
        CheckConstraint("upvotes >= 0 AND downvotes >= 0", name="ck_claim_votes_non_negative"),
        Index("ix_claim_status", "status"),
        Index("ix_claim_user_id", "user_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("app_user.id"), nullable=False)
    category_id: Mapped[int | None] = mapped_column(ForeignKey("category.id"), nullable=True)

    title: Mapped[str] = mapped_column(String(TITLE_MAX_LENGTH), nullable=False)
    original_title: Mapped[str | None] = mapped_column(String(TITLE_MAX_LENGTH), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    original_description: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[ContentStatus] = mapped_column(
        enum_column(ContentStatus), nullable=False, default=ContentStatus.PENDING
    )
    rejection_feedback: Mapped[str | None] = mapped_column(Text, nullable=True)

    total_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    upvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    downvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    follow_count: Mapped[int] = mapped_column(default=0, nullable=False)
    view_count: Mapped[int] = mapped_column(default=0, nullable=False)

    # Moderator edit audit trail.
    title_edited: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    title_edited_by: Mapped[int | None] = mapped_column(ForeignKey("app_user.id"), nullable=True)
    title_edited_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    title_edit_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    description_edited: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    description_edited_by: Mapped[int | None] = mapped_column(
        ForeignKey("app_user.id"), nullable=True
    )
    description_edited_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    description_edit_reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Written back asynchronously by the SEO generator.
    seo_title: Mapped[str | None] = mapped_column(String(SEO_TITLE_MAX_LENGTH), nullable=True)
    seo_description: Mapped[str | None] = mapped_column(
        String(SEO_DESCRIPTION_MAX_LENGTH), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    category: Mapped[Category | None] = relationship("Category", lazy="joined")

    @property
    def leading_side(self) -> str | None:
        """Return ``"for"``/``"against"`` from the stored score, or None on a tie."""
        if self.total_score > 0:
            return "for"
        if self.total_score < 0:
            return "against"
        return None
