"""SQLAlchemy models for evidence and perspectives attached to claims."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from claimcheck.db.session import Base
from claimcheck.db.time import utcnow

from .enums import ContentStatus, EvidenceType, Position, enum_column


class Evidence(Base):
    """Supporting or refuting material for a claim.

    ``score`` is upvotes minus downvotes and orders the evidence feed; it is
    not the weighted contribution to the claim total.
    """

    __tablename__ = "evidence"
    __table_args__ = (
        CheckConstraint("upvotes >= 0 AND downvotes >= 0", name="ck_evidence_votes_non_negative"),
        Index("ix_evidence_claim_status", "claim_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    claim_id: Mapped[int] = mapped_column(
        ForeignKey("claim.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("app_user.id"), nullable=False)
    evidence_type: Mapped[EvidenceType] = mapped_column(
        enum_column(EvidenceType), nullable=False, default=EvidenceType.TEXT
    )
    position: Mapped[Position] = mapped_column(enum_column(Position), nullable=False)
    title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[ContentStatus] = mapped_column(
        enum_column(ContentStatus), nullable=False, default=ContentStatus.APPROVED
    )
    upvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    downvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    score: Mapped[int] = mapped_column(default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class Perspective(Base):
    """Opinion content for or against a claim; weighs half as much as evidence."""

    __tablename__ = "perspective"
    __table_args__ = (
        CheckConstraint(
            "upvotes >= 0 AND downvotes >= 0", name="ck_perspective_votes_non_negative"
        ),
        Index("ix_perspective_claim_status", "claim_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    claim_id: Mapped[int] = mapped_column(
        ForeignKey("claim.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("app_user.id"), nullable=False)
    position: Mapped[Position] = mapped_column(enum_column(Position), nullable=False)
    title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    source_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[ContentStatus] = mapped_column(
        enum_column(ContentStatus), nullable=False, default=ContentStatus.APPROVED
    )
    upvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    downvotes: Mapped[int] = mapped_column(default=0, nullable=False)
    score: Mapped[int] = mapped_column(default=0, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
