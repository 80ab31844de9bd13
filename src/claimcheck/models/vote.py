"""Per-user vote ledgers, one table per votable target kind."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from claimcheck.db.session import Base
from claimcheck.db.time import utcnow

from .enums import VoteType, enum_column

# Composite primary keys prevent duplicate votes from the same user.


class ClaimVote(Base):
    """Direct up/down vote on a claim."""

    __tablename__ = "claim_vote"
    __table_args__ = (Index("ix_claim_vote_user_id", "user_id"),)

    claim_id: Mapped[int] = mapped_column(
        ForeignKey("claim.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("app_user.id"), primary_key=True)
    vote_type: Mapped[VoteType] = mapped_column(enum_column(VoteType), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class EvidenceVote(Base):
    """Vote on an evidence item; feeds the owning claim's score weight."""

    __tablename__ = "evidence_vote"
    __table_args__ = (Index("ix_evidence_vote_user_id", "user_id"),)

    evidence_id: Mapped[int] = mapped_column(
        ForeignKey("evidence.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("app_user.id"), primary_key=True)
    vote_type: Mapped[VoteType] = mapped_column(enum_column(VoteType), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class PerspectiveVote(Base):
    """Vote on a perspective; feeds the owning claim's score weight."""

    __tablename__ = "perspective_vote"
    __table_args__ = (Index("ix_perspective_vote_user_id", "user_id"),)

    perspective_id: Mapped[int] = mapped_column(
        ForeignKey("perspective.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("app_user.id"), primary_key=True)
    vote_type: Mapped[VoteType] = mapped_column(enum_column(VoteType), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class ReplyVote(Base):
    """Vote on a reply."""

    __tablename__ = "reply_vote"
    __table_args__ = (Index("ix_reply_vote_user_id", "user_id"),)

    reply_id: Mapped[int] = mapped_column(
        ForeignKey("reply.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(ForeignKey("app_user.id"), primary_key=True)
    vote_type: Mapped[VoteType] = mapped_column(enum_column(VoteType), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
