# src/claimcheck/models/__init__.py
"""SQLAlchemy models for the Claimcheck application."""

from .category import Category
from .claim import Claim
from .enums import (
    ContentStatus,
    EvidenceType,
    ModerationAction,
    Position,
    ReplyTargetType,
    UserRole,
    VoteType,
)
from .evidence import Evidence, Perspective
from .moderation import ModerationLog
from .reply import Reply
from .user import User
from .vote import ClaimVote, EvidenceVote, PerspectiveVote, ReplyVote

__all__ = [
    "Category",
    "Claim",
    "ContentStatus", "EvidenceType", "ModerationAction", "Position",
    "ReplyTargetType", "UserRole", "VoteType",
    "Evidence", "Perspective",
    "ModerationLog",
    "Reply",
    "User",
    "ClaimVote", "EvidenceVote", "PerspectiveVote", "ReplyVote",
]
