"""Enumerations shared by the content, vote and moderation models."""

from __future__ import annotations

import enum

from sqlalchemy import Enum


class ContentStatus(str, enum.Enum):
    """Moderation status of a claim, evidence, perspective or reply."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    FLAGGED = "flagged"


class Position(str, enum.Enum):
    """Side an evidence or perspective item argues for."""

    FOR = "for"
    AGAINST = "against"


class VoteType(str, enum.Enum):
    UPVOTE = "upvote"
    DOWNVOTE = "downvote"


class UserRole(str, enum.Enum):
    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


class EvidenceType(str, enum.Enum):
    URL = "url"
    FILE = "file"
    TEXT = "text"


class ReplyTargetType(str, enum.Enum):
    EVIDENCE = "evidence"
    PERSPECTIVE = "perspective"


class ModerationAction(str, enum.Enum):
    """Actions recorded in the moderation log."""

    APPROVE_CLAIM = "APPROVE_CLAIM"
    REJECT_CLAIM = "REJECT_CLAIM"
    FLAG_CLAIM = "FLAG_CLAIM"
    APPROVE_EVIDENCE = "APPROVE_EVIDENCE"
    REJECT_EVIDENCE = "REJECT_EVIDENCE"
    FLAG_EVIDENCE = "FLAG_EVIDENCE"
    APPROVE_PERSPECTIVE = "APPROVE_PERSPECTIVE"
    REJECT_PERSPECTIVE = "REJECT_PERSPECTIVE"
    FLAG_PERSPECTIVE = "FLAG_PERSPECTIVE"


def enum_column(enum_cls: type[enum.Enum]) -> Enum:
    """Return a portable column type that stores enum values as strings."""
    return Enum(
        enum_cls,
        native_enum=False,
        values_callable=lambda members: [member.value for member in members],
        length=32,
        validate_strings=True,
    )
