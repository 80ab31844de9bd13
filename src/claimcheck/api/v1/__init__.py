# src/claimcheck/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    claims_router,
    evidence_router,
    moderation_router,
    replies_router,
    votes_router,
)

__all__ = [
    "claims_router",
    "evidence_router",
    "moderation_router",
    "replies_router",
    "votes_router",
]
