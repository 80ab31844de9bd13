# src/claimcheck/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .claims import router as claims_router
from .evidence import router as evidence_router
from .moderation import router as moderation_router
from .replies import router as replies_router
from .votes import router as votes_router

__all__ = [
    "claims_router",
    "evidence_router",
    "moderation_router",
    "replies_router",
    "votes_router",
]
