# src/claimcheck/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .claim import ClaimAuditResponse, ClaimCreate, ClaimResponse
from .content import EvidenceCreate, EvidenceResponse, PerspectiveCreate, PerspectiveResponse
from .moderation import (
    ClaimApproveRequest,
    ClaimFlagRequest,
    ClaimRejectRequest,
    ContentStatusUpdate,
    ModerationLogResponse,
)
from .reply import ReplyCreate, ReplyResponse
from .vote import MyVoteResponse, VoteCreate, VoterResponse, VoteResponse

__all__ = [
    "ClaimAuditResponse", "ClaimCreate", "ClaimResponse",
    "EvidenceCreate", "EvidenceResponse", "PerspectiveCreate", "PerspectiveResponse",
    "ClaimApproveRequest", "ClaimFlagRequest", "ClaimRejectRequest",
    "ContentStatusUpdate", "ModerationLogResponse",
    "ReplyCreate", "ReplyResponse",
    "MyVoteResponse", "VoteCreate", "VoterResponse", "VoteResponse",
]
