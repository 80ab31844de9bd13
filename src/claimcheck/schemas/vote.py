# src/claimcheck/schemas/vote.py
"""Vote-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from claimcheck.models import VoteType


class VoteCreate(BaseModel):
    """Schema for casting a vote on any votable target."""

    vote_type: VoteType = Field(..., description="upvote or downvote")


class VoteResponse(BaseModel):
    """Counters after the vote plus the caller's current vote."""

    upvotes: int
    downvotes: int
    user_vote: VoteType | None
    score: int | None = None
    claim_id: int | None = None
    claim_total_score: float | None = None


class MyVoteResponse(BaseModel):
    user_vote: VoteType | None


class VoterResponse(BaseModel):
    """A user who voted on a target."""

    user_id: int
    username: str
    vote_type: VoteType
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
