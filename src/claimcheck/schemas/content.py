"""Evidence and perspective Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from claimcheck.models import ContentStatus, EvidenceType, Position


class EvidenceCreate(BaseModel):
    """Schema for attaching evidence to a claim."""

    position: Position
    evidence_type: EvidenceType = EvidenceType.TEXT
    title: str | None = Field(None, max_length=500)
    description: str | None = None
    url: str | None = None


class EvidenceResponse(BaseModel):
    id: int
    claim_id: int
    user_id: int
    evidence_type: EvidenceType
    position: Position
    title: str | None
    description: str | None
    url: str | None
    status: ContentStatus
    upvotes: int
    downvotes: int
    score: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PerspectiveCreate(BaseModel):
    """Schema for attaching a perspective to a claim."""

    position: Position
    body: str = Field(..., min_length=10, description="Perspective text")
    title: str | None = Field(None, max_length=500)
    source_url: str | None = None


class PerspectiveResponse(BaseModel):
    id: int
    claim_id: int
    user_id: int
    position: Position
    title: str | None
    body: str
    source_url: str | None
    status: ContentStatus
    upvotes: int
    downvotes: int
    score: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
