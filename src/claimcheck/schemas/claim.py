# src/claimcheck/schemas/claim.py
"""Claim-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from claimcheck.models import ContentStatus
from claimcheck.models.claim import TITLE_MAX_LENGTH


class ClaimCreate(BaseModel):
    """Schema for submitting a new claim."""

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(None, max_length=5000)
    category_id: int | None = None


class ClaimResponse(BaseModel):
    """Public view of a claim."""

    id: int
    user_id: int
    category_id: int | None
    title: str
    description: str | None
    status: ContentStatus
    total_score: float
    leading_side: str | None
    upvotes: int
    downvotes: int
    follow_count: int
    view_count: int
    seo_title: str | None = None
    seo_description: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ClaimAuditResponse(ClaimResponse):
    """Claim view including the moderation audit trail.

    Only moderators and the claim's author receive these fields.
    """

    original_title: str | None = None
    title_edited: bool = False
    title_edited_by: int | None = None
    title_edited_at: datetime | None = None
    title_edit_reason: str | None = None
    original_description: str | None = None
    description_edited: bool = False
    description_edited_by: int | None = None
    description_edited_at: datetime | None = None
    description_edit_reason: str | None = None
    rejection_feedback: str | None = None
