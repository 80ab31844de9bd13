"""Moderation-related Pydantic schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from claimcheck.models import ContentStatus, ModerationAction


class ClaimApproveRequest(BaseModel):
    """Approve a claim, optionally rewriting its title or description."""

    title: str | None = Field(None, max_length=500)
    title_edit_reason: str | None = None
    description: str | None = Field(None, max_length=5000)
    description_edit_reason: str | None = None
    seo_title: str | None = Field(None, max_length=60)
    seo_description: str | None = Field(None, max_length=160)
    reason: str | None = None
    metadata: dict[str, Any] | None = None


class ClaimRejectRequest(BaseModel):
    reason: str = Field(..., description="Why the claim was rejected")
    rejection_feedback: str | None = Field(None, description="Message shown to the author")
    notify_user: bool = False
    metadata: dict[str, Any] | None = None


class ClaimFlagRequest(BaseModel):
    reason: str
    metadata: dict[str, Any] | None = None


class ContentStatusUpdate(BaseModel):
    """Change the status of an evidence or perspective item."""

    status: ContentStatus
    reason: str | None = None
    metadata: dict[str, Any] | None = None


class ModerationLogResponse(BaseModel):
    id: int
    moderator_id: int
    action: ModerationAction
    target_type: str
    target_id: int
    reason: str | None
    metadata: dict[str, Any] = Field(validation_alias="details")
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
