"""Reply-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from claimcheck.models import ContentStatus, ReplyTargetType
from claimcheck.models.reply import REPLY_BODY_MAX_LENGTH, REPLY_BODY_MIN_LENGTH


class ReplyCreate(BaseModel):
    """Schema for replying to an evidence or perspective item.

    ``links`` accepts a list for forward compatibility, but only the first
    entry is stored.
    """

    target_type: ReplyTargetType
    target_id: int
    body: str = Field(..., min_length=REPLY_BODY_MIN_LENGTH, max_length=REPLY_BODY_MAX_LENGTH)
    links: list[str] | None = None


class ReplyResponse(BaseModel):
    id: int
    target_type: ReplyTargetType
    target_id: int
    user_id: int
    body: str
    links: list[str]
    status: ContentStatus
    upvotes: int
    downvotes: int
    score: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
