"""Reply endpoints."""

from fastapi import APIRouter, Query, status

from claimcheck.api.v1.dependencies import CurrentUserDep, SessionDep
from claimcheck.models import ReplyTargetType
from claimcheck.schemas import ReplyCreate, ReplyResponse
from claimcheck.services.replies import ReplyService

router = APIRouter(prefix="/replies", tags=["replies"])


@router.post("/", response_model=ReplyResponse, status_code=status.HTTP_201_CREATED)
async def create_reply(
    payload: ReplyCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ReplyResponse:
    """Reply to an evidence or perspective item."""
    reply = ReplyService(db).create_reply(
        user_id=current_user.id,
        target_type=payload.target_type,
        target_id=payload.target_id,
        body=payload.body,
        links=payload.links,
    )
    return ReplyResponse.model_validate(reply)


@router.get("/", response_model=list[ReplyResponse])
async def list_replies(
    db: SessionDep,
    target_type: ReplyTargetType = Query(..., alias="targetType"),
    target_id: int = Query(..., alias="targetId"),
    sort: str = Query("score", pattern="^(score|recent)$"),
) -> list[ReplyResponse]:
    """List approved replies for a target."""
    replies = ReplyService(db).list_replies(target_type, target_id, sort=sort)
    return [ReplyResponse.model_validate(reply) for reply in replies]
