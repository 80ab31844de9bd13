"""Moderation endpoints for the Claimcheck API.

Every route requires moderator capability; the workflow itself trusts that
check and only re-validates reasons and edit audits.
"""

from typing import Literal

from fastapi import APIRouter, Query
from sqlalchemy import select

from claimcheck.api.v1.dependencies import ModeratorDep, SessionDep
from claimcheck.models import ModerationLog
from claimcheck.schemas import (
    ClaimApproveRequest,
    ClaimAuditResponse,
    ClaimFlagRequest,
    ClaimRejectRequest,
    ContentStatusUpdate,
    EvidenceResponse,
    ModerationLogResponse,
    PerspectiveResponse,
)
from claimcheck.services.moderation import ClaimEdits, ModerationWorkflow

router = APIRouter(prefix="/moderation", tags=["moderation"])


@router.post("/claims/{claim_id}/approve", response_model=ClaimAuditResponse)
async def approve_claim(
    claim_id: int,
    payload: ClaimApproveRequest,
    moderator: ModeratorDep,
    db: SessionDep,
) -> ClaimAuditResponse:
    """Approve a pending claim with optional audited edits."""
    edits = ClaimEdits(
        title=payload.title,
        title_edit_reason=payload.title_edit_reason,
        description=payload.description,
        description_edit_reason=payload.description_edit_reason,
        seo_title=payload.seo_title,
        seo_description=payload.seo_description,
    )
    claim = ModerationWorkflow(db).approve(
        claim_id,
        moderator.id,
        edits,
        reason=payload.reason,
        metadata=payload.metadata,
    )
    return ClaimAuditResponse.model_validate(claim)


@router.post("/claims/{claim_id}/reject", response_model=ClaimAuditResponse)
async def reject_claim(
    claim_id: int,
    payload: ClaimRejectRequest,
    moderator: ModeratorDep,
    db: SessionDep,
) -> ClaimAuditResponse:
    """Reject a pending claim."""
    claim = ModerationWorkflow(db).reject(
        claim_id,
        moderator.id,
        payload.reason,
        rejection_feedback=payload.rejection_feedback,
        notify_user=payload.notify_user,
        metadata=payload.metadata,
    )
    return ClaimAuditResponse.model_validate(claim)


@router.post("/claims/{claim_id}/flag", response_model=ClaimAuditResponse)
async def flag_claim(
    claim_id: int,
    payload: ClaimFlagRequest,
    moderator: ModeratorDep,
    db: SessionDep,
) -> ClaimAuditResponse:
    """Flag a pending claim."""
    claim = ModerationWorkflow(db).flag(
        claim_id, moderator.id, payload.reason, metadata=payload.metadata
    )
    return ClaimAuditResponse.model_validate(claim)


@router.patch(
    "/{kind}/{item_id}/status",
    response_model=EvidenceResponse | PerspectiveResponse,
)
async def set_content_status(
    kind: Literal["evidence", "perspective"],
    item_id: int,
    payload: ContentStatusUpdate,
    moderator: ModeratorDep,
    db: SessionDep,
) -> EvidenceResponse | PerspectiveResponse:
    """Approve, reject or flag an evidence or perspective item."""
    item = ModerationWorkflow(db).set_content_status(
        kind,
        item_id,
        moderator.id,
        payload.status,
        reason=payload.reason,
        metadata=payload.metadata,
    )
    if kind == "evidence":
        return EvidenceResponse.model_validate(item)
    return PerspectiveResponse.model_validate(item)


@router.get("/logs", response_model=list[ModerationLogResponse])
async def list_moderation_logs(
    moderator: ModeratorDep,
    db: SessionDep,
    target_type: str | None = Query(None),
    target_id: int | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    before: int | None = Query(None),
) -> list[ModerationLogResponse]:
    """Return moderation log entries, newest first."""
    stmt = select(ModerationLog)
    if target_type is not None:
        stmt = stmt.where(ModerationLog.target_type == target_type)
    if target_id is not None:
        stmt = stmt.where(ModerationLog.target_id == target_id)
    if before is not None:
        stmt = stmt.where(ModerationLog.id < before)
    logs = db.scalars(stmt.order_by(ModerationLog.id.desc()).limit(limit))
    return [ModerationLogResponse.model_validate(log) for log in logs]
