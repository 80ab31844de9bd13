"""Moderation services for Claimcheck.

Claims move ``pending -> approved | rejected | flagged`` and nowhere else.
Every decision is applied with a status-guarded UPDATE so two moderators
racing on the same claim cannot both win; the loser gets ConflictError and no
log row is written for it. Validation happens before anything is touched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

from claimcheck.core.errors import ConflictError, NotFoundError, ValidationError
from claimcheck.db.time import utcnow
from claimcheck.models import (
    Claim,
    ContentStatus,
    Evidence,
    ModerationAction,
    ModerationLog,
    Perspective,
)
from claimcheck.repositories.claim_repo import ClaimRepository
from claimcheck.services.notifications import (
    NotificationDispatcher,
    NotificationEvent,
    NotificationType,
    get_notification_dispatcher,
)
from claimcheck.services.scoring import ClaimScoreAggregator, recompute_quietly

logger = logging.getLogger(__name__)

_CONTENT_ACTIONS: dict[tuple[str, ContentStatus], ModerationAction] = {
    ("evidence", ContentStatus.APPROVED): ModerationAction.APPROVE_EVIDENCE,
    ("evidence", ContentStatus.REJECTED): ModerationAction.REJECT_EVIDENCE,
    ("evidence", ContentStatus.FLAGGED): ModerationAction.FLAG_EVIDENCE,
    ("perspective", ContentStatus.APPROVED): ModerationAction.APPROVE_PERSPECTIVE,
    ("perspective", ContentStatus.REJECTED): ModerationAction.REJECT_PERSPECTIVE,
    ("perspective", ContentStatus.FLAGGED): ModerationAction.FLAG_PERSPECTIVE,
}

_CONTENT_MODELS: dict[str, type[Evidence] | type[Perspective]] = {
    "evidence": Evidence,
    "perspective": Perspective,
}


@dataclass(frozen=True)
class ClaimEdits:
    """Optional moderator rewrites applied on approval."""

    title: str | None = None
    title_edit_reason: str | None = None
    description: str | None = None
    description_edit_reason: str | None = None
    seo_title: str | None = None
    seo_description: str | None = None


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _edit_values(
    claim: Claim,
    field: str,
    new_value: str | None,
    reason: str | None,
    moderator_id: int,
) -> dict[str, Any]:
    """Return column updates for one audited field, or {} when unchanged."""
    current = getattr(claim, field) or ""
    if new_value is None or new_value == current:
        return {}
    if _blank(reason):
        raise ValidationError(f"Edit reason is required when editing {field}")

    values: dict[str, Any] = {
        field: new_value,
        f"{field}_edited": True,
        f"{field}_edited_by": moderator_id,
        f"{field}_edited_at": utcnow(),
        f"{field}_edit_reason": reason.strip(),
    }
    # Keep the text as first submitted across repeated edits.
    if not getattr(claim, f"{field}_edited") and getattr(claim, f"original_{field}") is None:
        values[f"original_{field}"] = getattr(claim, field)
    return values


class ModerationWorkflow:
    """State machine for claim review plus evidence/perspective status changes."""

    def __init__(
        self,
        db: Session,
        aggregator: ClaimScoreAggregator | None = None,
        notifier: NotificationDispatcher | None = None,
    ) -> None:
        self.db = db
        self.repo = ClaimRepository(db)
        self._aggregator = aggregator
        self.notifier = notifier or get_notification_dispatcher()

    def _get_claim(self, claim_id: int) -> Claim:
        claim = self.repo.get_by_id(claim_id)
        if claim is None:
            raise NotFoundError("Claim not found")
        return claim

    def _transition(
        self,
        claim: Claim,
        values: dict[str, Any],
        *,
        moderator_id: int,
        action: ModerationAction,
        reason: str | None,
        metadata: dict[str, Any] | None,
    ) -> Claim:
        if claim.status != ContentStatus.PENDING:
            raise ConflictError(f"Claim has already been reviewed ({claim.status.value})")
        if not self.repo.transition_status(
            claim.id, expected=ContentStatus.PENDING, values=values
        ):
            self.db.rollback()
            raise ConflictError("Claim was reviewed by another moderator")

        self.db.add(
            ModerationLog(
                moderator_id=moderator_id,
                action=action,
                target_type="claim",
                target_id=claim.id,
                reason=reason,
                details=metadata or {},
            )
        )
        self.db.flush()
        self.db.refresh(claim)
        return claim

    def approve(
        self,
        claim_id: int,
        moderator_id: int,
        edits: ClaimEdits | None = None,
        *,
        reason: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Claim:
        """Approve a pending claim, applying audited title/description edits.

        Raises:
            NotFoundError: If the claim does not exist.
            ValidationError: If an edit is empty or lacks its edit reason.
            ConflictError: If the claim is no longer pending.
        """
        claim = self._get_claim(claim_id)
        edits = edits or ClaimEdits()
        if edits.title is not None and _blank(edits.title):
            raise ValidationError("Title cannot be empty")

        values: dict[str, Any] = {"status": ContentStatus.APPROVED}
        values.update(
            _edit_values(claim, "title", edits.title, edits.title_edit_reason, moderator_id)
        )
        values.update(
            _edit_values(
                claim,
                "description",
                edits.description,
                edits.description_edit_reason,
                moderator_id,
            )
        )
        if edits.seo_title is not None:
            values["seo_title"] = edits.seo_title
        if edits.seo_description is not None:
            values["seo_description"] = edits.seo_description

        claim = self._transition(
            claim,
            values,
            moderator_id=moderator_id,
            action=ModerationAction.APPROVE_CLAIM,
            reason=reason,
            metadata=metadata,
        )
        self.db.commit()

        self.notifier.notify(
            NotificationEvent(
                type=NotificationType.CLAIM_APPROVED,
                user_id=claim.user_id,
                title="Your claim has been approved",
                message=f'"{claim.title}" has been approved and is now live on the platform',
                link=f"/claims/{claim.id}",
            )
        )
        self.notifier.notify(
            NotificationEvent(
                type=NotificationType.NEW_CLAIM,
                title="New claim published",
                message=f'"{claim.title}" has been published',
                link=f"/claims/{claim.id}",
            )
        )
        return claim

    def reject(
        self,
        claim_id: int,
        moderator_id: int,
        reason: str | None,
        *,
        rejection_feedback: str | None = None,
        notify_user: bool = False,
        metadata: dict[str, Any] | None = None,
    ) -> Claim:
        """Reject a pending claim. ``reason`` is mandatory."""
        if _blank(reason):
            raise ValidationError("A reason is required to reject a claim")
        claim = self._get_claim(claim_id)

        values: dict[str, Any] = {"status": ContentStatus.REJECTED}
        if rejection_feedback:
            values["rejection_feedback"] = rejection_feedback
        claim = self._transition(
            claim,
            values,
            moderator_id=moderator_id,
            action=ModerationAction.REJECT_CLAIM,
            reason=reason.strip(),
            metadata=metadata,
        )
        recompute_quietly(self.db, claim.id, self._aggregator)
        self.db.commit()

        if notify_user:
            self.notifier.notify(
                NotificationEvent(
                    type=NotificationType.CLAIM_REJECTED,
                    user_id=claim.user_id,
                    title="Your claim has been rejected",
                    message=rejection_feedback or reason.strip(),
                    link=f"/claims/{claim.id}?showRejection=true",
                )
            )
        return claim

    def flag(
        self,
        claim_id: int,
        moderator_id: int,
        reason: str | None,
        *,
        metadata: dict[str, Any] | None = None,
    ) -> Claim:
        """Flag a pending claim for further review. ``reason`` is mandatory."""
        if _blank(reason):
            raise ValidationError("A reason is required to flag a claim")
        claim = self._get_claim(claim_id)
        claim = self._transition(
            claim,
            {"status": ContentStatus.FLAGGED},
            moderator_id=moderator_id,
            action=ModerationAction.FLAG_CLAIM,
            reason=reason.strip(),
            metadata=metadata,
        )
        self.db.commit()
        self.notifier.notify(
            NotificationEvent(
                type=NotificationType.CLAIM_FLAGGED,
                user_id=claim.user_id,
                title="Your claim has been flagged for review",
                message=reason.strip(),
                link=f"/claims/{claim.id}",
            )
        )
        return claim

    def set_content_status(
        self,
        kind: str,
        item_id: int,
        moderator_id: int,
        status: ContentStatus,
        *,
        reason: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Evidence | Perspective:
        """Change an evidence/perspective status and keep the claim score honest.

        The owning claim is recomputed whenever the item enters or leaves
        APPROVED, since only approved items count.
        """
        model = _CONTENT_MODELS.get(kind)
        if model is None:
            raise ValidationError(f"Unsupported content kind: {kind}")
        action = _CONTENT_ACTIONS.get((kind, status))
        if action is None:
            raise ValidationError(f"Cannot set {kind} status to {status.value}")
        if status != ContentStatus.APPROVED and _blank(reason):
            raise ValidationError(f"A reason is required to {status.value} {kind}")

        item = self.db.get(model, item_id)
        if item is None:
            raise NotFoundError(f"{kind.capitalize()} not found")

        old_status = item.status
        if old_status != status:
            result = self.db.execute(
                update(model)
                .where(model.id == item_id, model.status == old_status)
                .values(status=status)
                .execution_options(synchronize_session="fetch")
            )
            if result.rowcount == 0:
                self.db.rollback()
                raise ConflictError(f"{kind.capitalize()} was updated by another moderator")

        self.db.add(
            ModerationLog(
                moderator_id=moderator_id,
                action=action,
                target_type=kind,
                target_id=item_id,
                reason=reason.strip() if reason else None,
                details={**(metadata or {}), "previous_status": old_status.value},
            )
        )
        self.db.flush()

        if old_status != status and ContentStatus.APPROVED in (old_status, status):
            recompute_quietly(self.db, item.claim_id, self._aggregator)

        self.db.commit()
        self.db.refresh(item)
        logger.info(
            "Moderator %s set %s %s status %s -> %s",
            moderator_id,
            kind,
            item_id,
            old_status.value,
            status.value,
        )
        return item
