"""Service-level helpers for submitting and reading claims and their content."""
from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from claimcheck.core.errors import NotFoundError, PermissionDeniedError, ValidationError
from claimcheck.core.settings import settings
from claimcheck.models import (
    Category,
    Claim,
    ContentStatus,
    Evidence,
    EvidenceType,
    EvidenceVote,
    Perspective,
    Position,
    Reply,
    ReplyTargetType,
    ReplyVote,
    User,
    UserRole,
)
from claimcheck.repositories.claim_repo import ClaimRepository, ClaimSort, ContentSort
from claimcheck.services.notifications import (
    NotificationDispatcher,
    NotificationEvent,
    NotificationType,
    get_notification_dispatcher,
)
from claimcheck.services.scoring import ClaimScoreAggregator, recompute_quietly

logger = logging.getLogger(__name__)

PERSPECTIVE_BODY_MIN_LENGTH = 10


class ContentService:
    """Claim submission and reads, plus evidence/perspective intake and removal."""

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

    def submit_claim(
        self,
        *,
        user_id: int,
        title: str,
        description: str | None = None,
        category_id: int | None = None,
    ) -> Claim:
        """Create a claim in PENDING status awaiting moderation."""
        title = title.strip()
        if not title:
            raise ValidationError("Title is required")
        if category_id is not None and self.db.get(Category, category_id) is None:
            raise NotFoundError("Category not found")

        claim = self.repo.create(
            user_id=user_id,
            title=title,
            description=description,
            category_id=category_id,
            status=ContentStatus.PENDING,
        )
        self.db.commit()
        self.db.refresh(claim)
        self.notifier.notify(
            NotificationEvent(
                type=NotificationType.CLAIM_SUBMITTED,
                user_id=user_id,
                title="Your claim was submitted",
                message=f'"{claim.title}" is awaiting review',
                link=f"/claims/{claim.id}",
            )
        )
        return claim

    def get_claim(self, claim_id: int) -> Claim:
        """Fetch a claim, recomputing its score first to correct any drift.

        A recompute failure is logged and the stored score is returned.
        """
        claim = self.repo.get_by_id(claim_id)
        if claim is None:
            raise NotFoundError("Claim not found")
        if settings.recompute_on_read:
            if recompute_quietly(self.db, claim_id, self._aggregator) is not None:
                self.db.commit()
            self.db.refresh(claim)
        return claim

    def list_claims(
        self,
        status: ContentStatus | None = ContentStatus.APPROVED,
        *,
        category: str | None = None,
        search: str | None = None,
        sort: ClaimSort = ClaimSort.NEWEST,
        limit: int = 50,
        before: int | None = None,
    ) -> list[Claim]:
        """List claims matching the filters; each score is refreshed independently.

        ``category`` is a category slug. An unknown slug matches nothing.
        """
        claims = self.repo.list_claims(
            status,
            category_slug=category,
            search=search.strip() if search else None,
            sort=sort,
            limit=limit,
            before=before,
        )
        if settings.recompute_on_read and claims:
            for claim in claims:
                recompute_quietly(self.db, claim.id, self._aggregator)
            self.db.commit()
            for claim in claims:
                self.db.refresh(claim)
        return claims

    def list_evidence(
        self,
        claim_id: int,
        *,
        position: Position | None = None,
        sort: ContentSort = ContentSort.RECENT,
        limit: int = 50,
    ) -> list[Evidence]:
        """Approved and pending evidence for a claim, most recent first by default."""
        self._require_claim(claim_id)
        return self.repo.list_evidence(claim_id, position=position, sort=sort, limit=limit)

    def list_perspectives(
        self,
        claim_id: int,
        *,
        position: Position | None = None,
        sort: ContentSort = ContentSort.RECENT,
        limit: int = 50,
    ) -> list[Perspective]:
        self._require_claim(claim_id)
        return self.repo.list_perspectives(claim_id, position=position, sort=sort, limit=limit)

    def _require_claim(self, claim_id: int) -> Claim:
        claim = self.repo.get_by_id(claim_id)
        if claim is None:
            raise NotFoundError("Claim not found")
        return claim

    def add_evidence(
        self,
        *,
        claim_id: int,
        user_id: int,
        position: Position,
        evidence_type: EvidenceType = EvidenceType.TEXT,
        title: str | None = None,
        description: str | None = None,
        url: str | None = None,
    ) -> Evidence:
        """Attach auto-approved evidence and recompute the claim score."""
        self._require_claim(claim_id)
        if evidence_type == EvidenceType.URL and not url:
            raise ValidationError("A URL is required for URL evidence")
        if evidence_type == EvidenceType.TEXT and not (description or title):
            raise ValidationError("Text evidence needs a title or description")

        evidence = Evidence(
            claim_id=claim_id,
            user_id=user_id,
            evidence_type=evidence_type,
            position=position,
            title=title,
            description=description,
            url=url,
            status=ContentStatus.APPROVED,
        )
        self.db.add(evidence)
        self.db.flush()
        recompute_quietly(self.db, claim_id, self._aggregator)
        self.db.commit()
        self.db.refresh(evidence)
        return evidence

    def add_perspective(
        self,
        *,
        claim_id: int,
        user_id: int,
        position: Position,
        body: str,
        title: str | None = None,
        source_url: str | None = None,
    ) -> Perspective:
        """Attach an auto-approved perspective and recompute the claim score."""
        self._require_claim(claim_id)
        body = body.strip()
        if len(body) < PERSPECTIVE_BODY_MIN_LENGTH:
            raise ValidationError(
                f"Body must be at least {PERSPECTIVE_BODY_MIN_LENGTH} characters long"
            )

        perspective = Perspective(
            claim_id=claim_id,
            user_id=user_id,
            position=position,
            body=body,
            title=title,
            source_url=source_url,
            status=ContentStatus.APPROVED,
        )
        self.db.add(perspective)
        self.db.flush()
        recompute_quietly(self.db, claim_id, self._aggregator)
        self.db.commit()
        self.db.refresh(perspective)
        return perspective

    def delete_evidence(self, evidence_id: int, *, actor: User) -> None:
        """Delete evidence with its votes and replies, then recompute the claim.

        Raises:
            NotFoundError: If the evidence does not exist.
            PermissionDeniedError: If ``actor`` is neither the author nor an admin.
        """
        evidence = self.db.get(Evidence, evidence_id)
        if evidence is None:
            raise NotFoundError("Evidence not found")
        if evidence.user_id != actor.id and actor.role != UserRole.ADMIN:
            raise PermissionDeniedError("You can only delete your own evidence")

        claim_id = evidence.claim_id
        reply_ids = select(Reply.id).where(
            Reply.target_type == ReplyTargetType.EVIDENCE,
            Reply.target_id == evidence_id,
        )
        self.db.execute(
            delete(ReplyVote)
            .where(ReplyVote.reply_id.in_(reply_ids))
            .execution_options(synchronize_session=False)
        )
        self.db.execute(
            delete(Reply)
            .where(Reply.target_type == ReplyTargetType.EVIDENCE, Reply.target_id == evidence_id)
            .execution_options(synchronize_session=False)
        )
        self.db.execute(
            delete(EvidenceVote)
            .where(EvidenceVote.evidence_id == evidence_id)
            .execution_options(synchronize_session=False)
        )
        self.db.delete(evidence)
        self.db.flush()
        # The deletion stands even if the score cannot be refreshed.
        recompute_quietly(self.db, claim_id, self._aggregator)
        self.db.commit()
        logger.info("Evidence %s deleted by user %s", evidence_id, actor.id)
