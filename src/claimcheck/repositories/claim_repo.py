"""Data access helpers for claims and the content attached to them."""
from __future__ import annotations

from enum import Enum
from typing import Any

from sqlalchemy import or_, select, update
from sqlalchemy.orm import Session

from claimcheck.models import Category, Claim, ContentStatus, Evidence, Perspective, Position

__all__ = ["ClaimRepository", "ClaimSort", "ContentSort", "VISIBLE_CONTENT_STATUSES"]

# Evidence and perspectives shown on a claim page.
VISIBLE_CONTENT_STATUSES = (ContentStatus.APPROVED, ContentStatus.PENDING)


class ClaimSort(str, Enum):
    """Orderings for the claim listing."""

    NEWEST = "newest"
    POPULAR = "popular"
    TRENDING = "trending"


class ContentSort(str, Enum):
    """Orderings for evidence and perspective listings."""

    RECENT = "recent"
    SCORE = "score"
    VOTES = "votes"


def _content_order(model: type[Evidence] | type[Perspective], sort: ContentSort) -> list[Any]:
    if sort == ContentSort.SCORE:
        return [model.score.desc(), model.id.desc()]
    if sort == ContentSort.VOTES:
        return [model.upvotes.desc(), model.id.desc()]
    return [model.created_at.desc(), model.id.desc()]


class ClaimRepository:
    """Thin wrapper around database access for claim aggregates."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, claim_id: int) -> Claim | None:
        """Return a claim by identifier."""
        return self.session.get(Claim, claim_id)

    def list_claims(
        self,
        status: ContentStatus | None = None,
        *,
        category_slug: str | None = None,
        search: str | None = None,
        sort: ClaimSort = ClaimSort.NEWEST,
        limit: int = 50,
        before: int | None = None,
    ) -> list[Claim]:
        """Return claims matching the filters, newest first unless ``sort`` says otherwise.

        ``search`` is a case-insensitive substring match on title or
        description. ``before`` keeps only claims with a smaller id.
        """
        stmt = select(Claim)
        if status is not None:
            stmt = stmt.where(Claim.status == status)
        if category_slug:
            stmt = stmt.join(Category, Claim.category_id == Category.id).where(
                Category.slug == category_slug.lower()
            )
        if search:
            stmt = stmt.where(
                or_(
                    Claim.title.icontains(search, autoescape=True),
                    Claim.description.icontains(search, autoescape=True),
                )
            )
        if before is not None:
            stmt = stmt.where(Claim.id < before)

        if sort == ClaimSort.POPULAR:
            stmt = stmt.order_by(Claim.view_count.desc(), Claim.id.desc())
        elif sort == ClaimSort.TRENDING:
            stmt = stmt.order_by(
                Claim.view_count.desc(), Claim.created_at.desc(), Claim.id.desc()
            )
        else:
            stmt = stmt.order_by(Claim.created_at.desc(), Claim.id.desc())
        return list(self.session.scalars(stmt.limit(limit)))

    def list_evidence(
        self,
        claim_id: int,
        *,
        position: Position | None = None,
        sort: ContentSort = ContentSort.RECENT,
        limit: int = 50,
    ) -> list[Evidence]:
        """Return approved and pending evidence for a claim."""
        stmt = select(Evidence).where(
            Evidence.claim_id == claim_id,
            Evidence.status.in_(VISIBLE_CONTENT_STATUSES),
        )
        if position is not None:
            stmt = stmt.where(Evidence.position == position)
        stmt = stmt.order_by(*_content_order(Evidence, sort)).limit(limit)
        return list(self.session.scalars(stmt))

    def list_perspectives(
        self,
        claim_id: int,
        *,
        position: Position | None = None,
        sort: ContentSort = ContentSort.RECENT,
        limit: int = 50,
    ) -> list[Perspective]:
        """Return approved and pending perspectives for a claim."""
        stmt = select(Perspective).where(
            Perspective.claim_id == claim_id,
            Perspective.status.in_(VISIBLE_CONTENT_STATUSES),
        )
        if position is not None:
            stmt = stmt.where(Perspective.position == position)
        stmt = stmt.order_by(*_content_order(Perspective, sort)).limit(limit)
        return list(self.session.scalars(stmt))

    def approved_evidence(self, claim_id: int) -> list[Evidence]:
        """Return every approved evidence item for a claim."""
        stmt = select(Evidence).where(
            Evidence.claim_id == claim_id,
            Evidence.status == ContentStatus.APPROVED,
        )
        return list(self.session.scalars(stmt))

    def approved_perspectives(self, claim_id: int) -> list[Perspective]:
        """Return every approved perspective for a claim."""
        stmt = select(Perspective).where(
            Perspective.claim_id == claim_id,
            Perspective.status == ContentStatus.APPROVED,
        )
        return list(self.session.scalars(stmt))

    def set_total_score(self, claim_id: int, total_score: float) -> bool:
        """Overwrite the stored score. Returns False if the claim is gone."""
        result = self.session.execute(
            update(Claim)
            .where(Claim.id == claim_id)
            .values(total_score=total_score)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount > 0

    def transition_status(
        self,
        claim_id: int,
        *,
        expected: ContentStatus,
        values: dict[str, Any],
    ) -> bool:
        """Apply ``values`` only if the claim still has status ``expected``.

        Returns False when another writer changed the status first.
        """
        result = self.session.execute(
            update(Claim)
            .where(Claim.id == claim_id, Claim.status == expected)
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount > 0

    def create(self, **fields: Any) -> Claim:
        """Insert a new claim and return the persisted ORM instance."""
        claim = Claim(**fields)
        self.session.add(claim)
        self.session.flush()
        return claim
