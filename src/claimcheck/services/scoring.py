"""Claim scoring: per-item contributions and the claim total aggregator.

Scoring rules:

- Evidence for = +1, evidence against = -1.
- Perspective for = +0.5, perspective against = -0.5.
- An item with more than 10 total votes (up + down) counts double,
  whatever the split between up and down.

Only approved evidence and perspectives contribute.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from claimcheck.core.errors import NotFoundError
from claimcheck.models import Position
from claimcheck.repositories.claim_repo import ClaimRepository
from claimcheck.services.seo import SeoRegenerator, get_seo_regenerator

logger = logging.getLogger(__name__)

EVIDENCE_BASE_SCORE = 1.0
PERSPECTIVE_BASE_SCORE = 0.5
VOTE_THRESHOLD_FOR_DOUBLE_WEIGHT = 10


def vote_weight(upvotes: int, downvotes: int) -> int:
    """Return 2 when an item has strictly more than 10 votes, else 1."""
    return 2 if upvotes + downvotes > VOTE_THRESHOLD_FOR_DOUBLE_WEIGHT else 1


def _signed(base: float, position: Position) -> float:
    return base if position == Position.FOR else -base


def evidence_contribution(position: Position, upvotes: int, downvotes: int) -> float:
    """Signed contribution of one evidence item to its claim's score."""
    return _signed(EVIDENCE_BASE_SCORE, position) * vote_weight(upvotes, downvotes)


def perspective_contribution(position: Position, upvotes: int, downvotes: int) -> float:
    """Signed contribution of one perspective to its claim's score."""
    return _signed(PERSPECTIVE_BASE_SCORE, position) * vote_weight(upvotes, downvotes)


def leading_side(total_score: float) -> str | None:
    """Map a total score to the side currently ahead."""
    if total_score > 0:
        return "for"
    if total_score < 0:
        return "against"
    return None


class ClaimScoreAggregator:
    """Recomputes and persists a claim's total score."""

    def __init__(self, db: Session, seo: SeoRegenerator | None = None) -> None:
        self.db = db
        self.repo = ClaimRepository(db)
        self.seo = seo if seo is not None else get_seo_regenerator()

    def compute(self, claim_id: int) -> float:
        """Sum contributions of approved content without writing anything."""
        total = 0.0
        for item in self.repo.approved_evidence(claim_id):
            total += evidence_contribution(item.position, item.upvotes, item.downvotes)
        for item in self.repo.approved_perspectives(claim_id):
            total += perspective_contribution(item.position, item.upvotes, item.downvotes)
        return total

    def recompute(self, claim_id: int) -> float:
        """Recompute, overwrite ``total_score`` and schedule SEO regeneration.

        Idempotent: the result depends only on the current approved content.

        Raises:
            NotFoundError: If the claim does not exist.
        """
        # Flush pending counter updates so the queries see them.
        self.db.flush()
        claim = self.repo.get_by_id(claim_id)
        if claim is None:
            raise NotFoundError(f"Claim {claim_id} not found")

        total = self.compute(claim_id)
        self.repo.set_total_score(claim_id, total)
        claim.total_score = total

        side = leading_side(total)
        category = claim.category.name if claim.category is not None else None
        try:
            self.seo.schedule(claim.id, claim.title, category, side)
        except Exception as exc:  # noqa: BLE001 - regeneration never blocks scoring
            logger.warning("Could not schedule SEO regeneration for claim %s: %s", claim_id, exc)
        return total


def recompute_quietly(
    db: Session,
    claim_id: int,
    aggregator: ClaimScoreAggregator | None = None,
) -> float | None:
    """Best-effort recompute used by read and write triggers.

    Runs inside a savepoint so a failure rolls back only the score write. The
    caller keeps the last stored value when None is returned.
    """
    aggregator = aggregator or ClaimScoreAggregator(db)
    try:
        with db.begin_nested():
            return aggregator.recompute(claim_id)
    except Exception as exc:  # noqa: BLE001 - scoring must not fail the caller
        logger.error("Error updating score for claim %s: %s", claim_id, exc, exc_info=True)
        return None
