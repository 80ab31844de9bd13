"""Vote ledger shared by claims, evidence, perspectives and replies.

Each target kind has its own vote table with a composite (target, user) key,
so a user holds at most one vote per target. Casting the same vote twice
removes it; casting the opposite vote switches it in place. Denormalized
counters on the target are updated with SQL column arithmetic so concurrent
votes from different users never lose an update.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy import ColumnElement, case, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from claimcheck.core.errors import AuthRequiredError, ConflictError, NotFoundError
from claimcheck.models import (
    Claim,
    ClaimVote,
    Evidence,
    EvidenceVote,
    Perspective,
    PerspectiveVote,
    Reply,
    ReplyVote,
    User,
    VoteType,
)
from claimcheck.services.scoring import ClaimScoreAggregator, recompute_quietly

logger = logging.getLogger(__name__)


class TargetKind(str, Enum):
    """Discriminant for everything that can be voted on."""

    CLAIM = "claim"
    EVIDENCE = "evidence"
    PERSPECTIVE = "perspective"
    REPLY = "reply"


@dataclass(frozen=True)
class VoteTarget:
    """Table wiring for one target kind."""

    model: type[Any]
    vote_model: type[Any]
    vote_key: str
    has_score: bool
    feeds_claim_score: bool


VOTE_TARGETS: dict[TargetKind, VoteTarget] = {
    TargetKind.CLAIM: VoteTarget(Claim, ClaimVote, "claim_id", False, False),
    TargetKind.EVIDENCE: VoteTarget(Evidence, EvidenceVote, "evidence_id", True, True),
    TargetKind.PERSPECTIVE: VoteTarget(
        Perspective, PerspectiveVote, "perspective_id", True, True
    ),
    TargetKind.REPLY: VoteTarget(Reply, ReplyVote, "reply_id", True, False),
}


@dataclass(frozen=True)
class VoteOutcome:
    """Counters and the caller's vote after a cast."""

    upvotes: int
    downvotes: int
    user_vote: VoteType | None
    score: int | None = None
    claim_id: int | None = None
    claim_total_score: float | None = None


@dataclass(frozen=True)
class Voter:
    """One user's vote on a target, for voter listings."""

    user_id: int
    username: str
    vote_type: VoteType
    created_at: datetime


def _shifted(column: ColumnElement[int], delta: int) -> ColumnElement[int]:
    if delta >= 0:
        return column + delta
    # Decrements never go below zero.
    return case((column + delta > 0, column + delta), else_=0)


class VoteLedger:
    """Records votes and keeps target counters consistent with vote rows."""

    def __init__(self, db: Session, aggregator: ClaimScoreAggregator | None = None) -> None:
        self.db = db
        self._aggregator = aggregator

    def _target(self, kind: TargetKind, target_id: int) -> tuple[VoteTarget, Any]:
        wiring = VOTE_TARGETS[kind]
        target = self.db.get(wiring.model, target_id)
        if target is None:
            raise NotFoundError(f"{kind.value.capitalize()} not found")
        return wiring, target

    def _existing_vote(self, wiring: VoteTarget, target_id: int, user_id: int) -> Any | None:
        vote_model = wiring.vote_model
        stmt = (
            select(vote_model)
            .where(
                getattr(vote_model, wiring.vote_key) == target_id,
                vote_model.user_id == user_id,
            )
            .with_for_update()
        )
        return self.db.scalars(stmt).first()

    def get_user_vote(self, user_id: int, target_id: int, kind: TargetKind) -> VoteType | None:
        """Return the caller's current vote on a target, if any."""
        wiring, _ = self._target(kind, target_id)
        existing = self._existing_vote(wiring, target_id, user_id)
        return existing.vote_type if existing is not None else None

    def list_voters(
        self,
        target_id: int,
        kind: TargetKind,
        vote_type: VoteType | None = None,
    ) -> list[Voter]:
        """Return who voted on a target, newest vote first.

        Raises:
            NotFoundError: If the target does not exist.
        """
        wiring, _ = self._target(kind, target_id)
        vote_model = wiring.vote_model
        stmt = (
            select(vote_model, User.username)
            .join(User, User.id == vote_model.user_id)
            .where(getattr(vote_model, wiring.vote_key) == target_id)
        )
        if vote_type is not None:
            stmt = stmt.where(vote_model.vote_type == vote_type)
        stmt = stmt.order_by(vote_model.created_at.desc(), vote_model.user_id.desc())
        return [
            Voter(
                user_id=vote.user_id,
                username=username,
                vote_type=vote.vote_type,
                created_at=vote.created_at,
            )
            for vote, username in self.db.execute(stmt)
        ]

    def cast_vote(
        self,
        user_id: int | None,
        target_id: int,
        kind: TargetKind,
        vote_type: VoteType,
    ) -> VoteOutcome:
        """Apply a vote with toggle/switch semantics and commit it.

        Raises:
            AuthRequiredError: If there is no authenticated caller.
            NotFoundError: If the target does not exist.
            ConflictError: If a concurrent request by the same user won the insert.
        """
        if user_id is None:
            raise AuthRequiredError("Authentication required to vote")

        wiring, target = self._target(kind, target_id)
        existing = self._existing_vote(wiring, target_id, user_id)

        up_delta = 0
        down_delta = 0
        user_vote: VoteType | None
        if existing is None:
            self.db.add(
                wiring.vote_model(
                    **{wiring.vote_key: target_id, "user_id": user_id, "vote_type": vote_type}
                )
            )
            up_delta, down_delta = (1, 0) if vote_type == VoteType.UPVOTE else (0, 1)
            user_vote = vote_type
        elif existing.vote_type == vote_type:
            self.db.delete(existing)
            up_delta, down_delta = (-1, 0) if vote_type == VoteType.UPVOTE else (0, -1)
            user_vote = None
        else:
            existing.vote_type = vote_type
            up_delta, down_delta = (1, -1) if vote_type == VoteType.UPVOTE else (-1, 1)
            user_vote = vote_type

        try:
            self.db.flush()
        except IntegrityError as err:
            self.db.rollback()
            raise ConflictError("Vote was changed by a concurrent request; retry") from err

        self._apply_counters(wiring, target_id, up_delta, down_delta)
        self.db.refresh(target)

        claim_id: int | None = None
        claim_total: float | None = None
        if wiring.feeds_claim_score:
            claim_id = target.claim_id
            claim_total = recompute_quietly(self.db, claim_id, self._aggregator)

        outcome = VoteOutcome(
            upvotes=target.upvotes,
            downvotes=target.downvotes,
            user_vote=user_vote,
            score=target.score if wiring.has_score else None,
            claim_id=claim_id,
            claim_total_score=claim_total,
        )
        self.db.commit()
        logger.debug(
            "Vote %s by user %s on %s %s -> up=%s down=%s",
            vote_type.value,
            user_id,
            kind.value,
            target_id,
            outcome.upvotes,
            outcome.downvotes,
        )
        return outcome

    def _apply_counters(
        self, wiring: VoteTarget, target_id: int, up_delta: int, down_delta: int
    ) -> None:
        model = wiring.model
        new_up = _shifted(model.upvotes, up_delta)
        new_down = _shifted(model.downvotes, down_delta)
        values: dict[str, Any] = {"upvotes": new_up, "downvotes": new_down}
        if wiring.has_score:
            values["score"] = new_up - new_down
        self.db.execute(
            update(model)
            .where(model.id == target_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
