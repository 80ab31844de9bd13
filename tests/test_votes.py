# tests/test_votes.py
"""Tests for the vote ledger and the vote endpoints."""

from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest
from fastapi import status

from claimcheck.core.errors import AuthRequiredError, NotFoundError
from claimcheck.models import (
    Claim,
    ClaimVote,
    Evidence,
    EvidenceVote,
    Position,
    Reply,
    ReplyTargetType,
    VoteType,
)
from claimcheck.services.scoring import ClaimScoreAggregator
from claimcheck.services.votes import TargetKind, VoteLedger


def _vote_rows(db_session, model, **filters) -> int:
    return db_session.query(model).filter_by(**filters).count()


def test_first_vote_inserts_row_and_increments(db_session, approved_claim, test_user) -> None:
    outcome = VoteLedger(db_session).cast_vote(
        test_user.id, approved_claim.id, TargetKind.CLAIM, VoteType.UPVOTE
    )

    assert (outcome.upvotes, outcome.downvotes) == (1, 0)
    assert outcome.user_vote == VoteType.UPVOTE
    assert _vote_rows(db_session, ClaimVote, claim_id=approved_claim.id) == 1


def test_same_vote_twice_toggles_off(db_session, approved_claim, test_user) -> None:
    ledger = VoteLedger(db_session)
    ledger.cast_vote(test_user.id, approved_claim.id, TargetKind.CLAIM, VoteType.DOWNVOTE)

    outcome = ledger.cast_vote(
        test_user.id, approved_claim.id, TargetKind.CLAIM, VoteType.DOWNVOTE
    )

    assert (outcome.upvotes, outcome.downvotes) == (0, 0)
    assert outcome.user_vote is None
    assert _vote_rows(db_session, ClaimVote, claim_id=approved_claim.id) == 0


def test_switching_vote_moves_one_count(db_session, make_evidence, approved_claim, test_user) -> None:
    evidence = make_evidence(approved_claim, upvotes=4, downvotes=2)
    ledger = VoteLedger(db_session)
    ledger.cast_vote(test_user.id, evidence.id, TargetKind.EVIDENCE, VoteType.UPVOTE)

    outcome = ledger.cast_vote(test_user.id, evidence.id, TargetKind.EVIDENCE, VoteType.DOWNVOTE)

    assert (outcome.upvotes, outcome.downvotes) == (4, 3)
    assert outcome.score == 1
    assert outcome.user_vote == VoteType.DOWNVOTE
    row = db_session.query(EvidenceVote).filter_by(evidence_id=evidence.id).one()
    assert row.vote_type == VoteType.DOWNVOTE


def test_votes_from_different_users_accumulate(
    db_session, approved_claim, test_user, other_user
) -> None:
    ledger = VoteLedger(db_session)
    ledger.cast_vote(test_user.id, approved_claim.id, TargetKind.CLAIM, VoteType.UPVOTE)
    outcome = ledger.cast_vote(other_user.id, approved_claim.id, TargetKind.CLAIM, VoteType.UPVOTE)

    assert outcome.upvotes == 2


def test_counters_never_go_negative(db_session, approved_claim, test_user) -> None:
    ledger = VoteLedger(db_session)
    ledger.cast_vote(test_user.id, approved_claim.id, TargetKind.CLAIM, VoteType.UPVOTE)
    # Simulate drift: counter was reset underneath an existing vote row.
    db_session.query(Claim).filter_by(id=approved_claim.id).update({"upvotes": 0})
    db_session.commit()

    outcome = ledger.cast_vote(test_user.id, approved_claim.id, TargetKind.CLAIM, VoteType.UPVOTE)

    assert outcome.upvotes == 0
    assert outcome.user_vote is None


def test_vote_requires_user(db_session, approved_claim) -> None:
    with pytest.raises(AuthRequiredError):
        VoteLedger(db_session).cast_vote(
            None, approved_claim.id, TargetKind.CLAIM, VoteType.UPVOTE
        )


@pytest.mark.parametrize("kind", list(TargetKind))
def test_vote_on_missing_target_raises(db_session, test_user, kind) -> None:
    with pytest.raises(NotFoundError):
        VoteLedger(db_session).cast_vote(test_user.id, 4242, kind, VoteType.UPVOTE)


def test_evidence_vote_recomputes_claim_score(
    db_session, approved_claim, make_evidence, test_user
) -> None:
    evidence = make_evidence(approved_claim, Position.FOR, upvotes=10)

    outcome = VoteLedger(db_session).cast_vote(
        test_user.id, evidence.id, TargetKind.EVIDENCE, VoteType.UPVOTE
    )

    assert outcome.claim_id == approved_claim.id
    assert outcome.claim_total_score == 2.0
    db_session.refresh(approved_claim)
    assert approved_claim.total_score == 2.0


def test_claim_vote_does_not_touch_score(db_session, approved_claim, make_evidence, test_user) -> None:
    make_evidence(approved_claim, Position.FOR)
    aggregator = MagicMock(spec=ClaimScoreAggregator)

    VoteLedger(db_session, aggregator).cast_vote(
        test_user.id, approved_claim.id, TargetKind.CLAIM, VoteType.UPVOTE
    )

    aggregator.recompute.assert_not_called()


def test_vote_survives_recompute_failure(
    db_session, approved_claim, make_evidence, test_user
) -> None:
    evidence = make_evidence(approved_claim, Position.FOR)
    aggregator = MagicMock(spec=ClaimScoreAggregator)
    aggregator.recompute.side_effect = RuntimeError("boom")

    outcome = VoteLedger(db_session, aggregator).cast_vote(
        test_user.id, evidence.id, TargetKind.EVIDENCE, VoteType.UPVOTE
    )

    assert outcome.upvotes == 1
    assert outcome.claim_total_score is None
    assert db_session.get(Evidence, evidence.id).upvotes == 1


def test_get_user_vote(db_session, approved_claim, test_user, other_user) -> None:
    ledger = VoteLedger(db_session)
    ledger.cast_vote(test_user.id, approved_claim.id, TargetKind.CLAIM, VoteType.DOWNVOTE)

    assert ledger.get_user_vote(test_user.id, approved_claim.id, TargetKind.CLAIM) == VoteType.DOWNVOTE
    assert ledger.get_user_vote(other_user.id, approved_claim.id, TargetKind.CLAIM) is None


def test_vote_on_claim_endpoint(client, auth_token, approved_claim) -> None:
    response = client.post(
        f"/api/v1/claims/{approved_claim.id}/vote",
        json={"vote_type": "upvote"},
        headers=auth_token,
    )

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["upvotes"] == 1
    assert body["user_vote"] == "upvote"


def test_vote_requires_authentication(client, approved_claim) -> None:
    response = client.post(
        f"/api/v1/claims/{approved_claim.id}/vote",
        json={"vote_type": "upvote"},
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_vote_invalid_type(client, auth_token, approved_claim) -> None:
    response = client.post(
        f"/api/v1/claims/{approved_claim.id}/vote",
        json={"vote_type": "sideways"},
        headers=auth_token,
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_vote_on_missing_evidence_endpoint(client, auth_token) -> None:
    response = client.post(
        "/api/v1/evidence/999/vote",
        json={"vote_type": "upvote"},
        headers=auth_token,
    )

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Evidence not found"


def test_perspective_vote_endpoint_reports_claim_total(
    client, auth_token, approved_claim, make_perspective
) -> None:
    perspective = make_perspective(approved_claim, Position.AGAINST)

    response = client.post(
        f"/api/v1/perspectives/{perspective.id}/vote",
        json={"vote_type": "downvote"},
        headers=auth_token,
    )

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["downvotes"] == 1
    assert body["score"] == -1
    assert body["claim_total_score"] == -0.5


def test_reply_vote_and_my_vote(client, db_session, auth_token, other_user, approved_claim, make_evidence) -> None:
    evidence = make_evidence(approved_claim)
    reply = Reply(
        target_type=ReplyTargetType.EVIDENCE,
        target_id=evidence.id,
        user_id=other_user.id,
        body="This source is paywalled, here's a mirror.",
        links=[],
    )
    db_session.add(reply)
    db_session.commit()

    response = client.post(
        f"/api/v1/replies/{reply.id}/vote",
        json={"vote_type": "upvote"},
        headers=auth_token,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["score"] == 1

    mine = client.get(f"/api/v1/votes/reply/{reply.id}/my-vote", headers=auth_token)
    assert mine.status_code == status.HTTP_200_OK
    assert mine.json() == {"user_vote": "upvote"}


def test_list_voters_newest_first(db_session, approved_claim, test_user, other_user) -> None:
    earlier = datetime(2024, 3, 1, tzinfo=UTC)
    db_session.add_all(
        [
            ClaimVote(
                claim_id=approved_claim.id,
                user_id=test_user.id,
                vote_type=VoteType.UPVOTE,
                created_at=earlier,
            ),
            ClaimVote(
                claim_id=approved_claim.id,
                user_id=other_user.id,
                vote_type=VoteType.DOWNVOTE,
                created_at=earlier + timedelta(hours=1),
            ),
        ]
    )
    db_session.commit()
    ledger = VoteLedger(db_session)

    voters = ledger.list_voters(approved_claim.id, TargetKind.CLAIM)
    upvoters = ledger.list_voters(approved_claim.id, TargetKind.CLAIM, VoteType.UPVOTE)

    assert [(v.username, v.vote_type) for v in voters] == [
        ("bob", VoteType.DOWNVOTE),
        ("alice", VoteType.UPVOTE),
    ]
    assert [v.user_id for v in upvoters] == [test_user.id]


def test_list_voters_follows_each_target_table(
    db_session, approved_claim, make_evidence, make_perspective, other_user
) -> None:
    evidence = make_evidence(approved_claim)
    perspective = make_perspective(approved_claim)
    ledger = VoteLedger(db_session)
    ledger.cast_vote(other_user.id, evidence.id, TargetKind.EVIDENCE, VoteType.UPVOTE)

    assert [v.username for v in ledger.list_voters(evidence.id, TargetKind.EVIDENCE)] == ["bob"]
    assert ledger.list_voters(perspective.id, TargetKind.PERSPECTIVE) == []


def test_list_voters_missing_target(db_session) -> None:
    with pytest.raises(NotFoundError, match="Reply not found"):
        VoteLedger(db_session).list_voters(404, TargetKind.REPLY)


def test_voters_endpoint(client, auth_token, other_auth_token, approved_claim) -> None:
    client.post(
        f"/api/v1/claims/{approved_claim.id}/vote",
        json={"vote_type": "upvote"},
        headers=auth_token,
    )
    client.post(
        f"/api/v1/claims/{approved_claim.id}/vote",
        json={"vote_type": "downvote"},
        headers=other_auth_token,
    )

    everyone = client.get(f"/api/v1/votes/claim/{approved_claim.id}/voters")
    downvoters = client.get(
        f"/api/v1/votes/claim/{approved_claim.id}/voters",
        params={"vote_type": "downvote"},
    )

    assert everyone.status_code == status.HTTP_200_OK
    assert {item["username"] for item in everyone.json()} == {"alice", "bob"}
    (only,) = downvoters.json()
    assert only["username"] == "bob"
    assert only["vote_type"] == "downvote"


def test_voters_endpoint_unknown_kind(client, approved_claim) -> None:
    response = client.get(f"/api/v1/votes/comment/{approved_claim.id}/voters")

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
