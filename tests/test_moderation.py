# tests/test_moderation.py
"""Tests for the claim moderation state machine and content status changes."""

import pytest

from claimcheck.core.errors import ConflictError, NotFoundError, ValidationError
from claimcheck.models import (
    Claim,
    ContentStatus,
    ModerationAction,
    ModerationLog,
    Position,
)
from claimcheck.repositories.claim_repo import ClaimRepository
from claimcheck.services.moderation import ClaimEdits, ModerationWorkflow
from claimcheck.services.notifications import NotificationType, get_notification_dispatcher


def _logs(db_session, target_type: str = "claim") -> list[ModerationLog]:
    return db_session.query(ModerationLog).filter_by(target_type=target_type).all()


def test_approve_without_edits(db_session, pending_claim, moderator) -> None:
    claim = ModerationWorkflow(db_session).approve(pending_claim.id, moderator.id)

    assert claim.status == ContentStatus.APPROVED
    assert claim.title_edited is False
    assert claim.original_title is None
    logs = _logs(db_session)
    assert len(logs) == 1
    assert logs[0].action == ModerationAction.APPROVE_CLAIM
    assert logs[0].moderator_id == moderator.id


def test_approve_with_title_edit_records_audit(db_session, pending_claim, moderator) -> None:
    edits = ClaimEdits(title="Coffee stunts growth", title_edit_reason="Neutral wording")

    claim = ModerationWorkflow(db_session).approve(pending_claim.id, moderator.id, edits)

    assert claim.title == "Coffee stunts growth"
    assert claim.original_title == "Drinking coffee stunts growth"
    assert claim.title_edited is True
    assert claim.title_edited_by == moderator.id
    assert claim.title_edited_at is not None
    assert claim.title_edit_reason == "Neutral wording"
    assert claim.description_edited is False


def test_approve_title_edit_without_reason_fails(db_session, pending_claim, moderator) -> None:
    edits = ClaimEdits(title="Coffee stunts growth")

    with pytest.raises(ValidationError):
        ModerationWorkflow(db_session).approve(pending_claim.id, moderator.id, edits)

    db_session.refresh(pending_claim)
    assert pending_claim.status == ContentStatus.PENDING
    assert pending_claim.title == "Drinking coffee stunts growth"
    assert _logs(db_session) == []


def test_approve_description_edit_with_blank_reason_fails(
    db_session, pending_claim, moderator
) -> None:
    edits = ClaimEdits(description="Rewritten", description_edit_reason="   ")

    with pytest.raises(ValidationError):
        ModerationWorkflow(db_session).approve(pending_claim.id, moderator.id, edits)

    db_session.refresh(pending_claim)
    assert pending_claim.status == ContentStatus.PENDING


def test_unchanged_title_needs_no_reason(db_session, pending_claim, moderator) -> None:
    edits = ClaimEdits(title="Drinking coffee stunts growth")

    claim = ModerationWorkflow(db_session).approve(pending_claim.id, moderator.id, edits)

    assert claim.status == ContentStatus.APPROVED
    assert claim.title_edited is False


def test_approve_with_empty_title_fails(db_session, pending_claim, moderator) -> None:
    with pytest.raises(ValidationError):
        ModerationWorkflow(db_session).approve(
            pending_claim.id, moderator.id, ClaimEdits(title="  ", title_edit_reason="x")
        )


def test_original_title_survives_repeated_edits(
    db_session, make_claim, moderator
) -> None:
    claim = make_claim(
        title="Second wording",
        status=ContentStatus.PENDING,
        original_title="First wording",
        title_edited=True,
    )
    edits = ClaimEdits(title="Third wording", title_edit_reason="Typo")

    approved = ModerationWorkflow(db_session).approve(claim.id, moderator.id, edits)

    assert approved.title == "Third wording"
    assert approved.original_title == "First wording"


def test_double_approve_conflicts_with_single_log(db_session, pending_claim, moderator) -> None:
    workflow = ModerationWorkflow(db_session)
    workflow.approve(pending_claim.id, moderator.id)

    with pytest.raises(ConflictError):
        workflow.approve(pending_claim.id, moderator.id)

    assert len(_logs(db_session)) == 1


def test_lost_race_raises_conflict_without_log(
    db_session, pending_claim, moderator, mocker
) -> None:
    mocker.patch.object(ClaimRepository, "transition_status", return_value=False)

    with pytest.raises(ConflictError):
        ModerationWorkflow(db_session).approve(pending_claim.id, moderator.id)

    assert _logs(db_session) == []


def test_approve_missing_claim(db_session, moderator) -> None:
    with pytest.raises(NotFoundError):
        ModerationWorkflow(db_session).approve(12345, moderator.id)


def test_approve_notifies_author_and_broadcasts(db_session, pending_claim, moderator) -> None:
    events = []
    get_notification_dispatcher().register(events.append)

    ModerationWorkflow(db_session).approve(pending_claim.id, moderator.id)

    assert [event.type for event in events] == [
        NotificationType.CLAIM_APPROVED,
        NotificationType.NEW_CLAIM,
    ]
    assert events[0].user_id == pending_claim.user_id
    assert events[1].user_id is None


def test_failing_notification_handler_does_not_break_approval(
    db_session, pending_claim, moderator
) -> None:
    def explode(event) -> None:
        raise RuntimeError("mailer down")

    get_notification_dispatcher().register(explode)

    claim = ModerationWorkflow(db_session).approve(pending_claim.id, moderator.id)

    assert claim.status == ContentStatus.APPROVED


@pytest.mark.parametrize("reason", ["", "   ", None])
def test_reject_requires_reason(db_session, pending_claim, moderator, reason) -> None:
    with pytest.raises(ValidationError):
        ModerationWorkflow(db_session).reject(pending_claim.id, moderator.id, reason)

    db_session.refresh(pending_claim)
    assert pending_claim.status == ContentStatus.PENDING
    assert _logs(db_session) == []


def test_reject_stores_feedback_and_logs(db_session, pending_claim, moderator) -> None:
    events = []
    get_notification_dispatcher().register(events.append)

    claim = ModerationWorkflow(db_session).reject(
        pending_claim.id,
        moderator.id,
        "Not a factual statement",
        rejection_feedback="Please rephrase as a checkable claim",
        notify_user=True,
        metadata={"source": "queue"},
    )

    assert claim.status == ContentStatus.REJECTED
    assert claim.rejection_feedback == "Please rephrase as a checkable claim"
    (log,) = _logs(db_session)
    assert log.action == ModerationAction.REJECT_CLAIM
    assert log.reason == "Not a factual statement"
    assert log.details == {"source": "queue"}
    assert events[0].type == NotificationType.CLAIM_REJECTED
    assert events[0].message == "Please rephrase as a checkable claim"


def test_reject_without_notify_sends_nothing(db_session, pending_claim, moderator) -> None:
    events = []
    get_notification_dispatcher().register(events.append)

    ModerationWorkflow(db_session).reject(pending_claim.id, moderator.id, "Duplicate")

    assert events == []


def test_flag_requires_reason(db_session, pending_claim, moderator) -> None:
    with pytest.raises(ValidationError):
        ModerationWorkflow(db_session).flag(pending_claim.id, moderator.id, "")


def test_flag_pending_claim(db_session, pending_claim, moderator) -> None:
    claim = ModerationWorkflow(db_session).flag(
        pending_claim.id, moderator.id, "Needs a second opinion"
    )

    assert claim.status == ContentStatus.FLAGGED
    (log,) = _logs(db_session)
    assert log.action == ModerationAction.FLAG_CLAIM


def test_flagged_claim_cannot_be_approved(db_session, pending_claim, moderator) -> None:
    workflow = ModerationWorkflow(db_session)
    workflow.flag(pending_claim.id, moderator.id, "Suspicious")

    with pytest.raises(ConflictError):
        workflow.approve(pending_claim.id, moderator.id)


def test_rejecting_evidence_lowers_claim_score(
    db_session, approved_claim, make_evidence, moderator
) -> None:
    make_evidence(approved_claim, Position.FOR)
    doomed = make_evidence(approved_claim, Position.FOR, upvotes=20)
    approved_claim.total_score = 3.0
    db_session.commit()

    item = ModerationWorkflow(db_session).set_content_status(
        "evidence", doomed.id, moderator.id, ContentStatus.REJECTED, reason="Fabricated source"
    )

    assert item.status == ContentStatus.REJECTED
    db_session.refresh(approved_claim)
    assert approved_claim.total_score == 1.0
    (log,) = _logs(db_session, "evidence")
    assert log.action == ModerationAction.REJECT_EVIDENCE
    assert log.details["previous_status"] == "approved"


def test_approving_perspective_raises_claim_score(
    db_session, approved_claim, make_perspective, moderator
) -> None:
    perspective = make_perspective(
        approved_claim, Position.AGAINST, status=ContentStatus.FLAGGED
    )

    ModerationWorkflow(db_session).set_content_status(
        "perspective", perspective.id, moderator.id, ContentStatus.APPROVED
    )

    db_session.refresh(approved_claim)
    assert approved_claim.total_score == -0.5
    (log,) = _logs(db_session, "perspective")
    assert log.action == ModerationAction.APPROVE_PERSPECTIVE


def test_content_status_rejects_pending_target(db_session, approved_claim, make_evidence, moderator) -> None:
    evidence = make_evidence(approved_claim)

    with pytest.raises(ValidationError):
        ModerationWorkflow(db_session).set_content_status(
            "evidence", evidence.id, moderator.id, ContentStatus.PENDING, reason="x"
        )


def test_content_status_requires_reason_for_flag(
    db_session, approved_claim, make_evidence, moderator
) -> None:
    evidence = make_evidence(approved_claim)

    with pytest.raises(ValidationError):
        ModerationWorkflow(db_session).set_content_status(
            "evidence", evidence.id, moderator.id, ContentStatus.FLAGGED
        )

    db_session.refresh(evidence)
    assert evidence.status == ContentStatus.APPROVED


def test_content_status_unknown_item(db_session, moderator) -> None:
    with pytest.raises(NotFoundError):
        ModerationWorkflow(db_session).set_content_status(
            "perspective", 777, moderator.id, ContentStatus.APPROVED
        )


def test_reject_recomputes_claim_score(db_session, pending_claim, make_evidence, moderator) -> None:
    make_evidence(pending_claim, Position.AGAINST)

    ModerationWorkflow(db_session).reject(pending_claim.id, moderator.id, "Off topic")

    claim = db_session.get(Claim, pending_claim.id)
    assert claim.total_score == -1.0
