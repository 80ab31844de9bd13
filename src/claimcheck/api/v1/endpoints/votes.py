"""Vote endpoints for evidence, perspectives and replies, plus vote and voter lookups."""

from fastapi import APIRouter, Query

from claimcheck.api.v1.dependencies import CurrentUserDep, SessionDep
from claimcheck.models import VoteType
from claimcheck.schemas import MyVoteResponse, VoteCreate, VoterResponse, VoteResponse
from claimcheck.services.votes import TargetKind, VoteLedger, VoteOutcome

router = APIRouter(tags=["votes"])


def to_vote_response(outcome: VoteOutcome) -> VoteResponse:
    """Convert a ledger outcome to the API schema."""
    return VoteResponse(
        upvotes=outcome.upvotes,
        downvotes=outcome.downvotes,
        user_vote=outcome.user_vote,
        score=outcome.score,
        claim_id=outcome.claim_id,
        claim_total_score=outcome.claim_total_score,
    )


@router.post("/evidence/{evidence_id}/vote", response_model=VoteResponse)
async def vote_on_evidence(
    evidence_id: int,
    payload: VoteCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> VoteResponse:
    """Vote on evidence; the owning claim's score is recomputed."""
    outcome = VoteLedger(db).cast_vote(
        current_user.id, evidence_id, TargetKind.EVIDENCE, payload.vote_type
    )
    return to_vote_response(outcome)


@router.post("/perspectives/{perspective_id}/vote", response_model=VoteResponse)
async def vote_on_perspective(
    perspective_id: int,
    payload: VoteCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> VoteResponse:
    """Vote on a perspective; the owning claim's score is recomputed."""
    outcome = VoteLedger(db).cast_vote(
        current_user.id, perspective_id, TargetKind.PERSPECTIVE, payload.vote_type
    )
    return to_vote_response(outcome)


@router.post("/replies/{reply_id}/vote", response_model=VoteResponse)
async def vote_on_reply(
    reply_id: int,
    payload: VoteCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> VoteResponse:
    outcome = VoteLedger(db).cast_vote(
        current_user.id, reply_id, TargetKind.REPLY, payload.vote_type
    )
    return to_vote_response(outcome)


@router.get("/votes/{kind}/{target_id}/my-vote", response_model=MyVoteResponse)
async def get_my_vote(
    kind: TargetKind,
    target_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MyVoteResponse:
    """Get the current user's vote on a target."""
    vote = VoteLedger(db).get_user_vote(current_user.id, target_id, kind)
    return MyVoteResponse(user_vote=vote)


@router.get("/votes/{kind}/{target_id}/voters", response_model=list[VoterResponse])
async def list_voters(
    kind: TargetKind,
    target_id: int,
    db: SessionDep,
    vote_type: VoteType | None = Query(None),
) -> list[VoterResponse]:
    """List who voted on a target, newest first."""
    voters = VoteLedger(db).list_voters(target_id, kind, vote_type)
    return [VoterResponse.model_validate(voter) for voter in voters]
