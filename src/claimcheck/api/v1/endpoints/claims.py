"""Claim endpoints: submission, reads, content listings and direct claim votes."""

from fastapi import APIRouter, Query, status

from claimcheck.api.v1.dependencies import CurrentUserDep, OptionalUserDep, SessionDep
from claimcheck.models import Claim, ContentStatus, Position, User
from claimcheck.repositories import ClaimSort, ContentSort
from claimcheck.schemas import (
    ClaimAuditResponse,
    ClaimCreate,
    ClaimResponse,
    EvidenceCreate,
    EvidenceResponse,
    PerspectiveCreate,
    PerspectiveResponse,
    VoteCreate,
    VoteResponse,
)
from claimcheck.services.content import ContentService
from claimcheck.services.votes import TargetKind, VoteLedger

from .votes import to_vote_response

router = APIRouter(prefix="/claims", tags=["claims"])


def _present(claim: Claim, viewer: User | None) -> ClaimResponse:
    """Include the audit trail only for moderators and the claim's author."""
    if viewer is not None and (viewer.is_moderator or viewer.id == claim.user_id):
        return ClaimAuditResponse.model_validate(claim)
    return ClaimResponse.model_validate(claim)


@router.post("/", response_model=ClaimAuditResponse, status_code=status.HTTP_201_CREATED)
async def submit_claim(
    payload: ClaimCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ClaimResponse:
    """Submit a claim for moderation."""
    claim = ContentService(db).submit_claim(
        user_id=current_user.id,
        title=payload.title,
        description=payload.description,
        category_id=payload.category_id,
    )
    return _present(claim, current_user)


@router.get("/", response_model=list[ClaimResponse])
async def list_claims(
    db: SessionDep,
    claim_status: ContentStatus = Query(ContentStatus.APPROVED, alias="status"),
    category: str | None = Query(None, description="Category slug"),
    search: str | None = Query(None, max_length=200),
    sort_by: ClaimSort = Query(ClaimSort.NEWEST, alias="sortBy"),
    limit: int = Query(50, ge=1, le=100),
    before: int | None = Query(None),
) -> list[ClaimResponse]:
    """List claims, newest first by default."""
    claims = ContentService(db).list_claims(
        claim_status,
        category=category,
        search=search,
        sort=sort_by,
        limit=limit,
        before=before,
    )
    return [ClaimResponse.model_validate(claim) for claim in claims]


@router.get(
    "/{claim_id}",
    response_model=ClaimAuditResponse,
    # Audit fields stay unset, and so omitted, for the public view.
    response_model_exclude_unset=True,
)
async def get_claim(
    claim_id: int,
    db: SessionDep,
    viewer: OptionalUserDep,
) -> ClaimResponse:
    """Fetch a claim with a freshly recomputed score."""
    claim = ContentService(db).get_claim(claim_id)
    return _present(claim, viewer)


@router.post("/{claim_id}/vote", response_model=VoteResponse)
async def vote_on_claim(
    claim_id: int,
    payload: VoteCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> VoteResponse:
    """Cast, switch or withdraw a direct vote on a claim."""
    outcome = VoteLedger(db).cast_vote(
        current_user.id, claim_id, TargetKind.CLAIM, payload.vote_type
    )
    return to_vote_response(outcome)


@router.post(
    "/{claim_id}/evidence",
    response_model=EvidenceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_evidence(
    claim_id: int,
    payload: EvidenceCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> EvidenceResponse:
    """Attach evidence to a claim."""
    evidence = ContentService(db).add_evidence(
        claim_id=claim_id,
        user_id=current_user.id,
        position=payload.position,
        evidence_type=payload.evidence_type,
        title=payload.title,
        description=payload.description,
        url=payload.url,
    )
    return EvidenceResponse.model_validate(evidence)


@router.post(
    "/{claim_id}/perspectives",
    response_model=PerspectiveResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_perspective(
    claim_id: int,
    payload: PerspectiveCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> PerspectiveResponse:
    """Attach a perspective to a claim."""
    perspective = ContentService(db).add_perspective(
        claim_id=claim_id,
        user_id=current_user.id,
        position=payload.position,
        body=payload.body,
        title=payload.title,
        source_url=payload.source_url,
    )
    return PerspectiveResponse.model_validate(perspective)


@router.get("/{claim_id}/evidence", response_model=list[EvidenceResponse])
async def list_evidence(
    claim_id: int,
    db: SessionDep,
    position: Position | None = Query(None),
    sort: ContentSort = Query(ContentSort.RECENT),
    limit: int = Query(50, ge=1, le=100),
) -> list[EvidenceResponse]:
    """List approved and pending evidence for a claim."""
    items = ContentService(db).list_evidence(
        claim_id, position=position, sort=sort, limit=limit
    )
    return [EvidenceResponse.model_validate(item) for item in items]


@router.get("/{claim_id}/perspectives", response_model=list[PerspectiveResponse])
async def list_perspectives(
    claim_id: int,
    db: SessionDep,
    position: Position | None = Query(None),
    sort: ContentSort = Query(ContentSort.RECENT),
    limit: int = Query(50, ge=1, le=100),
) -> list[PerspectiveResponse]:
    """List approved and pending perspectives for a claim."""
    items = ContentService(db).list_perspectives(
        claim_id, position=position, sort=sort, limit=limit
    )
    return [PerspectiveResponse.model_validate(item) for item in items]
