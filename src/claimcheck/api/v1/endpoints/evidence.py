"""Evidence endpoints that act on a single item."""

from fastapi import APIRouter, Response, status

from claimcheck.api.v1.dependencies import CurrentUserDep, SessionDep
from claimcheck.services.content import ContentService

router = APIRouter(prefix="/evidence", tags=["evidence"])


@router.delete("/{evidence_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_evidence(
    evidence_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Response:
    """Delete evidence; only its author or an admin may do so."""
    ContentService(db).delete_evidence(evidence_id, actor=current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
