"""Content lifecycle endpoints that trigger claim score recomputation."""

from typing import Any

from fastapi import APIRouter, status

from debate_stage.schemas.content import (
    EvidenceResponse,
    PerspectiveCreate,
    PerspectiveResponse,
    StatusUpdate,
)
from debate_stage.schemas.vote import ClaimScore
from debate_stage.services.content import ContentOutcome

from ..dependencies import ContentServiceDep, CurrentIdentityDep, SessionDep

router = APIRouter(tags=["content"])


def _with_claim(body: dict[str, Any], outcome: ContentOutcome) -> dict[str, Any]:
    if outcome.claim is not None:
        body["claim"] = ClaimScore.model_validate(outcome.claim).to_api()
    return body


@router.post("/claims/{claim_id}/perspectives", status_code=status.HTTP_201_CREATED)
async def create_perspective(
    claim_id: str,
    payload: PerspectiveCreate,
    identity: CurrentIdentityDep,
    db: SessionDep,
    service: ContentServiceDep,
) -> dict[str, Any]:
    """Attach a perspective to a claim."""
    outcome = service.create_perspective(
        db,
        claim_id,
        identity,
        body=payload.body,
        position=payload.position,
        title=payload.title,
    )
    perspective = PerspectiveResponse.model_validate(outcome.entity).to_api()
    return _with_claim({"success": True, "perspective": perspective}, outcome)


@router.patch("/perspectives/{perspective_id}/status")
async def update_perspective_status(
    perspective_id: str,
    payload: StatusUpdate,
    identity: CurrentIdentityDep,
    db: SessionDep,
    service: ContentServiceDep,
) -> dict[str, Any]:
    """Change a perspective's moderation status (moderators and admins)."""
    outcome = service.set_perspective_status(db, perspective_id, identity, payload.status)
    perspective = PerspectiveResponse.model_validate(outcome.entity).to_api()
    return _with_claim({"success": True, "perspective": perspective}, outcome)


@router.patch("/evidence/{evidence_id}/status")
async def update_evidence_status(
    evidence_id: str,
    payload: StatusUpdate,
    identity: CurrentIdentityDep,
    db: SessionDep,
    service: ContentServiceDep,
) -> dict[str, Any]:
    """Change an evidence item's moderation status (moderators and admins)."""
    outcome = service.set_evidence_status(db, evidence_id, identity, payload.status)
    evidence = EvidenceResponse.model_validate(outcome.entity).to_api()
    return _with_claim({"success": True, "evidence": evidence}, outcome)


@router.delete("/evidence/{evidence_id}")
async def delete_evidence(
    evidence_id: str,
    identity: CurrentIdentityDep,
    db: SessionDep,
    service: ContentServiceDep,
) -> dict[str, Any]:
    """Delete evidence along with its votes and follows."""
    outcome = service.delete_evidence(db, evidence_id, identity)
    return _with_claim({"success": True, "message": "Evidence deleted"}, outcome)
