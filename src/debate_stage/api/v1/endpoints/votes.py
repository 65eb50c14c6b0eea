"""Vote-related endpoints for the Debate Stage API.

Every votable type exposes the same three routes under its own collection
prefix; the handlers are registered once per type and delegate to the
type-agnostic :class:`~debate_stage.services.votes.VoteService`.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Query

from debate_stage.models.enums import VoteDirection, VoteTargetType
from debate_stage.schemas.vote import ClaimScore, VoteCounters, Voter, VoteRequest, VoteType
from debate_stage.services.targets import VOTE_TARGETS
from debate_stage.services.voters import list_voters
from debate_stage.services.votes import VoteOutcome

from ..dependencies import CurrentIdentityDep, SessionDep, VoteServiceDep

router = APIRouter(tags=["votes"])

COLLECTIONS: dict[VoteTargetType, str] = {
    VoteTargetType.CLAIM: "/claims",
    VoteTargetType.EVIDENCE: "/evidence",
    VoteTargetType.PERSPECTIVE: "/perspectives",
    VoteTargetType.REPLY: "/replies",
}


def _user_vote(direction: VoteDirection | None) -> str | None:
    return direction.vote_type if direction is not None else None


def _vote_response(outcome: VoteOutcome) -> dict[str, Any]:
    label = VOTE_TARGETS[outcome.target_type].label
    body: dict[str, Any] = {
        "success": True,
        label: VoteCounters.model_validate(outcome.counters).to_api(exclude_none=True),
        "userVote": _user_vote(outcome.user_vote),
    }
    if outcome.claim is not None:
        body["claim"] = ClaimScore.model_validate(outcome.claim).to_api()
    return body


def _register(target_type: VoteTargetType, collection: str) -> None:
    label = VOTE_TARGETS[target_type].label

    @router.post(f"{collection}/{{target_id}}/vote", name=f"vote_{label}")
    async def cast_vote(
        target_id: str,
        vote: VoteRequest,
        identity: CurrentIdentityDep,
        db: SessionDep,
        service: VoteServiceDep,
    ) -> dict[str, Any]:
        """Cast, switch or withdraw the caller's vote."""
        outcome = service.cast_vote(db, target_type, target_id, identity, vote.direction)
        return _vote_response(outcome)

    @router.get(f"{collection}/{{target_id}}/voters", name=f"list_{label}_voters")
    async def get_voters(
        target_id: str,
        db: SessionDep,
        vote_type: Annotated[VoteType | None, Query(alias="voteType")] = None,
    ) -> dict[str, Any]:
        """List who voted on the target, newest first."""
        direction = VoteDirection.from_vote_type(vote_type) if vote_type else None
        voters = list_voters(db, target_type, target_id, direction)
        return {
            "success": True,
            "voters": [Voter.model_validate(view).to_api() for view in voters],
        }

    @router.get(f"{collection}/{{target_id}}/my-vote", name=f"my_{label}_vote")
    async def get_my_vote(
        target_id: str,
        identity: CurrentIdentityDep,
        db: SessionDep,
        service: VoteServiceDep,
    ) -> dict[str, Any]:
        """Get the caller's current vote on the target."""
        direction = service.get_user_vote(db, target_type, target_id, identity.user_id)
        return {"success": True, "userVote": _user_vote(direction)}


for _target_type, _collection in COLLECTIONS.items():
    _register(_target_type, _collection)
