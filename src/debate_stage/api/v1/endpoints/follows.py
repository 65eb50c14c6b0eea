"""Follow endpoints and user follower listings."""

from typing import Any

from fastapi import APIRouter

from debate_stage.models.enums import FollowTargetType
from debate_stage.schemas.common import UserSummary
from debate_stage.schemas.follow import FollowCount

from ..dependencies import CurrentIdentityDep, FollowServiceDep, SessionDep

router = APIRouter(tags=["follows"])

COLLECTIONS: dict[FollowTargetType, str] = {
    FollowTargetType.CLAIM: "/claims",
    FollowTargetType.EVIDENCE: "/evidence",
    FollowTargetType.PERSPECTIVE: "/perspectives",
    FollowTargetType.USER: "/users",
}


def _register(target_type: FollowTargetType, collection: str) -> None:
    label = str(target_type)

    @router.post(f"{collection}/{{target_id}}/follow", name=f"follow_{label}")
    async def toggle_follow(
        target_id: str,
        identity: CurrentIdentityDep,
        db: SessionDep,
        service: FollowServiceDep,
    ) -> dict[str, Any]:
        """Follow the target, or unfollow it if already following."""
        outcome = service.toggle_follow(db, target_type, target_id, identity)
        counts = FollowCount(id=outcome.target_id, follow_count=outcome.follow_count)
        return {
            "success": True,
            "isFollowing": outcome.is_following,
            label: counts.to_api(),
        }

    @router.get(f"{collection}/{{target_id}}/follow", name=f"is_following_{label}")
    async def get_follow_state(
        target_id: str,
        identity: CurrentIdentityDep,
        db: SessionDep,
        service: FollowServiceDep,
    ) -> dict[str, Any]:
        """Report whether the caller follows the target."""
        following = service.is_following(db, target_type, target_id, identity.user_id)
        return {"success": True, "isFollowing": following}


for _target_type, _collection in COLLECTIONS.items():
    _register(_target_type, _collection)


@router.get("/users/{user_id}/followers")
async def list_followers(
    user_id: str,
    db: SessionDep,
    service: FollowServiceDep,
) -> dict[str, Any]:
    """List the users following ``user_id``, newest first."""
    users = service.list_followers(db, user_id)
    return {
        "success": True,
        "followers": [UserSummary.model_validate(user).to_api() for user in users],
    }


@router.get("/users/{user_id}/following")
async def list_following(
    user_id: str,
    db: SessionDep,
    service: FollowServiceDep,
) -> dict[str, Any]:
    """List the users ``user_id`` follows, newest first."""
    users = service.list_following(db, user_id)
    return {
        "success": True,
        "following": [UserSummary.model_validate(user).to_api() for user in users],
    }
