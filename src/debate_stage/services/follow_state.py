"""Pure follow toggle logic."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FollowTransition:
    """Whether to create or delete the follow record, and the counter change."""

    create: bool
    delta: int
    is_following: bool


def decide_follow(currently_following: bool) -> FollowTransition:
    """Flip the caller's follow state."""
    if currently_following:
        return FollowTransition(create=False, delta=-1, is_following=False)
    return FollowTransition(create=True, delta=1, is_following=True)
