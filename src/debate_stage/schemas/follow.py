"""Follow-related Pydantic schemas."""

from .common import CamelModel


class FollowCount(CamelModel):
    """Follow counter of the followed target."""

    id: int
    follow_count: int
