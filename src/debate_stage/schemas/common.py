"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys; accepts either spelling on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_api(self, **kwargs: Any) -> dict[str, Any]:
        """Dump with API aliases and JSON-ready values."""
        return self.model_dump(mode="json", by_alias=True, **kwargs)


class ErrorResponse(BaseModel):
    """Body returned for every handled error."""

    success: bool = False
    error: str = Field(..., description="Human-readable error message")
    details: list[dict[str, Any]] | None = None


class UserSummary(CamelModel):
    """Public profile fields embedded in voter and follower listings."""

    id: int
    username: str
    first_name: str | None = None
    last_name: str | None = None
    avatar_url: str | None = None
