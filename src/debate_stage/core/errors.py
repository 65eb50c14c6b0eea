"""Exception taxonomy shared by the services and the HTTP layer.

Services raise these; ``debate_stage.main`` maps the surfaced ones to HTTP
responses. ``AggregationError`` and ``NotificationError`` belong to side
effects and are caught and logged before they can reach a client.
"""

from __future__ import annotations


class DebateStageError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(DebateStageError):
    """Malformed identifier, malformed body, or a disallowed request."""

    status_code = 400


class AuthError(DebateStageError):
    """Missing or invalid caller identity."""

    status_code = 401


class PermissionDeniedError(DebateStageError):
    """Authenticated caller lacks the role or ownership an action requires."""

    status_code = 403


class NotFoundError(DebateStageError):
    """The addressed target does not exist."""

    status_code = 404


class AggregationError(DebateStageError):
    """Recomputing a claim's total score failed."""


class NotificationError(DebateStageError):
    """Delivering a notification failed."""
