"""Error taxonomy shared by the upstream client, orchestrator and gateway.

Each error carries the HTTP status the gateway answers with, so route handlers
never map error kinds themselves.
"""

from __future__ import annotations


class ActorRunnerError(Exception):
    """Base class for errors the gateway turns into JSON responses."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ActorRunnerError):
    """A required request field is missing or malformed."""

    status_code = 400
    default_message = "Invalid request"


class AuthRequiredError(ActorRunnerError):
    """No bearer credential was supplied with the request."""

    status_code = 401
    default_message = "API key required"


class AuthError(ActorRunnerError):
    """The upstream platform rejected the credential."""

    status_code = 401
    default_message = "Invalid API key or authentication failed"


class UpstreamError(ActorRunnerError):
    """Any other upstream or transport failure."""

    status_code = 500
    default_message = "API request failed"

    def __init__(self, message: str | None = None, *, upstream_status: int | None = None) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status


class RunStartError(UpstreamError):
    """The upstream platform refused to start a run."""


class InvalidTransitionError(RuntimeError):
    """A run record was asked to move backwards or skip a state."""
