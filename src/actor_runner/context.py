"""Request-scoped context passed to upstream and orchestration calls."""

from __future__ import annotations

from dataclasses import dataclass

from actor_runner.errors import AuthRequiredError

BEARER_PREFIX = "bearer "


@dataclass(frozen=True)
class RequestContext:
    credential: str

    def __repr__(self) -> str:
        return "RequestContext(credential=***)"

    @classmethod
    def from_authorization(cls, header: str | None) -> RequestContext:
        """Build a context from an ``Authorization: Bearer <token>`` header."""
        if not header or not header.lower().startswith(BEARER_PREFIX):
            raise AuthRequiredError()
        token = header[len(BEARER_PREFIX) :].strip()
        if not token:
            raise AuthRequiredError()
        return cls(credential=token)
