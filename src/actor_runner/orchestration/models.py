"""Run lifecycle state and the response shape returned to callers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from actor_runner.errors import InvalidTransitionError

# Upstream status vocabulary the orchestrator interprets; every other value is
# treated as terminal without results.
UPSTREAM_RUNNING = "RUNNING"
UPSTREAM_SUCCEEDED = "SUCCEEDED"

# Reported when the attempt budget runs out; not part of the upstream vocabulary.
TIMEOUT_STATUS = "TIMEOUT"
TIMEOUT_MESSAGE = "Run is still in progress. Please check manually."


class RunState(str, Enum):
    STARTING = "STARTING"
    POLLING = "POLLING"
    SUCCEEDED = "SUCCEEDED"
    FAILED_TERMINAL = "FAILED_TERMINAL"
    TIMED_OUT = "TIMED_OUT"

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self]


_TRANSITIONS: dict[RunState, frozenset[RunState]] = {
    RunState.STARTING: frozenset({RunState.POLLING}),
    RunState.POLLING: frozenset(
        {RunState.SUCCEEDED, RunState.FAILED_TERMINAL, RunState.TIMED_OUT}
    ),
    RunState.SUCCEEDED: frozenset(),
    RunState.FAILED_TERMINAL: frozenset(),
    RunState.TIMED_OUT: frozenset(),
}


@dataclass
class RunRecord:
    """Mutable state for one start/poll/fetch cycle. Never shared across requests."""

    actor_id: str
    state: RunState = RunState.STARTING
    run_id: str | None = None
    started_at: float | None = None
    attempts: int = 0
    upstream_status: str | None = None
    results: list[Any] = field(default_factory=list)

    def transition(self, target: RunState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise InvalidTransitionError(
                f"Run {self.run_id or '<unstarted>'} cannot move from "
                f"{self.state.value} to {target.value}"
            )
        self.state = target

    def begin_polling(self, run_id: str, started_at: float) -> None:
        self.transition(RunState.POLLING)
        self.run_id = run_id
        self.started_at = started_at
        self.attempts = 0

    def duration_ms(self, now: float) -> int:
        if self.started_at is None:
            return 0
        return max(0, round((now - self.started_at) * 1000))


class RunOutcome(BaseModel):
    """Terminal response for one run request."""

    model_config = ConfigDict(populate_by_name=True)

    run_id: str = Field(alias="runId")
    status: str
    duration: int = Field(ge=0)
    results: list[Any] | None = None
    message: str | None = None
