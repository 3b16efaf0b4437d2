"""Run orchestration: start a remote run, poll it, collect bounded results."""

from actor_runner.orchestration.base import RunPlatform
from actor_runner.orchestration.models import RunOutcome, RunRecord, RunState
from actor_runner.orchestration.run import RunOrchestrator

__all__ = [
    "RunOrchestrator",
    "RunOutcome",
    "RunPlatform",
    "RunRecord",
    "RunState",
]
