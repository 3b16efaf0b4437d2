from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pytest

from actor_runner.context import RequestContext


class FakeTimer:
    """Deterministic sleep/clock pair: sleeping advances the clock instantly."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def clock(self) -> float:
        return self.now


class ScriptedPlatform:
    """Test double for the upstream platform that replays a status script."""

    def __init__(
        self,
        statuses: Iterable[str | Exception] = (),
        *,
        dataset: list[Any] | None = None,
        run_id: str = "run-1",
        start_error: Exception | None = None,
    ) -> None:
        self._statuses = list(statuses)
        self.dataset = dataset if dataset is not None else []
        self.run_id = run_id
        self.start_error = start_error
        self.started: list[tuple[str, dict[str, Any]]] = []
        self.status_checks = 0
        self.dataset_fetches = 0

    async def start_run(
        self, ctx: RequestContext, actor_id: str, inputs: dict[str, Any]
    ) -> str:
        if self.start_error is not None:
            raise self.start_error
        self.started.append((actor_id, inputs))
        return self.run_id

    async def poll_run_status(self, ctx: RequestContext, actor_id: str, run_id: str) -> str:
        self.status_checks += 1
        item = self._statuses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def fetch_result_dataset(
        self, ctx: RequestContext, actor_id: str, run_id: str
    ) -> list[Any]:
        self.dataset_fetches += 1
        return list(self.dataset)


@pytest.fixture
def timer() -> FakeTimer:
    return FakeTimer()


@pytest.fixture
def ctx() -> RequestContext:
    return RequestContext(credential="token-abc")


@pytest.fixture
def scripted_platform() -> type[ScriptedPlatform]:
    return ScriptedPlatform
