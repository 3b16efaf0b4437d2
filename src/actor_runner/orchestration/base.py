"""Upstream interface the run orchestrator depends on."""

from __future__ import annotations

from typing import Any, Protocol

from actor_runner.context import RequestContext


class RunPlatform(Protocol):
    async def start_run(
        self, ctx: RequestContext, actor_id: str, inputs: dict[str, Any]
    ) -> str: ...

    async def poll_run_status(self, ctx: RequestContext, actor_id: str, run_id: str) -> str: ...

    async def fetch_result_dataset(
        self, ctx: RequestContext, actor_id: str, run_id: str
    ) -> list[Any]: ...
