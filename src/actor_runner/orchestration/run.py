"""Start/poll/fetch state machine for a single actor run."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable

from actor_runner.context import RequestContext
from actor_runner.errors import UpstreamError
from actor_runner.orchestration.base import RunPlatform
from actor_runner.orchestration.models import (
    TIMEOUT_MESSAGE,
    TIMEOUT_STATUS,
    UPSTREAM_RUNNING,
    UPSTREAM_SUCCEEDED,
    RunOutcome,
    RunRecord,
    RunState,
)

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[Any]]
ClockFn = Callable[[], float]


class RunOrchestrator:
    """Drive one remote run from start to a terminal response.

    The poll loop sleeps ``poll_interval_s`` before every status check,
    including the first, and gives up after ``max_attempts`` checks that still
    report ``RUNNING``. Giving up is not an error: the caller gets a
    ``TIMEOUT`` outcome and may check the run later.

    Upstream failures while starting or polling abort the orchestration. Set
    ``poll_transport_retries`` to re-issue a status check that failed at the
    transport level; retries do not count against ``max_attempts``.
    """

    def __init__(
        self,
        client: RunPlatform,
        *,
        poll_interval_s: float = 5.0,
        max_attempts: int = 60,
        result_limit: int = 10,
        poll_transport_retries: int = 0,
        sleep: SleepFn = asyncio.sleep,
        clock: ClockFn = time.monotonic,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.client = client
        self.poll_interval_s = poll_interval_s
        self.max_attempts = max_attempts
        self.result_limit = result_limit
        self.poll_transport_retries = poll_transport_retries
        self._sleep = sleep
        self._clock = clock

    async def run(
        self, ctx: RequestContext, actor_id: str, inputs: dict[str, Any]
    ) -> RunOutcome:
        record = RunRecord(actor_id=actor_id)

        run_id = await self.client.start_run(ctx, actor_id, inputs)
        record.begin_polling(run_id, started_at=self._clock())
        logger.info("run event=started actor_id=%s run_id=%s", actor_id, run_id)

        await self._poll_until_terminal(ctx, record)

        if record.state is RunState.SUCCEEDED:
            dataset = await self.client.fetch_result_dataset(ctx, actor_id, run_id)
            record.results = list(dataset[: self.result_limit])

        return self._outcome(record)

    async def _poll_until_terminal(self, ctx: RequestContext, record: RunRecord) -> None:
        while record.state is RunState.POLLING:
            await self._sleep(self.poll_interval_s)
            record.attempts += 1
            status = await self._check_status(ctx, record)
            record.upstream_status = status
            logger.info(
                "run event=poll run_id=%s attempt=%s status=%s",
                record.run_id,
                record.attempts,
                status,
            )

            if status == UPSTREAM_RUNNING:
                if record.attempts >= self.max_attempts:
                    record.transition(RunState.TIMED_OUT)
            elif status == UPSTREAM_SUCCEEDED:
                record.transition(RunState.SUCCEEDED)
            else:
                record.transition(RunState.FAILED_TERMINAL)

    async def _check_status(self, ctx: RequestContext, record: RunRecord) -> str:
        assert record.run_id is not None
        retries_left = self.poll_transport_retries
        while True:
            try:
                return await self.client.poll_run_status(ctx, record.actor_id, record.run_id)
            except UpstreamError as exc:
                if retries_left <= 0 or not _is_transient(exc):
                    raise
                retries_left -= 1
                logger.warning(
                    "run event=poll_retry run_id=%s attempt=%s error=%s",
                    record.run_id,
                    record.attempts,
                    exc.message,
                )
                await self._sleep(self.poll_interval_s)

    def _outcome(self, record: RunRecord) -> RunOutcome:
        assert record.run_id is not None
        duration = record.duration_ms(self._clock())
        logger.info(
            "run event=terminal run_id=%s state=%s status=%s attempts=%s duration_ms=%s",
            record.run_id,
            record.state.value,
            record.upstream_status,
            record.attempts,
            duration,
        )

        if record.state is RunState.TIMED_OUT:
            return RunOutcome(
                run_id=record.run_id,
                status=TIMEOUT_STATUS,
                message=TIMEOUT_MESSAGE,
                duration=duration,
            )
        return RunOutcome(
            run_id=record.run_id,
            status=record.upstream_status or "",
            results=record.results,
            duration=duration,
        )


def _is_transient(exc: UpstreamError) -> bool:
    """Transport failures and upstream 5xx answers are worth re-checking."""
    return exc.upstream_status is None or exc.upstream_status >= 500
