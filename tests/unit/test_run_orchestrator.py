import asyncio

import pytest

from actor_runner.errors import InvalidTransitionError, RunStartError, UpstreamError
from actor_runner.orchestration import RunOrchestrator, RunRecord, RunState


def _orchestrator(platform, timer, **kwargs) -> RunOrchestrator:
    return RunOrchestrator(platform, sleep=timer.sleep, clock=timer.clock, **kwargs)


@pytest.mark.parametrize("running_polls", [0, 1, 5, 59])
def test_polls_once_per_running_status_then_succeeds(
    running_polls, timer, ctx, scripted_platform
) -> None:
    platform = scripted_platform(["RUNNING"] * running_polls + ["SUCCEEDED"], dataset=[{"a": 1}])
    orchestrator = _orchestrator(platform, timer)

    outcome = asyncio.run(orchestrator.run(ctx, "actor-x", {"q": "x"}))

    assert outcome.status == "SUCCEEDED"
    assert platform.status_checks == running_polls + 1
    assert timer.sleeps == [5.0] * (running_polls + 1)
    assert platform.dataset_fetches == 1
    assert outcome.results == [{"a": 1}]


def test_sleeps_before_first_status_check(timer, ctx, scripted_platform) -> None:
    platform = scripted_platform(["SUCCEEDED"])
    orchestrator = _orchestrator(platform, timer, poll_interval_s=2.5)

    outcome = asyncio.run(orchestrator.run(ctx, "actor-x", {}))

    assert timer.sleeps == [2.5]
    assert outcome.duration == 2500


def test_attempt_budget_exhaustion_times_out_without_fetching(
    timer, ctx, scripted_platform
) -> None:
    platform = scripted_platform(["RUNNING"] * 60, dataset=[1, 2, 3])
    orchestrator = _orchestrator(platform, timer)

    outcome = asyncio.run(orchestrator.run(ctx, "actor-x", {}))

    assert outcome.status == "TIMEOUT"
    assert outcome.message == "Run is still in progress. Please check manually."
    assert outcome.results is None
    assert outcome.duration == 300_000
    assert platform.status_checks == 60
    assert platform.dataset_fetches == 0


def test_results_are_truncated_in_dataset_order(timer, ctx, scripted_platform) -> None:
    dataset = [{"index": i} for i in range(25)]
    platform = scripted_platform(["SUCCEEDED"], dataset=dataset)
    orchestrator = _orchestrator(platform, timer)

    outcome = asyncio.run(orchestrator.run(ctx, "actor-x", {}))

    assert outcome.results == dataset[:10]


def test_short_dataset_is_returned_whole(timer, ctx, scripted_platform) -> None:
    platform = scripted_platform(["SUCCEEDED"], dataset=["a", "b", "c"])
    orchestrator = _orchestrator(platform, timer)

    outcome = asyncio.run(orchestrator.run(ctx, "actor-x", {}))

    assert outcome.results == ["a", "b", "c"]


def test_empty_dataset_still_reports_success(timer, ctx, scripted_platform) -> None:
    platform = scripted_platform(["RUNNING", "SUCCEEDED"], dataset=[])
    orchestrator = _orchestrator(platform, timer)

    outcome = asyncio.run(orchestrator.run(ctx, "actor-x", {}))

    assert outcome.status == "SUCCEEDED"
    assert outcome.results == []


@pytest.mark.parametrize("terminal", ["FAILED", "ABORTED", "TIMED-OUT", "SOMETHING-NEW"])
def test_other_terminal_statuses_pass_through_without_results(
    terminal, timer, ctx, scripted_platform
) -> None:
    platform = scripted_platform(["RUNNING", terminal], dataset=[1, 2])
    orchestrator = _orchestrator(platform, timer)

    outcome = asyncio.run(orchestrator.run(ctx, "actor-x", {}))

    assert outcome.status == terminal
    assert outcome.results == []
    assert outcome.duration == 10_000
    assert platform.dataset_fetches == 0


def test_start_failure_propagates_before_polling(timer, ctx, scripted_platform) -> None:
    platform = scripted_platform(start_error=RunStartError("Actor not found", upstream_status=404))
    orchestrator = _orchestrator(platform, timer)

    with pytest.raises(RunStartError, match="Actor not found"):
        asyncio.run(orchestrator.run(ctx, "missing", {}))

    assert platform.status_checks == 0
    assert timer.sleeps == []


def test_poll_failure_aborts_orchestration_by_default(timer, ctx, scripted_platform) -> None:
    platform = scripted_platform(["RUNNING", UpstreamError("Network error occurred")])
    orchestrator = _orchestrator(platform, timer)

    with pytest.raises(UpstreamError, match="Network error occurred"):
        asyncio.run(orchestrator.run(ctx, "actor-x", {}))

    assert platform.status_checks == 2
    assert platform.dataset_fetches == 0


def test_poll_transport_retries_reissue_check_without_spending_attempts(
    timer, ctx, scripted_platform
) -> None:
    platform = scripted_platform(
        ["RUNNING", UpstreamError("Network error occurred"), "RUNNING"], dataset=[]
    )
    orchestrator = _orchestrator(platform, timer, max_attempts=2, poll_transport_retries=1)

    outcome = asyncio.run(orchestrator.run(ctx, "actor-x", {}))

    assert outcome.status == "TIMEOUT"
    assert platform.status_checks == 3
    assert len(timer.sleeps) == 3


def test_poll_retries_do_not_cover_client_errors(timer, ctx, scripted_platform) -> None:
    platform = scripted_platform([UpstreamError("Run not found", upstream_status=404)])
    orchestrator = _orchestrator(platform, timer, poll_transport_retries=3)

    with pytest.raises(UpstreamError, match="Run not found"):
        asyncio.run(orchestrator.run(ctx, "actor-x", {}))

    assert platform.status_checks == 1


def test_inputs_are_forwarded_to_start(timer, ctx, scripted_platform) -> None:
    platform = scripted_platform(["SUCCEEDED"])
    orchestrator = _orchestrator(platform, timer)

    asyncio.run(orchestrator.run(ctx, "user~actor", {"maxItems": 3}))

    assert platform.started == [("user~actor", {"maxItems": 3})]


def test_run_record_only_moves_forward() -> None:
    record = RunRecord(actor_id="actor-x")
    record.begin_polling("run-1", started_at=0.0)
    record.transition(RunState.SUCCEEDED)

    assert record.state.is_terminal
    with pytest.raises(InvalidTransitionError):
        record.transition(RunState.POLLING)


def test_run_record_cannot_skip_polling() -> None:
    record = RunRecord(actor_id="actor-x")

    with pytest.raises(InvalidTransitionError):
        record.transition(RunState.SUCCEEDED)


def test_duration_is_never_negative() -> None:
    record = RunRecord(actor_id="actor-x")
    record.begin_polling("run-1", started_at=10.0)

    assert record.duration_ms(9.0) == 0
    assert record.duration_ms(10.25) == 250


def test_rejects_empty_attempt_budget(scripted_platform) -> None:
    with pytest.raises(ValueError):
        RunOrchestrator(scripted_platform(), max_attempts=0)
