import pytest

from actor_runner import server
from actor_runner.config.settings import get_settings


def test_main_serves_gateway_on_resolved_port(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_run(app: str, *, host: str, port: int) -> None:
        captured.update(app=app, host=host, port=port)

    monkeypatch.setenv("PORT", "4321")
    monkeypatch.delenv("ACTOR_RUNNER_PORT", raising=False)
    get_settings.cache_clear()
    monkeypatch.setattr(server.uvicorn, "run", fake_run)
    try:
        server.main()
    finally:
        get_settings.cache_clear()

    assert captured == {"app": "actor_runner.api.main:app", "host": "0.0.0.0", "port": 4321}
