"""Command-line entrypoint: serve the gateway with uvicorn."""

from __future__ import annotations

import logging

import uvicorn

from actor_runner.config.settings import get_settings


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    port = settings.resolved_port()
    logging.getLogger(__name__).info(
        "server event=start app=%s host=%s port=%s", settings.app_name, settings.host, port
    )
    uvicorn.run("actor_runner.api.main:app", host=settings.host, port=port)


if __name__ == "__main__":
    main()
