"""FastAPI app entrypoint for actor-runner."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from actor_runner.api.ui import render_homepage
from actor_runner.config.settings import Settings, get_settings
from actor_runner.context import RequestContext
from actor_runner.errors import ActorRunnerError, ValidationError
from actor_runner.orchestration import RunOrchestrator
from actor_runner.orchestration.run import ClockFn, SleepFn
from actor_runner.upstream import ActorPlatformClient, InputSchema, encode_inputs

logger = logging.getLogger(__name__)


class AuthenticateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    api_key: str | None = Field(default=None, alias="apiKey")


class RunActorRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    inputs: dict[str, Any] = Field(default_factory=dict)
    # Optional: when present, raw form values are coerced against it first.
    input_schema: InputSchema | None = Field(default=None, alias="schema")


def request_context(authorization: str | None = Header(default=None)) -> RequestContext:
    return RequestContext.from_authorization(authorization)


def _ensure_runtime_state(
    app: FastAPI,
    *,
    settings: Settings,
    client_override: ActorPlatformClient | None,
    sleep_override: SleepFn | None,
    clock_override: ClockFn | None,
) -> None:
    if not hasattr(app.state, "settings"):
        app.state.settings = settings

    if not hasattr(app.state, "client"):
        app.state.client = client_override or ActorPlatformClient(
            settings.upstream_base_url,
            timeout_s=settings.upstream_timeout_s,
        )

    if not hasattr(app.state, "orchestrator"):
        extra: dict[str, Any] = {}
        if sleep_override is not None:
            extra["sleep"] = sleep_override
        if clock_override is not None:
            extra["clock"] = clock_override
        app.state.orchestrator = RunOrchestrator(
            app.state.client,
            poll_interval_s=settings.poll_interval_s,
            max_attempts=settings.max_poll_attempts,
            result_limit=settings.result_limit,
            poll_transport_retries=settings.poll_transport_retries,
            **extra,
        )


def create_app(
    *,
    settings_override: Settings | None = None,
    client_override: ActorPlatformClient | None = None,
    sleep_override: SleepFn | None = None,
    clock_override: ClockFn | None = None,
) -> FastAPI:
    settings = settings_override or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _ensure_runtime_state(
            app,
            settings=settings,
            client_override=client_override,
            sleep_override=sleep_override,
            clock_override=clock_override,
        )
        yield
        await app.state.client.aclose()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Keep test paths reliable when lifespan is not executed by the client.
    _ensure_runtime_state(
        app,
        settings=settings,
        client_override=client_override,
        sleep_override=sleep_override,
        clock_override=clock_override,
    )

    @app.exception_handler(ActorRunnerError)
    async def handle_runner_error(request: Request, exc: ActorRunnerError) -> JSONResponse:
        logger.info(
            "request event=error path=%s kind=%s status=%s",
            request.url.path,
            type(exc).__name__,
            exc.status_code,
        )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        detail = exc.errors()[0].get("msg", "Invalid request") if exc.errors() else None
        error = ValidationError(detail)
        return JSONResponse(status_code=error.status_code, content={"error": error.message})

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("request event=unhandled path=%s", request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.get("/", response_class=HTMLResponse)
    def home() -> str:
        return render_homepage(app_name=settings.app_name)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "service": settings.app_name}

    @app.post("/api/authenticate")
    async def authenticate(payload: AuthenticateRequest, request: Request) -> dict[str, Any]:
        api_key = (payload.api_key or "").strip()
        if not api_key:
            raise ValidationError("API key is required")
        client: ActorPlatformClient = request.app.state.client
        await client.verify_credential(RequestContext(credential=api_key))
        return {"success": True, "message": "Authentication successful"}

    @app.get("/api/actors")
    async def list_actors(
        request: Request, ctx: RequestContext = Depends(request_context)
    ) -> dict[str, Any]:
        client: ActorPlatformClient = request.app.state.client
        actors = await client.list_actors(ctx)
        return {"actors": [actor.model_dump(by_alias=True) for actor in actors]}

    @app.get("/api/actors/{actor_id}/schema")
    async def actor_schema(
        actor_id: str, request: Request, ctx: RequestContext = Depends(request_context)
    ) -> dict[str, Any]:
        client: ActorPlatformClient = request.app.state.client
        schema, actor = await client.fetch_schema(ctx, actor_id)
        schema_body = schema.model_dump(mode="json", by_alias=True, exclude_unset=True)
        return {"schema": schema_body, "actor": actor}

    @app.post("/api/actors/{actor_id}/run")
    async def run_actor(
        actor_id: str,
        request: Request,
        payload: RunActorRequest | None = None,
        ctx: RequestContext = Depends(request_context),
    ) -> dict[str, Any]:
        payload = payload or RunActorRequest()
        inputs = payload.inputs
        if payload.input_schema is not None:
            inputs = encode_inputs(payload.input_schema, inputs)
        orchestrator: RunOrchestrator = request.app.state.orchestrator
        outcome = await orchestrator.run(ctx, actor_id, inputs)
        body = outcome.model_dump(mode="json", by_alias=True)
        return {key: value for key, value in body.items() if value is not None}

    return app


# Module-level app for `uvicorn actor_runner.api.main:app`.
app = create_app()
