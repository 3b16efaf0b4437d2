"""Async HTTP client for the remote actor-execution platform."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from actor_runner.context import RequestContext
from actor_runner.errors import AuthError, RunStartError, UpstreamError
from actor_runner.upstream.schemas import ActorSummary, InputSchema, default_input_schema

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error occurred"


class ActorPlatformClient:
    """Wrap the six platform calls behind one normalized error surface.

    Every request is authorized with the caller's bearer credential. Transport
    failures, non-2xx answers and non-JSON bodies all surface as
    ``UpstreamError``; individual operations narrow that to ``AuthError`` or
    ``RunStartError`` where the caller needs to tell them apart.
    """

    def __init__(
        self,
        base_url: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout_s: float | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self._http_client = http_client
        self._owns_http_client = http_client is None

    def _client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            if self.timeout_s is None:
                self._http_client = httpx.AsyncClient()
            else:
                self._http_client = httpx.AsyncClient(timeout=self.timeout_s)
        return self._http_client

    async def aclose(self) -> None:
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def verify_credential(self, ctx: RequestContext) -> None:
        try:
            await self._request(ctx, "GET", "/users/me")
        except UpstreamError as exc:
            raise AuthError() from exc

    async def list_actors(self, ctx: RequestContext) -> list[ActorSummary]:
        payload = await self._request(ctx, "GET", "/acts")
        items = _data(payload).get("items") or []
        return [ActorSummary.model_validate(item) for item in items if isinstance(item, dict)]

    async def fetch_actor(self, ctx: RequestContext, actor_id: str) -> dict[str, Any]:
        payload = await self._request(ctx, "GET", f"/acts/{_actor_path(actor_id)}")
        return _data(payload)

    async def fetch_schema(
        self, ctx: RequestContext, actor_id: str
    ) -> tuple[InputSchema, dict[str, Any]]:
        actor = await self.fetch_actor(ctx, actor_id)
        raw_schema = actor.get("inputSchema")
        if not raw_schema:
            return default_input_schema(), actor
        try:
            # Some actor versions publish the schema as a JSON document string.
            if isinstance(raw_schema, str):
                return InputSchema.model_validate_json(raw_schema), actor
            return InputSchema.model_validate(raw_schema), actor
        except ValueError as exc:
            raise UpstreamError("Actor input schema is malformed") from exc

    async def start_run(
        self, ctx: RequestContext, actor_id: str, inputs: dict[str, Any]
    ) -> str:
        try:
            payload = await self._request(
                ctx, "POST", f"/acts/{_actor_path(actor_id)}/runs", json=inputs
            )
        except UpstreamError as exc:
            raise RunStartError(exc.message, upstream_status=exc.upstream_status) from exc
        run_id = _data(payload).get("id")
        if not run_id:
            raise RunStartError("Run start response did not include a run id")
        return str(run_id)

    async def poll_run_status(self, ctx: RequestContext, actor_id: str, run_id: str) -> str:
        payload = await self._request(
            ctx, "GET", f"/acts/{_actor_path(actor_id)}/runs/{run_id}"
        )
        status = _data(payload).get("status")
        if not isinstance(status, str) or not status:
            raise UpstreamError("Run status response did not include a status")
        return status

    async def fetch_result_dataset(
        self, ctx: RequestContext, actor_id: str, run_id: str
    ) -> list[Any]:
        try:
            payload = await self._request(
                ctx, "GET", f"/acts/{_actor_path(actor_id)}/runs/{run_id}/dataset/items"
            )
        except UpstreamError as exc:
            logger.warning(
                "dataset event=fetch_failed actor_id=%s run_id=%s error=%s",
                actor_id,
                run_id,
                exc.message,
            )
            return []
        if isinstance(payload, list):
            return payload
        items = _data(payload).get("items")
        return list(items) if isinstance(items, list) else []

    async def _request(
        self,
        ctx: RequestContext,
        method: str,
        path: str,
        *,
        json: Any = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        headers = {
            "Authorization": f"Bearer {ctx.credential}",
            "Content-Type": "application/json",
        }
        try:
            response = await self._client().request(method, url, headers=headers, json=json)
        except httpx.HTTPError as exc:
            logger.warning(
                "upstream event=transport_error method=%s path=%s error=%s", method, path, exc
            )
            raise UpstreamError(NETWORK_ERROR_MESSAGE) from exc

        if response.status_code >= 400:
            message = _error_message(response)
            logger.info(
                "upstream event=http_error method=%s path=%s status=%s",
                method,
                path,
                response.status_code,
            )
            raise UpstreamError(message, upstream_status=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(NETWORK_ERROR_MESSAGE) from exc


def _actor_path(actor_id: str) -> str:
    return actor_id.replace("/", "~")


def _data(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        return {}
    data = payload.get("data")
    return data if isinstance(data, dict) else {}


def _error_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message:
            return message
    return None
