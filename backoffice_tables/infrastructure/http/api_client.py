from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

import httpx

from backoffice_tables.application.debounce import Sleeper
from backoffice_tables.config import TableConfig
from backoffice_tables.domain.models.entity import BaseEntity, EntityT, parse_entities
from backoffice_tables.exceptions import APIError, ServerError, TransportError
from backoffice_tables.infrastructure.logging.logger import get_logger, log_table_event

TRACE_HEADER = "X-Trace-ID"


class BackofficeApiClient:
    """Async client for the back office REST surface.

    ``GET /api/{resource}?page=&limit=`` lists one page, ``GET /api/{resource}/search?q=``
    searches and ``POST /api/{resource}/bulk`` with ``{"ids": [...]}`` deletes. Only GETs are
    retried, on timeouts, connection errors and 5xx answers.
    """

    def __init__(
        self,
        config: TableConfig | None = None,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleeper: Sleeper | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config or TableConfig.from_env()
        self._client = client or httpx.AsyncClient(
            base_url=self.config.require_api(),
            timeout=self.config.timeout_seconds,
            transport=transport,
        )
        self._retry_max_attempts = max(1, self.config.retry_max_attempts)
        self._retry_backoff_ms = max(0, self.config.retry_backoff_ms)
        self._sleep = sleeper or asyncio.sleep
        self.logger = logger or get_logger("backoffice_tables.api_client")

    async def __aenter__(self) -> "BackofficeApiClient":
        return self

    async def __aexit__(self, *_exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
    ) -> Any:
        normalized_method = method.upper()
        normalized_path = path if path.startswith("/") else f"/{path}"
        allow_retry = normalized_method == "GET"
        attempts = self._retry_max_attempts if allow_retry else 1
        trace_id = str(uuid.uuid4())
        headers = {"Accept": "application/json", TRACE_HEADER: trace_id}

        for attempt in range(1, attempts + 1):
            try:
                response = await self._client.request(
                    normalized_method,
                    normalized_path,
                    params=params,
                    json=json_body,
                    headers=headers,
                )
            except httpx.TimeoutException as exc:
                if attempt >= attempts:
                    raise TransportError(
                        code="TIMEOUT_ERROR",
                        message="Timed out while calling the back office API",
                        details=str(exc),
                        trace_id=trace_id,
                    ) from exc
                await self._backoff(attempt)
                continue
            except httpx.TransportError as exc:
                if attempt >= attempts:
                    raise TransportError(
                        code="NETWORK_ERROR",
                        message="Network error while calling the back office API",
                        details=str(exc),
                        trace_id=trace_id,
                    ) from exc
                await self._backoff(attempt)
                continue

            if response.status_code >= 500:
                if attempt < attempts:
                    await self._backoff(attempt)
                    continue
                raise ServerError.from_http_response(response)
            if response.status_code >= 400:
                raise APIError.from_http_response(response)
            if not response.content:
                return None
            try:
                return response.json()
            except ValueError as exc:
                raise APIError(
                    code="INVALID_RESPONSE",
                    message="The back office API returned a non-JSON body",
                    trace_id=response.headers.get(TRACE_HEADER) or trace_id,
                    status_code=response.status_code,
                ) from exc

        raise TransportError(code="NETWORK_ERROR", message="Retry attempts exhausted", trace_id=trace_id)

    async def list_page(self, resource: str, page_index: int = 0, page_size: int | None = None) -> list[dict[str, Any]]:
        limit = page_size or self.config.default_page_size
        payload = await self.request("GET", f"/api/{resource}", params={"page": page_index, "limit": limit})
        return _as_rows(payload, resource)

    async def search(self, resource: str, query: str) -> list[dict[str, Any]]:
        if not query.strip():
            return []
        payload = await self.request("GET", f"/api/{resource}/search", params={"q": query})
        rows = _as_rows(payload, resource)
        log_table_event(self.logger, resource, "api_search", "success", count=len(rows))
        return rows

    async def bulk_delete(self, resource: str, ids: Sequence[str]) -> dict[str, Any]:
        if not ids:
            raise APIError(code="VALIDATION_ERROR", message="No ids provided for bulk delete", status_code=400)
        payload = await self.request("POST", f"/api/{resource}/bulk", json_body={"ids": list(ids)})
        log_table_event(self.logger, resource, "api_bulk_delete", "success", count=len(ids))
        return payload if isinstance(payload, dict) else {}

    def search_delegate(
        self,
        resource: str,
        model: type[EntityT] = BaseEntity,
    ) -> Callable[[str], Awaitable[list[EntityT]]]:
        async def _search(query: str) -> list[EntityT]:
            return parse_entities(await self.search(resource, query), model)

        return _search

    def bulk_delete_delegate(self, resource: str) -> Callable[[list[str]], Awaitable[None]]:
        async def _delete(ids: list[str]) -> None:
            await self.bulk_delete(resource, ids)

        return _delete

    async def _backoff(self, attempt: int) -> None:
        await self._sleep((self._retry_backoff_ms * attempt) / 1000)


def _as_rows(payload: Any, resource: str) -> list[dict[str, Any]]:
    if payload is None:
        return []
    if isinstance(payload, dict):
        # some list endpoints wrap rows as {"data": [...], "total": n}
        payload = payload.get("data", payload.get("rows"))
    if not isinstance(payload, list):
        raise APIError(code="INVALID_RESPONSE", message=f"Expected a list of {resource}")
    return [row for row in payload if isinstance(row, dict)]
