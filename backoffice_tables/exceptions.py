from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx


class BackofficeError(Exception):
    pass


class ConfigError(BackofficeError, ValueError):
    pass


class EntityValidationError(BackofficeError, ValueError):
    """Raised when a payload cannot be turned into a table entity."""


@dataclass
class APIError(BackofficeError):
    code: str
    message: str
    details: dict[str, Any] | list[Any] | str | None = None
    trace_id: str | None = None
    status_code: int | None = None

    def __str__(self) -> str:
        trace = f" trace_id={self.trace_id}" if self.trace_id else ""
        return f"{self.code}: {self.message}{trace}"

    @classmethod
    def from_http_response(cls, response: httpx.Response) -> "APIError":
        trace_id = response.headers.get("X-Trace-ID") or response.headers.get("X-Trace-Id")
        try:
            payload = response.json()
        except ValueError:
            return cls(
                code="HTTP_ERROR",
                message=response.text or "HTTP request failed",
                trace_id=trace_id,
                status_code=response.status_code,
            )

        if isinstance(payload, dict):
            # the back office API answers with {"error": "..."} while the admin gateway uses code/message
            message = payload.get("message") or payload.get("error") or response.text or "HTTP request failed"
            return cls(
                code=str(payload.get("code") or "HTTP_ERROR"),
                message=str(message),
                details=payload.get("details"),
                trace_id=payload.get("trace_id") or trace_id,
                status_code=response.status_code,
            )

        return cls(
            code="HTTP_ERROR",
            message=response.text or "HTTP request failed",
            details=payload,
            trace_id=trace_id,
            status_code=response.status_code,
        )


class TransportError(APIError):
    """Network failure before an HTTP response was returned."""


class ServerError(APIError):
    """5xx responses."""
