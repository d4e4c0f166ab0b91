import json
import logging

import httpx

from backoffice_tables.exceptions import APIError, ServerError, TransportError
from backoffice_tables.infrastructure.errors.error_mapper import ErrorMapper
from backoffice_tables.infrastructure.logging.logger import get_logger, log_table_event


class _CaptureHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


def test_api_error_reads_error_key_and_trace_header() -> None:
    response = httpx.Response(404, json={"error": "Contract not found"}, headers={"X-Trace-ID": "trace-1"})

    error = APIError.from_http_response(response)

    assert error.code == "HTTP_ERROR"
    assert error.message == "Contract not found"
    assert error.trace_id == "trace-1"
    assert error.status_code == 404
    assert str(error) == "HTTP_ERROR: Contract not found trace_id=trace-1"


def test_api_error_prefers_structured_payload() -> None:
    response = httpx.Response(
        409,
        json={"code": "CONFLICT", "message": "Stale data", "details": {"ids": ["a"]}, "trace_id": "trace-body"},
        headers={"X-Trace-ID": "trace-header"},
    )

    error = ServerError.from_http_response(response)

    assert isinstance(error, ServerError)
    assert error.code == "CONFLICT"
    assert error.details == {"ids": ["a"]}
    assert error.trace_id == "trace-body"


def test_api_error_handles_non_json_body() -> None:
    error = APIError.from_http_response(httpx.Response(502, text="Bad gateway"))

    assert error.code == "HTTP_ERROR"
    assert error.message == "Bad gateway"


def test_error_mapper_uses_status_hints() -> None:
    payload = ErrorMapper.to_payload(APIError(code="HTTP_ERROR", message="gone", status_code=404, trace_id="t"))

    assert payload["code"] == "NOT_FOUND"
    assert payload["reason"] == "gone"
    assert payload["trace_id"] == "t"
    assert payload["transient"] is False


def test_error_mapper_marks_transport_and_5xx_as_transient() -> None:
    network = ErrorMapper.to_payload(TransportError(code="NETWORK_ERROR", message="refused"))
    server = ErrorMapper.to_payload(ServerError(code="HTTP_ERROR", message="down", status_code=503))

    assert network["code"] == "NETWORK_ERROR"
    assert network["transient"] is True
    assert server["code"] == "INTERNAL_ERROR"
    assert server["transient"] is True


def test_error_mapper_wraps_unexpected_exceptions() -> None:
    payload = ErrorMapper.to_payload(RuntimeError("disk full"))

    assert payload["code"] == "INTERNAL_ERROR"
    assert payload["reason"] == "disk full"
    assert payload["details"] == {"type": "RuntimeError"}
    assert ErrorMapper.to_display_message(RuntimeError("disk full")).startswith("[INTERNAL_ERROR] disk full")


def test_log_table_event_emits_one_json_line() -> None:
    logger = logging.getLogger("tests.table_events")
    logger.setLevel(logging.DEBUG)
    handler = _CaptureHandler()
    logger.addHandler(handler)
    try:
        log_table_event(logger, "clients", "bulk-delete", "failure", trace_id="t-1", count=3, detail="NOT_FOUND", level=logging.ERROR)
        log_table_event(logger, "clients", "filter", "changed")
    finally:
        logger.removeHandler(handler)

    first = json.loads(handler.records[0].getMessage())
    second = json.loads(handler.records[1].getMessage())
    assert handler.records[0].levelno == logging.ERROR
    assert first["level"] == "ERROR"
    assert (first["module"], first["action"], first["outcome"]) == ("clients", "bulk-delete", "failure")
    assert (first["trace_id"], first["count"], first["detail"]) == ("t-1", 3, "NOT_FOUND")
    assert "ts" in first
    assert "count" not in second
    assert "detail" not in second


def test_get_logger_installs_a_single_handler() -> None:
    logger = get_logger("tests.backoffice.single_handler")
    again = get_logger("tests.backoffice.single_handler")

    assert logger is again
    assert len(logger.handlers) == 1
