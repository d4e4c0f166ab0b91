from backoffice_tables.exceptions import APIError, TransportError


class ErrorMapper:
    _KNOWN_CODES = {
        "NOT_FOUND": ("The requested records no longer exist.", "Refresh the table and try again."),
        "VALIDATION_ERROR": ("The request was rejected as invalid.", "Review the selected records and try again."),
        "TIMEOUT_ERROR": ("The server took too long to respond.", "Retry in a few seconds."),
        "NETWORK_ERROR": ("The API could not be reached.", "Check your connection and retry."),
    }

    _STATUS_HINTS = {
        400: ("VALIDATION_ERROR", "The request was rejected as invalid.", "Review the selected records and try again."),
        403: ("PERMISSION_DENIED", "You are not allowed to perform this operation.", "Ask an administrator for access."),
        404: ("NOT_FOUND", "The requested records no longer exist.", "Refresh the table and try again."),
        409: ("CONFLICT", "The records changed while the operation was running.", "Refresh the table before retrying."),
        500: ("INTERNAL_ERROR", "The server failed to complete the operation.", "Retry and share the trace_id if it persists."),
    }

    @classmethod
    def to_payload(cls, error: Exception) -> dict:
        if isinstance(error, APIError):
            status_code = error.status_code or -1
            mapped = cls._STATUS_HINTS.get(status_code)
            if mapped is None and status_code >= 500:
                mapped = cls._STATUS_HINTS[500]
            if mapped is not None:
                code, message, suggestion = mapped
            else:
                message, suggestion = cls._KNOWN_CODES.get(
                    error.code,
                    (error.message, "Contact support with the trace_id."),
                )
                code = error.code
            return {
                "code": code,
                "message": message,
                "reason": error.message,
                "details": error.details,
                "trace_id": error.trace_id,
                "suggestion": suggestion,
                "transient": isinstance(error, TransportError) or status_code >= 500,
            }
        return {
            "code": "INTERNAL_ERROR",
            "message": str(error) or error.__class__.__name__,
            "reason": str(error) or error.__class__.__name__,
            "details": {"type": error.__class__.__name__},
            "trace_id": None,
            "suggestion": "Retry and report the incident if it persists.",
            "transient": False,
        }

    @classmethod
    def to_display_message(cls, error: Exception) -> str:
        payload = cls.to_payload(error)
        return f"[{payload['code']}] {payload['message']} ({payload['reason']}, trace_id={payload['trace_id']})"
