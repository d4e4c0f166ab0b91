import json
import logging
from datetime import datetime, timezone
from typing import Any


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


def log_table_event(
    logger: logging.Logger,
    module: str,
    action: str,
    outcome: str,
    trace_id: str | None = None,
    count: int | None = None,
    detail: str | None = None,
    level: int = logging.INFO,
) -> None:
    payload: dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "level": logging.getLevelName(level),
        "module": module,
        "action": action,
        "outcome": outcome,
        "trace_id": trace_id,
    }
    if count is not None:
        payload["count"] = count
    if detail:
        payload["detail"] = detail
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))
