from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from backoffice_tables.application.state.table_state import BulkDeletePhase
from backoffice_tables.infrastructure.errors.error_mapper import ErrorMapper
from backoffice_tables.infrastructure.logging.logger import get_logger, log_table_event
from backoffice_tables.ui.components.notification_center import NotificationCenter

ConfirmCallback = Callable[[Sequence[str]], Any]
DeleteOperation = Callable[[list[str]], Any]
SingleDeleteOperation = Callable[[str], Any]

BULK_DELETE_OPERATION = "bulk-delete"


class BulkDeleteOutcomeKind(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    CANCELLED = "cancelled"
    SKIPPED = "skipped"
    BLOCKED = "blocked"


@dataclass(frozen=True)
class BulkDeleteOutcome:
    outcome: BulkDeleteOutcomeKind
    count: int = 0
    error: str | None = None
    error_payload: dict[str, Any] | None = None


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class BulkDeleteCoordinator:
    """Confirm, run and report a destructive delete over a set of ids.

    Confirmation is mandatory and always goes through ``confirm``. Failures end up in the
    notification center and in the returned outcome, never as exceptions.
    """

    def __init__(
        self,
        confirm: ConfirmCallback,
        notifications: NotificationCenter,
        on_clear_selection: Callable[[], None] | None = None,
        on_phase_change: Callable[[BulkDeletePhase], None] | None = None,
        module: str = "table",
        logger: logging.Logger | None = None,
    ) -> None:
        self._confirm = confirm
        self.notifications = notifications
        self.on_clear_selection = on_clear_selection
        self.on_phase_change = on_phase_change
        self.module = module
        self.logger = logger or get_logger("backoffice_tables.bulk_delete")
        self._phase = BulkDeletePhase.IDLE
        self._in_flight: set[str] = set()

    @property
    def phase(self) -> BulkDeletePhase:
        return self._phase

    @property
    def busy(self) -> bool:
        return bool(self._in_flight)

    def trigger_enabled(self, ids: Sequence[str]) -> bool:
        return bool(ids) and not self.busy

    async def execute(self, ids: Sequence[str], delete_operation: DeleteOperation) -> BulkDeleteOutcome:
        return await self._run(list(ids), delete_operation, operation=BULK_DELETE_OPERATION, clear_selection=True)

    async def execute_one(self, entity_id: str, delete_operation: SingleDeleteOperation) -> BulkDeleteOutcome:
        return await self._run(
            [entity_id],
            lambda ids: delete_operation(ids[0]),
            operation=f"delete:{entity_id}",
            clear_selection=False,
        )

    async def _run(
        self,
        ids: list[str],
        delete_operation: DeleteOperation,
        *,
        operation: str,
        clear_selection: bool,
    ) -> BulkDeleteOutcome:
        if not ids:
            return BulkDeleteOutcome(BulkDeleteOutcomeKind.SKIPPED)
        if not self._begin(operation):
            log_table_event(self.logger, self.module, operation, "blocked", count=len(ids), level=logging.WARNING)
            return BulkDeleteOutcome(BulkDeleteOutcomeKind.BLOCKED, count=len(ids))

        try:
            self._set_phase(BulkDeletePhase.CONFIRM_PENDING)
            if not await self._ask_confirmation(ids):
                self._set_phase(BulkDeletePhase.CANCELLED)
                log_table_event(self.logger, self.module, operation, "cancelled", count=len(ids))
                return BulkDeleteOutcome(BulkDeleteOutcomeKind.CANCELLED, count=len(ids))

            self._set_phase(BulkDeletePhase.CONFIRMED)
            self._set_phase(BulkDeletePhase.IN_FLIGHT)
            try:
                await _resolve(delete_operation(list(ids)))
            except Exception as error:
                payload = ErrorMapper.to_payload(error)
                message = payload["message"]
                if payload["reason"] and payload["reason"] != message:
                    message = f"{message} {payload['reason']}"
                self._set_phase(BulkDeletePhase.FAILED)
                self.notifications.toast(
                    level="error",
                    title="Delete failed",
                    message=message,
                    trace_id=payload["trace_id"],
                    details={"code": payload["code"], "suggestion": payload["suggestion"], "count": len(ids)},
                )
                log_table_event(
                    self.logger,
                    self.module,
                    operation,
                    "failure",
                    trace_id=payload["trace_id"],
                    count=len(ids),
                    detail=payload["code"],
                    level=logging.ERROR,
                )
                return BulkDeleteOutcome(
                    BulkDeleteOutcomeKind.FAILURE,
                    count=len(ids),
                    error=payload["reason"],
                    error_payload=payload,
                )

            self._set_phase(BulkDeletePhase.SUCCEEDED)
            if clear_selection and self.on_clear_selection is not None:
                self.on_clear_selection()
            self.notifications.toast(
                level="success",
                title="Records deleted",
                message=f"{len(ids)} record(s) deleted.",
                details={"count": len(ids)},
            )
            log_table_event(self.logger, self.module, operation, "success", count=len(ids))
            return BulkDeleteOutcome(BulkDeleteOutcomeKind.SUCCESS, count=len(ids))
        finally:
            self._end(operation)
            self._set_phase(BulkDeletePhase.IDLE)

    async def _ask_confirmation(self, ids: list[str]) -> bool:
        try:
            return bool(await _resolve(self._confirm(list(ids))))
        except Exception as error:
            log_table_event(
                self.logger,
                self.module,
                "confirm",
                "error",
                count=len(ids),
                detail=error.__class__.__name__,
                level=logging.WARNING,
            )
            return False

    def _begin(self, operation: str) -> bool:
        if self._in_flight:
            return False
        self._in_flight.add(operation)
        return True

    def _end(self, operation: str) -> None:
        self._in_flight.discard(operation)

    def _set_phase(self, phase: BulkDeletePhase) -> None:
        self._phase = phase
        if self.on_phase_change is not None:
            self.on_phase_change(phase)
