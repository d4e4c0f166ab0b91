from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from backoffice_tables.exceptions import EntityValidationError

ALL_FILTER = "all"


class PendingOperation(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    NONE = "none"


class BaseEntity(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    id: str
    is_optimistic: bool = Field(default=False, validation_alias=AliasChoices("is_optimistic", "isOptimistic"))
    pending_operation: PendingOperation | None = Field(
        default=None,
        validation_alias=AliasChoices("pending_operation", "pendingOperation", "optimisticOperation"),
    )

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValueError("id is required")
        return str(value)

    @field_validator("pending_operation", mode="before")
    @classmethod
    def _normalize_operation(cls, value: Any) -> Any:
        # unknown tags are kept as None; the row resolver then treats the record as generically pending
        if value is None or isinstance(value, PendingOperation):
            return value
        normalized = str(value).strip().lower()
        if normalized in {item.value for item in PendingOperation}:
            return normalized
        return None


class FilterOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str
    label: str


EntityT = TypeVar("EntityT", bound=BaseEntity)


def parse_entities(payloads: Iterable[Any], model: type[EntityT] = BaseEntity) -> list[EntityT]:
    entities: list[EntityT] = []
    seen: set[str] = set()
    for index, payload in enumerate(payloads):
        if isinstance(payload, model):
            entity = payload
        else:
            try:
                entity = model.model_validate(payload)
            except ValidationError as exc:
                raise EntityValidationError(f"Invalid {model.__name__} at position {index}: {exc.errors()[0]['msg']}") from exc
        if entity.id in seen:
            raise EntityValidationError(f"Duplicate {model.__name__} id in collection: {entity.id}")
        seen.add(entity.id)
        entities.append(entity)
    return entities
