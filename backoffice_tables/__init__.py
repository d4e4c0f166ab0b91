from backoffice_tables.application.bulk_delete import BulkDeleteCoordinator, BulkDeleteOutcome, BulkDeleteOutcomeKind
from backoffice_tables.application.optimistic_overlay import OptimisticOverlay
from backoffice_tables.application.reducer import NavigationTarget, reduce
from backoffice_tables.application.state.table_state import TableSpec, TableState, derive_view
from backoffice_tables.config import TableConfig
from backoffice_tables.domain.models.entity import ALL_FILTER, BaseEntity, FilterOption, PendingOperation
from backoffice_tables.domain.policies.row_presentation import RowStyle, resolve_row_presentation
from backoffice_tables.exceptions import APIError, BackofficeError, ConfigError, EntityValidationError
from backoffice_tables.infrastructure.http.api_client import BackofficeApiClient
from backoffice_tables.ui.data_table import DataTable

__all__ = [
    "ALL_FILTER",
    "APIError",
    "BackofficeApiClient",
    "BackofficeError",
    "BaseEntity",
    "BulkDeleteCoordinator",
    "BulkDeleteOutcome",
    "BulkDeleteOutcomeKind",
    "ConfigError",
    "DataTable",
    "EntityValidationError",
    "FilterOption",
    "NavigationTarget",
    "OptimisticOverlay",
    "PendingOperation",
    "RowStyle",
    "TableConfig",
    "TableSpec",
    "TableState",
    "derive_view",
    "reduce",
    "resolve_row_presentation",
]
