"""Core interfaces, models and errors for the extract query engine."""

from extract_query.core.interfaces import ISourceCatalog, IPreviewBackend
from extract_query.core.models import (
    AggregateConfig,
    AggregateFunction,
    ColumnInfo,
    FieldType,
    FilterCondition,
    FilterOperator,
    JoinCondition,
    JoinType,
    LogicalOperator,
    QueryDefinition,
    QueryField,
    QueryResult,
    QuerySource,
    QueryValidation,
    Severity,
    SortConfig,
    SortDirection,
    ValidationMessage,
)
from extract_query.core.sources import (
    ApiConfig,
    DatabaseConfig,
    DataSource,
    DataSourceStatus,
    DataSourceType,
    FieldMetadata,
    FileConfig,
    SourceMetadata,
    TableMetadata,
)
from extract_query.core.errors import (
    InvalidQueryError,
    PreviewBackendError,
    PreviewError,
    QueryEngineError,
    QueryNotFoundError,
)

__all__ = [
    "ISourceCatalog",
    "IPreviewBackend",
    "AggregateConfig",
    "AggregateFunction",
    "ColumnInfo",
    "FieldType",
    "FilterCondition",
    "FilterOperator",
    "JoinCondition",
    "JoinType",
    "LogicalOperator",
    "QueryDefinition",
    "QueryField",
    "QueryResult",
    "QuerySource",
    "QueryValidation",
    "Severity",
    "SortConfig",
    "SortDirection",
    "ValidationMessage",
    "ApiConfig",
    "DatabaseConfig",
    "DataSource",
    "DataSourceStatus",
    "DataSourceType",
    "FieldMetadata",
    "FileConfig",
    "SourceMetadata",
    "TableMetadata",
    "InvalidQueryError",
    "PreviewBackendError",
    "PreviewError",
    "QueryEngineError",
    "QueryNotFoundError",
]
