"""
Shared data models for the extract query engine.

The query intermediate representation (sources, fields, joins, filters,
aggregates), validation results and preview results. Attributes are
snake_case in Python; the persisted/wire shape uses camelCase aliases.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class WireModel(BaseModel):
    """Base model accepting snake_case or camelCase input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        """Dump to the camelCase JSON-compatible shape."""
        return self.model_dump(mode="json", by_alias=True)


class FieldType(str, Enum):
    """Known field types. Field.type stays an open string."""
    STRING = "string"
    NUMBER = "number"
    DECIMAL = "decimal"
    DATE = "date"
    BOOLEAN = "boolean"


class JoinType(str, Enum):
    INNER = "INNER"
    LEFT = "LEFT"
    RIGHT = "RIGHT"
    FULL = "FULL"


class FilterOperator(str, Enum):
    """Comparison operators available to filters."""
    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    GREATER_THAN = "greaterThan"
    LESS_THAN = "lessThan"
    CONTAINS = "contains"
    IN = "in"
    BETWEEN = "between"


class LogicalOperator(str, Enum):
    AND = "AND"
    OR = "OR"


class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class AggregateFunction(str, Enum):
    """Aggregation functions."""
    SUM = "SUM"
    AVG = "AVG"
    COUNT = "COUNT"
    MIN = "MIN"
    MAX = "MAX"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class QueryField(WireModel):
    """
    A named, typed column reference scoped to one query source alias.

    The field does not own its source; `source` is the query-local alias
    (e.g. "s1") of a QuerySource in the same definition.
    """

    name: str
    type: str  # string, number, decimal, date, boolean (extensible)
    source: str
    table: Optional[str] = None
    alias: Optional[str] = None
    description: Optional[str] = None
    expression: Optional[str] = None

    @property
    def ref(self) -> str:
        """Qualified reference, e.g. "s1.claim_id"."""
        return f"{self.source}.{self.name}"

    def same_column(self, other: "QueryField") -> bool:
        """True if both fields name the same column of the same alias."""
        return self.source == other.source and self.name == other.name


class QuerySource(WireModel):
    """Query-local reference to an externally registered data source."""

    source_id: str
    table: Optional[str] = None
    alias: str


class JoinCondition(WireModel):
    left_field: QueryField
    right_field: QueryField
    type: JoinType = JoinType.INNER


class FilterCondition(WireModel):
    field: QueryField
    operator: FilterOperator
    value: Any = None
    logical_operator: Optional[LogicalOperator] = None


class SortConfig(WireModel):
    field: QueryField
    direction: SortDirection = SortDirection.ASC


class AggregateConfig(WireModel):
    field: QueryField
    function: AggregateFunction
    alias: str


class QueryDefinition(WireModel):
    """
    Complete, serializable description of a cross-source query.

    `alias_sequence` is the last number handed out for a source alias
    (`s{n}`); it only grows, so aliases are never reissued after removals.
    """

    id: str
    name: str
    description: Optional[str] = None
    sources: List[QuerySource] = Field(default_factory=list)
    selected_fields: List[QueryField] = Field(default_factory=list)
    joins: List[JoinCondition] = Field(default_factory=list)
    filters: List[FilterCondition] = Field(default_factory=list)
    group_by: List[QueryField] = Field(default_factory=list)
    having: List[FilterCondition] = Field(default_factory=list)
    order_by: List[SortConfig] = Field(default_factory=list)
    aggregates: List[AggregateConfig] = Field(default_factory=list)
    limit: Optional[int] = Field(default=None, ge=0)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    created_by: Optional[str] = None
    is_template: bool = False
    tags: List[str] = Field(default_factory=list)
    alias_sequence: int = 0

    def source_aliases(self) -> List[str]:
        return [source.alias for source in self.sources]

    def find_selected_field(self, field: QueryField) -> Optional[QueryField]:
        """Return the selected field matching `field` by source and name."""
        for selected in self.selected_fields:
            if selected.same_column(field):
                return selected
        return None


class ValidationMessage(WireModel):
    """Coded, severity-tagged diagnostic produced by the validation engine."""

    code: str
    message: str
    severity: Severity
    field: Optional[str] = None
    source: Optional[str] = None
    context: Optional[Dict[str, Any]] = None


class QueryValidation(WireModel):
    """Validation verdict for a whole QueryDefinition."""

    is_valid: bool
    messages: List[ValidationMessage] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=utc_now)

    @property
    def errors(self) -> List[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[ValidationMessage]:
        return [m for m in self.messages if m.severity == Severity.WARNING]

    def codes(self) -> List[str]:
        return [m.code for m in self.messages]


class ColumnInfo(WireModel):
    name: str
    type: str


class QueryResult(WireModel):
    """Preview/execution result shaped by the query's selected fields."""

    columns: List[ColumnInfo] = Field(default_factory=list)
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    total_rows: int = 0
    execution_time: float = 0.0
