"""
Query workbench - main entry point.

Coordinates one query editing session: applies model mutations, re-runs
validation after every change, gates save and preview on the verdict, and
persists to the query store.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from extract_query.catalog.resolver import SourceCatalog
from extract_query.config import EngineSettings
from extract_query.core.errors import InvalidQueryError, QueryNotFoundError
from extract_query.core.interfaces import IPreviewBackend, ISourceCatalog
from extract_query.core.models import (
    AggregateConfig,
    FilterCondition,
    JoinCondition,
    QueryDefinition,
    QueryField,
    QueryResult,
    QueryValidation,
    SortConfig,
)
from extract_query.core.sources import DataSource
from extract_query.execution.executor import PreviewExecutor
from extract_query.execution.stub import SamplePreviewBackend
from extract_query.query import model
from extract_query.query.sql_preview import estimate_query_performance, generate_sql_preview
from extract_query.store.memory import QueryStore
from extract_query.validation.engine import rules_for, validate_query
from extract_query.validation.rules import ValidationOptions, ValidationRule

logger = logging.getLogger(__name__)


class QueryWorkbench:
    """
    Editing session for a single query definition.

    Every mutation replaces the current definition with the result of a pure
    model operation and immediately re-validates it in full. Save and preview
    are refused while the definition has validation errors.
    """

    def __init__(
        self,
        catalog: ISourceCatalog,
        store: Optional[QueryStore] = None,
        backend: Optional[IPreviewBackend] = None,
        rules: Optional[Sequence[ValidationRule]] = None,
        options: Optional[ValidationOptions] = None,
    ):
        """
        Initialize workbench.

        Args:
            catalog: Source catalog used to list available fields
            store: Query store for saved definitions
            backend: Preview backend (sample data when omitted)
            rules: Validation rule set, defaults to the standard rules
            options: Validation thresholds
        """
        self.catalog = catalog
        self.store = store if store is not None else QueryStore()
        self.executor = PreviewExecutor(backend if backend is not None else SamplePreviewBackend())
        self.rules = rules
        self.options = options

        self._editing_id: Optional[str] = None
        self._query: QueryDefinition = model.new_query()
        self._validation: QueryValidation = self._validate(self._query)
        self.is_dirty = False

    @classmethod
    def from_settings(
        cls,
        data_sources: Iterable[DataSource],
        settings: Optional[EngineSettings] = None,
        queries: Optional[Iterable[QueryDefinition]] = None,
    ) -> "QueryWorkbench":
        """
        Create a workbench configured from EngineSettings.

        Args:
            data_sources: Registered data sources for the catalog
            settings: Engine settings, read from the environment when omitted
            queries: Saved definitions to seed the store with

        Returns:
            Configured QueryWorkbench
        """
        settings = settings or EngineSettings.from_env()
        options = ValidationOptions(field_warning_limit=settings.field_warning_limit)
        rules = rules_for(settings.strict_validation)
        store = QueryStore(
            queries,
            require_valid=settings.store_require_valid,
            rules=rules,
            options=options,
        )
        backend = SamplePreviewBackend(
            latency=settings.preview_latency, row_count=settings.preview_rows
        )
        return cls(
            catalog=SourceCatalog(data_sources),
            store=store,
            backend=backend,
            rules=rules,
            options=options,
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def query(self) -> QueryDefinition:
        return self._query

    @property
    def validation(self) -> QueryValidation:
        return self._validation

    @property
    def is_valid(self) -> bool:
        return self._validation.is_valid

    @property
    def is_editing_saved(self) -> bool:
        return self._editing_id is not None

    @property
    def preview_result(self) -> Optional[QueryResult]:
        return self.executor.latest_result

    @property
    def available_fields(self) -> List[QueryField]:
        """Catalog fields for every source currently in the query."""
        fields: List[QueryField] = []
        for source in self._query.sources:
            fields.extend(self.catalog.get_source_fields(source))
        return fields

    def fields_for_source(self, alias: str) -> List[QueryField]:
        return [f for f in self.available_fields if f.source == alias]

    def _validate(self, query: QueryDefinition) -> QueryValidation:
        return validate_query(query, self.rules, self.options)

    def _set_query(self, query: QueryDefinition, dirty: bool) -> QueryValidation:
        self._query = query
        self._validation = self._validate(query)
        self.is_dirty = dirty
        return self._validation

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def start_new(self, name: str = "New Query", **kwargs: Any) -> QueryDefinition:
        """Begin editing a fresh, empty definition."""
        self._editing_id = None
        self.executor.invalidate()
        self._set_query(model.new_query(name=name, **kwargs), dirty=False)
        return self._query

    def edit(self, query_id: str) -> QueryDefinition:
        """
        Begin editing a copy of a saved definition.

        Raises:
            QueryNotFoundError: If the store has no such query
        """
        saved = self.store.get(query_id)
        if saved is None:
            raise QueryNotFoundError(query_id)
        self._editing_id = query_id
        self.executor.invalidate()
        self._set_query(model.clone_query(saved), dirty=False)
        return self._query

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _apply(self, operation: Callable[..., QueryDefinition], *args: Any) -> QueryValidation:
        return self._set_query(operation(self._query, *args), dirty=True)

    def add_source(self, source_id: str, table: Optional[str] = None) -> QueryValidation:
        return self._apply(model.add_source, source_id, table)

    def remove_source(self, index: int) -> QueryValidation:
        return self._apply(model.remove_source, index)

    def add_field(self, field: QueryField) -> QueryValidation:
        return self._apply(model.add_field, field)

    def remove_field(self, index: int) -> QueryValidation:
        return self._apply(model.remove_field, index)

    def add_join(self, join: JoinCondition) -> QueryValidation:
        return self._apply(model.add_join, join)

    def remove_join(self, index: int) -> QueryValidation:
        return self._apply(model.remove_join, index)

    def add_filter(self, condition: FilterCondition) -> QueryValidation:
        return self._apply(model.add_filter, condition)

    def remove_filter(self, index: int) -> QueryValidation:
        return self._apply(model.remove_filter, index)

    def add_sort(self, sort: SortConfig) -> QueryValidation:
        return self._apply(model.add_sort, sort)

    def remove_sort(self, index: int) -> QueryValidation:
        return self._apply(model.remove_sort, index)

    def add_aggregate(self, aggregate: AggregateConfig) -> QueryValidation:
        return self._apply(model.add_aggregate, aggregate)

    def remove_aggregate(self, index: int) -> QueryValidation:
        return self._apply(model.remove_aggregate, index)

    def set_group_by(self, fields: Iterable[QueryField]) -> QueryValidation:
        return self._apply(model.set_group_by, list(fields))

    def set_limit(self, limit: Optional[int]) -> QueryValidation:
        return self._apply(model.set_limit, limit)

    def rename(self, name: str, description: Optional[str] = None) -> QueryValidation:
        return self._apply(model.rename, name, description)

    # ------------------------------------------------------------------
    # Gated actions
    # ------------------------------------------------------------------

    def _require_valid(self, action: str) -> None:
        if not self._validation.is_valid:
            codes = ", ".join(m.code for m in self._validation.errors)
            raise InvalidQueryError(
                f"Cannot {action} query '{self._query.name}': {codes}", self._validation
            )

    def save(self) -> QueryDefinition:
        """
        Save the current definition to the store.

        Inserts under a new id for a new query, replaces the stored copy when
        editing a saved one.

        Returns:
            The stored definition

        Raises:
            InvalidQueryError: If the definition has validation errors
        """
        self._require_valid("save")
        if self._editing_id is not None and self._editing_id in self.store:
            stored = self.store.update(self._editing_id, self._query)
        else:
            stored = self.store.create(self._query)

        self._editing_id = stored.id
        self.store.record_validation(stored.id, self._validation)
        self._set_query(stored, dirty=False)
        return stored

    async def preview(self) -> Optional[QueryResult]:
        """
        Preview the current definition.

        Returns:
            The result, or None when superseded by a newer preview request

        Raises:
            InvalidQueryError: If the definition has validation errors
            PreviewError: If the backend rejects the latest request
        """
        self._require_valid("preview")
        return await self.executor.preview(self._query)

    def sql_preview(self) -> str:
        return generate_sql_preview(self._query)

    def performance_estimate(self) -> Dict[str, Any]:
        return estimate_query_performance(self._query)
