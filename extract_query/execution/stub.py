"""
Sample preview backend.

Stands in for a real execution backend: synthesizes a small result set
shaped by the query's selected fields. Filters, joins and aggregates are
not evaluated.
"""

import asyncio
import logging
import random
from datetime import date, timedelta
from typing import Any, Dict, Optional

from extract_query.core.errors import PreviewBackendError
from extract_query.core.models import (
    ColumnInfo,
    FieldType,
    QueryDefinition,
    QueryField,
    QueryResult,
)

logger = logging.getLogger(__name__)

SAMPLE_START_DATE = date(2024, 3, 1)


def sample_value(field: QueryField, index: int) -> Any:
    """
    Sample cell value for a field at a 0-based row index.

    Strings are "Sample{n}" (1-based), dates count up from 2024-03-01,
    numbers and decimals go 100.0, 110.0, ... and other types are None.
    """
    if field.type == FieldType.STRING.value:
        return f"Sample{index + 1}"
    elif field.type == FieldType.DATE.value:
        return (SAMPLE_START_DATE + timedelta(days=index)).isoformat()
    elif field.type in (FieldType.DECIMAL.value, FieldType.NUMBER.value):
        return float(100 + index * 10)
    return None


class SamplePreviewBackend:
    """
    Synthesizes preview results.

    Implements the IPreviewBackend interface. Results registered for a
    query id are returned verbatim instead of synthesized ones.
    """

    def __init__(
        self,
        latency: float = 1.0,
        row_count: int = 5,
        failure_rate: float = 0.0,
        canned_results: Optional[Dict[str, QueryResult]] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize sample backend.

        Args:
            latency: Simulated execution delay in seconds
            row_count: Number of synthesized rows
            failure_rate: Probability (0-1) of a simulated backend failure
            canned_results: Fixed results keyed by query id
            rng: Random source for execution times and failures
        """
        self.latency = latency
        self.row_count = row_count
        self.failure_rate = failure_rate
        self.rng = rng or random.Random()
        self._canned: Dict[str, QueryResult] = dict(canned_results or {})
        self._fail_next: Optional[str] = None

    def register_result(self, query_id: str, result: QueryResult) -> None:
        self._canned[query_id] = result

    def unregister_result(self, query_id: str) -> None:
        self._canned.pop(query_id, None)

    def fail_next(self, reason: str = "Simulated backend failure") -> None:
        """Make the next execute() call fail with `reason`."""
        self._fail_next = reason

    async def execute(self, query: QueryDefinition) -> QueryResult:
        """
        Produce a preview result for a query.

        Raises:
            PreviewBackendError: On a simulated failure
        """
        if self.latency > 0:
            await asyncio.sleep(self.latency)

        if self._fail_next is not None:
            reason, self._fail_next = self._fail_next, None
            raise PreviewBackendError(reason)
        if self.failure_rate > 0 and self.rng.random() < self.failure_rate:
            raise PreviewBackendError("Simulated backend failure")

        canned = self._canned.get(query.id)
        if canned is not None:
            logger.debug("Returning registered result for query '%s'", query.id)
            return canned.model_copy(deep=True)

        return self.synthesize(query)

    def synthesize(self, query: QueryDefinition) -> QueryResult:
        """Build sample rows for the query's selected fields."""
        rows = []
        for index in range(self.row_count):
            row: Dict[str, Any] = {}
            for field in query.selected_fields:
                row[field.name] = sample_value(field, index)
            rows.append(row)

        return QueryResult(
            columns=[ColumnInfo(name=f.name, type=f.type) for f in query.selected_fields],
            rows=rows,
            total_rows=len(rows),
            execution_time=self.rng.random() * 2,
        )
