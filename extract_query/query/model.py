"""
Pure mutation operations over a QueryDefinition.

Every operation returns a new definition and leaves its input untouched.
Nothing here raises for semantic problems: structural and type errors are
reported by the validation engine. An out-of-range index returns an
unchanged copy.
"""

import re
import time
from typing import Any, Iterable, List, Optional

from extract_query.core.models import (
    AggregateConfig,
    FilterCondition,
    JoinCondition,
    QueryDefinition,
    QueryField,
    QuerySource,
    SortConfig,
    utc_now,
)

_ALIAS_PATTERN = re.compile(r"^s(\d+)$")


def new_query(name: str = "New Query", query_id: Optional[str] = None, **kwargs: Any) -> QueryDefinition:
    """
    Create an empty query definition with a generated id.

    Args:
        name: Display name
        query_id: Explicit id, defaults to "query-{epoch ms}"
        **kwargs: Other QueryDefinition attributes (description, tags, ...)

    Returns:
        New QueryDefinition with current timestamps
    """
    now = utc_now()
    return QueryDefinition(
        id=query_id or f"query-{int(time.time() * 1000)}",
        name=name,
        created_at=now,
        updated_at=now,
        **kwargs,
    )


def clone_query(query: QueryDefinition) -> QueryDefinition:
    """Deep copy of a saved query, used as the starting point for editing."""
    return query.model_copy(deep=True)


def _replace(query: QueryDefinition, **changes: Any) -> QueryDefinition:
    return query.model_copy(update=changes, deep=True)


def _without(items: List[Any], index: int) -> Optional[List[Any]]:
    if index < 0 or index >= len(items):
        return None
    return items[:index] + items[index + 1:]


def next_alias_number(query: QueryDefinition) -> int:
    """
    Next alias number for a query.

    Uses the stored counter, raised past any existing `sN` alias so that
    definitions created elsewhere never get an alias reissued.
    """
    highest = query.alias_sequence
    for alias in query.source_aliases():
        match = _ALIAS_PATTERN.match(alias)
        if match:
            highest = max(highest, int(match.group(1)))
    return highest + 1


def add_source(query: QueryDefinition, source_id: str, table: Optional[str] = None) -> QueryDefinition:
    """
    Append a source with the next generated alias.

    Args:
        query: Query definition
        source_id: Registered data source id
        table: Table within the data source

    Returns:
        New definition with the source appended
    """
    number = next_alias_number(query)
    source = QuerySource(source_id=source_id, table=table, alias=f"s{number}")
    return _replace(query, sources=query.sources + [source], alias_sequence=number)


def remove_source(query: QueryDefinition, index: int) -> QueryDefinition:
    """
    Remove a source and everything that references its alias.

    Selected fields, joins (either side), filters, group-by fields, having
    conditions, sort entries and aggregates on the alias are all dropped.
    """
    sources = _without(query.sources, index)
    if sources is None:
        return clone_query(query)

    alias = query.sources[index].alias
    return _replace(
        query,
        sources=sources,
        selected_fields=[f for f in query.selected_fields if f.source != alias],
        joins=[
            j for j in query.joins
            if j.left_field.source != alias and j.right_field.source != alias
        ],
        filters=[f for f in query.filters if f.field.source != alias],
        group_by=[f for f in query.group_by if f.source != alias],
        having=[h for h in query.having if h.field.source != alias],
        order_by=[s for s in query.order_by if s.field.source != alias],
        aggregates=[a for a in query.aggregates if a.field.source != alias],
    )


def add_field(query: QueryDefinition, field: QueryField) -> QueryDefinition:
    return _replace(query, selected_fields=query.selected_fields + [field])


def remove_field(query: QueryDefinition, index: int) -> QueryDefinition:
    """
    Remove a selected field.

    Joins and filters using the field are kept; the validation engine
    reports the dangling join reference as INVALID_JOIN.
    """
    fields = _without(query.selected_fields, index)
    if fields is None:
        return clone_query(query)
    return _replace(query, selected_fields=fields)


def add_join(query: QueryDefinition, join: JoinCondition) -> QueryDefinition:
    return _replace(query, joins=query.joins + [join])


def remove_join(query: QueryDefinition, index: int) -> QueryDefinition:
    joins = _without(query.joins, index)
    if joins is None:
        return clone_query(query)
    return _replace(query, joins=joins)


def add_filter(query: QueryDefinition, condition: FilterCondition) -> QueryDefinition:
    return _replace(query, filters=query.filters + [condition])


def remove_filter(query: QueryDefinition, index: int) -> QueryDefinition:
    filters = _without(query.filters, index)
    if filters is None:
        return clone_query(query)
    return _replace(query, filters=filters)


def add_sort(query: QueryDefinition, sort: SortConfig) -> QueryDefinition:
    return _replace(query, order_by=query.order_by + [sort])


def remove_sort(query: QueryDefinition, index: int) -> QueryDefinition:
    order_by = _without(query.order_by, index)
    if order_by is None:
        return clone_query(query)
    return _replace(query, order_by=order_by)


def add_aggregate(query: QueryDefinition, aggregate: AggregateConfig) -> QueryDefinition:
    return _replace(query, aggregates=query.aggregates + [aggregate])


def remove_aggregate(query: QueryDefinition, index: int) -> QueryDefinition:
    aggregates = _without(query.aggregates, index)
    if aggregates is None:
        return clone_query(query)
    return _replace(query, aggregates=aggregates)


def set_group_by(query: QueryDefinition, fields: Iterable[QueryField]) -> QueryDefinition:
    return _replace(query, group_by=list(fields))


def set_limit(query: QueryDefinition, limit: Optional[int]) -> QueryDefinition:
    """Set or clear the row limit. Negative limits are treated as no limit."""
    if limit is not None and limit < 0:
        limit = None
    return _replace(query, limit=limit)


def rename(query: QueryDefinition, name: str, description: Optional[str] = None) -> QueryDefinition:
    """Change the display name, and the description when one is given."""
    if description is None:
        description = query.description
    return _replace(query, name=name, description=description)
