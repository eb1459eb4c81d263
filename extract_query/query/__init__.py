"""Query model mutations, operator tables and display helpers."""

from extract_query.query.model import (
    add_aggregate,
    add_field,
    add_filter,
    add_join,
    add_sort,
    add_source,
    clone_query,
    new_query,
    next_alias_number,
    remove_aggregate,
    remove_field,
    remove_filter,
    remove_join,
    remove_sort,
    remove_source,
    rename,
    set_group_by,
    set_limit,
)
from extract_query.query.operators import (
    VALID_OPERATORS,
    are_fields_compatible,
    are_types_compatible,
    is_operator_valid,
    operators_for_type,
)
from extract_query.query.sql_preview import estimate_query_performance, generate_sql_preview

__all__ = [
    "add_aggregate",
    "add_field",
    "add_filter",
    "add_join",
    "add_sort",
    "add_source",
    "clone_query",
    "new_query",
    "next_alias_number",
    "remove_aggregate",
    "remove_field",
    "remove_filter",
    "remove_join",
    "remove_sort",
    "remove_source",
    "rename",
    "set_group_by",
    "set_limit",
    "VALID_OPERATORS",
    "are_fields_compatible",
    "are_types_compatible",
    "is_operator_valid",
    "operators_for_type",
    "estimate_query_performance",
    "generate_sql_preview",
]
