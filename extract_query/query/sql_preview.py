"""
Display helpers for query definitions.

`generate_sql_preview` renders a SQL-like sketch of a definition for people
to read. It is never executed and makes no attempt at dialect correctness.
"""

from typing import Any, Dict, List, Optional

from extract_query.core.models import FilterCondition, FilterOperator, QueryDefinition


def _literal(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, float)):
        return str(value)
    text = str(value).replace("'", "''")
    return f"'{text}'"


def _condition(condition: FilterCondition) -> Optional[str]:
    column = condition.field.ref
    operator = condition.operator
    value = condition.value

    if operator == FilterOperator.EQUALS:
        return f"{column} = {_literal(value)}"
    elif operator == FilterOperator.NOT_EQUALS:
        return f"{column} <> {_literal(value)}"
    elif operator == FilterOperator.GREATER_THAN:
        return f"{column} > {_literal(value)}"
    elif operator == FilterOperator.LESS_THAN:
        return f"{column} < {_literal(value)}"
    elif operator == FilterOperator.CONTAINS:
        if value is None:
            return f"{column} LIKE NULL"
        return f"{column} LIKE {_literal(f'%{value}%')}"
    elif operator == FilterOperator.IN:
        values = value if isinstance(value, (list, tuple)) else [value]
        return f"{column} IN ({', '.join(_literal(v) for v in values)})"
    elif operator == FilterOperator.BETWEEN:
        # Incomplete ranges render as placeholders
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return f"{column} BETWEEN {_literal(value[0])} AND {_literal(value[1])}"
        return f"{column} BETWEEN ? AND ?"
    return None


def _where_clause(conditions: List[FilterCondition]) -> Optional[str]:
    parts: List[str] = []
    for condition in conditions:
        clause = _condition(condition)
        if clause is None:
            continue
        if parts:
            connector = condition.logical_operator.value if condition.logical_operator else "AND"
            parts.append(connector)
        parts.append(clause)
    return " ".join(parts) if parts else None


def generate_sql_preview(query: QueryDefinition) -> str:
    """
    Render a readable SQL-like sketch of a query definition.

    Args:
        query: Query definition

    Returns:
        Multi-line text; empty string when the query has no sources
    """
    if not query.sources:
        return ""

    tables: Dict[str, Optional[str]] = {s.alias: s.table for s in query.sources}
    parts: List[str] = []

    columns = [f.ref for f in query.selected_fields]
    columns += [
        f"{a.function.value}({a.field.ref}) AS {a.alias}" for a in query.aggregates
    ]
    parts.append(f"SELECT {', '.join(columns) if columns else '*'}")

    first = query.sources[0]
    parts.append(f"FROM {first.table or first.source_id} {first.alias}")

    for join in query.joins:
        right = join.right_field
        right_table = right.table or tables.get(right.source) or right.source
        parts.append(
            f"{join.type.value} JOIN {right_table} {right.source} "
            f"ON {join.left_field.ref} = {right.ref}"
        )

    where = _where_clause(query.filters)
    if where:
        parts.append(f"WHERE {where}")

    if query.group_by:
        parts.append(f"GROUP BY {', '.join(f.ref for f in query.group_by)}")

    having = _where_clause(query.having)
    if having:
        parts.append(f"HAVING {having}")

    if query.order_by:
        ordering = ", ".join(f"{s.field.ref} {s.direction.value}" for s in query.order_by)
        parts.append(f"ORDER BY {ordering}")

    if query.limit is not None:
        parts.append(f"LIMIT {query.limit}")

    return "\n".join(parts)


def estimate_query_performance(query: QueryDefinition) -> Dict[str, Any]:
    """
    Rough size and time estimate with tuning recommendations.

    Starts from 1000 rows, multiplies by 10 per join and keeps a tenth of
    the rows when filters are present.

    Returns:
        Dictionary with estimated_rows, estimated_time (seconds) and
        recommendations
    """
    recommendations: List[str] = []
    estimated_rows = 1000

    if query.joins:
        estimated_rows *= 10 ** len(query.joins)
        if len(query.joins) > 2:
            recommendations.append("Consider reducing the number of table joins")

    if query.filters:
        estimated_rows = estimated_rows // 10
    else:
        recommendations.append("Adding filters would improve query performance")

    if len(query.selected_fields) > 15:
        recommendations.append("Consider reducing the number of selected fields")

    return {
        "estimated_rows": estimated_rows,
        "estimated_time": estimated_rows / 1000,
        "recommendations": recommendations,
    }
