"""
Operator and type compatibility tables.

Which filter operators apply to which field types, and which field types
can be joined with each other.
"""

from typing import Dict, FrozenSet, List

from extract_query.core.models import FieldType, FilterOperator, QueryField

NUMERIC_TYPES: FrozenSet[str] = frozenset({FieldType.DECIMAL.value, FieldType.NUMBER.value})

_ORDERED_OPERATORS: List[FilterOperator] = [
    FilterOperator.EQUALS,
    FilterOperator.NOT_EQUALS,
    FilterOperator.GREATER_THAN,
    FilterOperator.LESS_THAN,
    FilterOperator.BETWEEN,
]

# Types missing from this table (boolean included) accept no operator.
VALID_OPERATORS: Dict[str, List[FilterOperator]] = {
    FieldType.STRING.value: [
        FilterOperator.EQUALS,
        FilterOperator.NOT_EQUALS,
        FilterOperator.CONTAINS,
        FilterOperator.IN,
    ],
    FieldType.NUMBER.value: list(_ORDERED_OPERATORS),
    FieldType.DECIMAL.value: list(_ORDERED_OPERATORS),
    FieldType.DATE.value: list(_ORDERED_OPERATORS),
}

NUMERIC_AGGREGATE_FUNCTIONS = frozenset({"SUM", "AVG"})


def operators_for_type(field_type: str) -> List[FilterOperator]:
    """Operators allowed for a field type, empty for unknown types."""
    return list(VALID_OPERATORS.get(field_type, []))


def is_operator_valid(field_type: str, operator: FilterOperator) -> bool:
    return operator in VALID_OPERATORS.get(field_type, [])


def are_types_compatible(left_type: str, right_type: str) -> bool:
    """Two field types can be joined if equal or both numeric."""
    if left_type == right_type:
        return True
    return left_type in NUMERIC_TYPES and right_type in NUMERIC_TYPES


def are_fields_compatible(left: QueryField, right: QueryField) -> bool:
    return are_types_compatible(left.type, right.type)
