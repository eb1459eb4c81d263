"""
Validation rules.

Each rule inspects a whole QueryDefinition and returns zero or more
messages. DEFAULT_RULES is the fixed rule set gating save and preview;
STRICT_RULES appends reference-integrity and aggregation checks.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from extract_query.core.models import (
    FilterCondition,
    JoinCondition,
    QueryDefinition,
    QueryField,
    Severity,
    ValidationMessage,
)
from extract_query.query.operators import (
    NUMERIC_AGGREGATE_FUNCTIONS,
    NUMERIC_TYPES,
    are_fields_compatible,
    is_operator_valid,
    operators_for_type,
)
from extract_query.validation.messages import ValidationCode, create_message


@dataclass(frozen=True)
class ValidationOptions:
    """Tunable thresholds for rules."""
    field_warning_limit: int = 20


RuleCheck = Callable[[QueryDefinition, ValidationOptions], List[ValidationMessage]]


@dataclass(frozen=True)
class ValidationRule:
    code: ValidationCode
    check: RuleCheck

    def __call__(self, query: QueryDefinition, options: ValidationOptions) -> List[ValidationMessage]:
        return self.check(query, options)


def _join_context(left: QueryField, right: QueryField) -> Dict[str, str]:
    return {
        "leftField": left.ref,
        "leftType": left.type,
        "rightField": right.ref,
        "rightType": right.type,
    }


def _join_text(left: QueryField, right: QueryField) -> str:
    return f"Cannot join {left.ref} ({left.type}) with {right.ref} ({right.type})"


def check_sources(query: QueryDefinition, options: ValidationOptions) -> List[ValidationMessage]:
    if not query.sources:
        return [create_message(ValidationCode.NO_SOURCES)]
    return []


def check_fields(query: QueryDefinition, options: ValidationOptions) -> List[ValidationMessage]:
    if not query.selected_fields:
        return [create_message(ValidationCode.NO_FIELDS)]
    return []


def check_join_count(query: QueryDefinition, options: ValidationOptions) -> List[ValidationMessage]:
    """
    Require at least len(sources) - 1 joins when several sources are used.

    This counts joins, it does not check that the join graph connects every
    source: two joins between the same pair still satisfy three sources.
    """
    required = len(query.sources) - 1
    if len(query.sources) > 1 and len(query.joins) < required:
        return [
            create_message(
                ValidationCode.MISSING_JOINS,
                context={
                    "sources": len(query.sources),
                    "joins": len(query.joins),
                    "requiredJoins": required,
                },
            )
        ]
    return []


def _check_join(query: QueryDefinition, join: JoinCondition) -> List[ValidationMessage]:
    left = query.find_selected_field(join.left_field)
    right = query.find_selected_field(join.right_field)

    if left is None or right is None:
        missing = [f.ref for f, found in ((join.left_field, left), (join.right_field, right)) if found is None]
        return [
            create_message(
                ValidationCode.INVALID_JOIN,
                detail=(
                    f"{_join_text(join.left_field, join.right_field)}; "
                    f"not selected: {', '.join(missing)}"
                ),
                field=join.left_field.ref,
                source=join.left_field.source,
                context={"join": _join_context(join.left_field, join.right_field), "missing": missing},
            )
        ]

    if not are_fields_compatible(left, right):
        return [
            create_message(
                ValidationCode.INCOMPATIBLE_TYPES,
                detail=_join_text(left, right),
                field=left.ref,
                source=left.source,
                context={"join": _join_context(left, right)},
            )
        ]
    return []


def check_joins(query: QueryDefinition, options: ValidationOptions) -> List[ValidationMessage]:
    """Each join must reference selected fields of join-compatible types."""
    messages: List[ValidationMessage] = []
    for join in query.joins:
        messages.extend(_check_join(query, join))
    return messages


def _check_operator(condition: FilterCondition) -> List[ValidationMessage]:
    field = condition.field
    if is_operator_valid(field.type, condition.operator):
        return []
    allowed = [op.value for op in operators_for_type(field.type)]
    return [
        create_message(
            ValidationCode.INVALID_OPERATOR,
            message=(
                f"Operator '{condition.operator.value}' is not valid for field "
                f"{field.ref} of type '{field.type}'"
            ),
            field=field.ref,
            source=field.source,
            context={
                "filter": {
                    "field": field.ref,
                    "operator": condition.operator.value,
                    "value": condition.value,
                    "expectedType": field.type,
                },
                "allowedOperators": allowed,
            },
        )
    ]


def check_filter_operators(query: QueryDefinition, options: ValidationOptions) -> List[ValidationMessage]:
    messages: List[ValidationMessage] = []
    for condition in query.filters:
        messages.extend(_check_operator(condition))
    return messages


def check_field_count(query: QueryDefinition, options: ValidationOptions) -> List[ValidationMessage]:
    if len(query.selected_fields) > options.field_warning_limit:
        return [
            create_message(
                ValidationCode.PERFORMANCE_WARNING,
                severity=Severity.WARNING,
                message="Large number of selected fields may impact performance",
                context={
                    "selectedFields": len(query.selected_fields),
                    "limit": options.field_warning_limit,
                },
            )
        ]
    return []


def check_filters_present(query: QueryDefinition, options: ValidationOptions) -> List[ValidationMessage]:
    if not query.filters:
        return [
            create_message(
                ValidationCode.PERFORMANCE_WARNING,
                severity=Severity.WARNING,
                message="Consider adding filters to improve query performance",
            )
        ]
    return []


# ---------------------------------------------------------------------------
# Strict rules
# ---------------------------------------------------------------------------

def _referenced_fields(query: QueryDefinition) -> List[Tuple[str, QueryField]]:
    """Every field reference in the query, tagged with where it appears."""
    refs: List[Tuple[str, QueryField]] = []
    refs.extend(("selectedFields", f) for f in query.selected_fields)
    for join in query.joins:
        refs.append(("joins", join.left_field))
        refs.append(("joins", join.right_field))
    refs.extend(("filters", c.field) for c in query.filters)
    refs.extend(("groupBy", f) for f in query.group_by)
    refs.extend(("having", c.field) for c in query.having)
    refs.extend(("orderBy", s.field) for s in query.order_by)
    refs.extend(("aggregates", a.field) for a in query.aggregates)
    return refs


def check_duplicate_aliases(query: QueryDefinition, options: ValidationOptions) -> List[ValidationMessage]:
    counts: Dict[str, int] = {}
    for alias in query.source_aliases():
        counts[alias] = counts.get(alias, 0) + 1
    return [
        create_message(
            ValidationCode.AMBIGUOUS_FIELD,
            detail=f"alias '{alias}' is used by {count} sources",
            source=alias,
            context={"alias": alias, "count": count},
        )
        for alias, count in counts.items()
        if count > 1
    ]


def check_undefined_sources(query: QueryDefinition, options: ValidationOptions) -> List[ValidationMessage]:
    aliases = set(query.source_aliases())
    messages: List[ValidationMessage] = []
    reported = set()
    for location, field in _referenced_fields(query):
        key = (location, field.ref)
        if field.source in aliases or key in reported:
            continue
        reported.add(key)
        messages.append(
            create_message(
                ValidationCode.UNDEFINED_SOURCE,
                detail=f"{field.ref} in {location} references unknown source '{field.source}'",
                field=field.ref,
                source=field.source,
                context={"location": location},
            )
        )
    return messages


def check_self_joins(query: QueryDefinition, options: ValidationOptions) -> List[ValidationMessage]:
    messages: List[ValidationMessage] = []
    for join in query.joins:
        if join.left_field.source == join.right_field.source:
            messages.append(
                create_message(
                    ValidationCode.INVALID_JOIN,
                    detail=(
                        f"{join.left_field.ref} and {join.right_field.ref} belong to "
                        f"the same source '{join.left_field.source}'"
                    ),
                    field=join.left_field.ref,
                    source=join.left_field.source,
                    context={"join": _join_context(join.left_field, join.right_field)},
                )
            )
    return messages


def check_aggregates(query: QueryDefinition, options: ValidationOptions) -> List[ValidationMessage]:
    messages: List[ValidationMessage] = []
    for aggregate in query.aggregates:
        function = aggregate.function.value
        if function in NUMERIC_AGGREGATE_FUNCTIONS and aggregate.field.type not in NUMERIC_TYPES:
            messages.append(
                create_message(
                    ValidationCode.INVALID_AGGREGATE,
                    detail=(
                        f"{function} requires a numeric field, "
                        f"{aggregate.field.ref} is {aggregate.field.type}"
                    ),
                    field=aggregate.field.ref,
                    source=aggregate.field.source,
                    context={"function": function, "alias": aggregate.alias},
                )
            )
    return messages


def check_group_by(query: QueryDefinition, options: ValidationOptions) -> List[ValidationMessage]:
    """With aggregates present, every plain selected field must be grouped."""
    if not query.aggregates:
        return []
    messages: List[ValidationMessage] = []
    for field in query.selected_fields:
        if not any(field.same_column(grouped) for grouped in query.group_by):
            messages.append(
                create_message(
                    ValidationCode.INVALID_GROUP_BY,
                    detail=f"{field.ref} must appear in GROUP BY when aggregates are used",
                    field=field.ref,
                    source=field.source,
                )
            )
    return messages


DEFAULT_RULES: List[ValidationRule] = [
    ValidationRule(ValidationCode.NO_SOURCES, check_sources),
    ValidationRule(ValidationCode.NO_FIELDS, check_fields),
    ValidationRule(ValidationCode.MISSING_JOINS, check_join_count),
    ValidationRule(ValidationCode.INVALID_JOIN, check_joins),
    ValidationRule(ValidationCode.INVALID_OPERATOR, check_filter_operators),
    ValidationRule(ValidationCode.PERFORMANCE_WARNING, check_field_count),
    ValidationRule(ValidationCode.PERFORMANCE_WARNING, check_filters_present),
]

STRICT_RULES: List[ValidationRule] = DEFAULT_RULES + [
    ValidationRule(ValidationCode.AMBIGUOUS_FIELD, check_duplicate_aliases),
    ValidationRule(ValidationCode.UNDEFINED_SOURCE, check_undefined_sources),
    ValidationRule(ValidationCode.INVALID_JOIN, check_self_joins),
    ValidationRule(ValidationCode.INVALID_AGGREGATE, check_aggregates),
    ValidationRule(ValidationCode.INVALID_GROUP_BY, check_group_by),
]
