"""
Validation codes, base message texts and message construction.
"""

from enum import Enum
from typing import Any, Dict, Optional

from extract_query.core.models import Severity, ValidationMessage


class ValidationCode(str, Enum):
    NO_SOURCES = "NO_SOURCES"
    NO_FIELDS = "NO_FIELDS"
    MISSING_JOINS = "MISSING_JOINS"
    INVALID_JOIN = "INVALID_JOIN"
    INCOMPATIBLE_TYPES = "INCOMPATIBLE_TYPES"
    INVALID_OPERATOR = "INVALID_OPERATOR"
    PERFORMANCE_WARNING = "PERFORMANCE_WARNING"
    # Strict rule set only
    UNDEFINED_SOURCE = "UNDEFINED_SOURCE"
    AMBIGUOUS_FIELD = "AMBIGUOUS_FIELD"
    INVALID_AGGREGATE = "INVALID_AGGREGATE"
    INVALID_GROUP_BY = "INVALID_GROUP_BY"


BASE_MESSAGES: Dict[ValidationCode, str] = {
    ValidationCode.NO_SOURCES: "Query must include at least one data source",
    ValidationCode.NO_FIELDS: "Query must include at least one field",
    ValidationCode.MISSING_JOINS: "Missing join conditions between selected sources",
    ValidationCode.INVALID_JOIN: "Invalid join configuration between fields",
    ValidationCode.INCOMPATIBLE_TYPES: "Incompatible data types in operation",
    ValidationCode.INVALID_OPERATOR: "Invalid filter operator",
    ValidationCode.PERFORMANCE_WARNING: "Query may perform poorly",
    ValidationCode.UNDEFINED_SOURCE: "Referenced source is not defined",
    ValidationCode.AMBIGUOUS_FIELD: "Field reference is ambiguous between multiple sources",
    ValidationCode.INVALID_AGGREGATE: "Invalid aggregate function configuration",
    ValidationCode.INVALID_GROUP_BY: "Invalid GROUP BY configuration",
}


def create_message(
    code: ValidationCode,
    severity: Severity = Severity.ERROR,
    detail: Optional[str] = None,
    message: Optional[str] = None,
    field: Optional[str] = None,
    source: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
) -> ValidationMessage:
    """
    Build a validation message.

    Args:
        code: Validation code
        severity: Message severity
        detail: Appended to the base text as "<base>: <detail>"
        message: Full text replacing the base text
        field: Qualified field reference the message is about
        source: Source alias the message is about
        context: Structured details for callers

    Returns:
        ValidationMessage
    """
    text = message or BASE_MESSAGES[code]
    if detail:
        text = f"{text}: {detail}"
    return ValidationMessage(
        code=code.value,
        message=text,
        severity=severity,
        field=field,
        source=source,
        context=context,
    )
