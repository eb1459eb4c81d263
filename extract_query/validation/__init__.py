"""Rule-based validation of query definitions."""

from extract_query.validation.engine import (
    get_validation_severity,
    is_query_valid,
    rules_for,
    validate_query,
)
from extract_query.validation.messages import ValidationCode, create_message
from extract_query.validation.rules import (
    DEFAULT_RULES,
    STRICT_RULES,
    ValidationOptions,
    ValidationRule,
)

__all__ = [
    "get_validation_severity",
    "is_query_valid",
    "rules_for",
    "validate_query",
    "ValidationCode",
    "create_message",
    "DEFAULT_RULES",
    "STRICT_RULES",
    "ValidationOptions",
    "ValidationRule",
]
