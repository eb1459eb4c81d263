"""
Validation engine.

Single source of truth for whether a QueryDefinition is well-formed. All
rules run on every call, in order, and the engine never raises.
"""

import logging
from typing import List, Optional, Sequence

from extract_query.core.models import QueryDefinition, QueryValidation, Severity, ValidationMessage
from extract_query.validation.rules import DEFAULT_RULES, STRICT_RULES, ValidationOptions, ValidationRule

logger = logging.getLogger(__name__)


def validate_query(
    query: QueryDefinition,
    rules: Optional[Sequence[ValidationRule]] = None,
    options: Optional[ValidationOptions] = None,
) -> QueryValidation:
    """
    Validate a whole query definition.

    Args:
        query: Query definition
        rules: Rule set to run, defaults to DEFAULT_RULES
        options: Rule thresholds

    Returns:
        QueryValidation; valid iff no message has error severity
    """
    rules = DEFAULT_RULES if rules is None else rules
    options = options or ValidationOptions()

    messages: List[ValidationMessage] = []
    for rule in rules:
        messages.extend(rule(query, options))

    is_valid = not any(m.severity == Severity.ERROR for m in messages)
    logger.debug(
        "Validated query '%s': valid=%s, %d message(s)", query.id, is_valid, len(messages)
    )
    return QueryValidation(is_valid=is_valid, messages=messages)


def is_query_valid(
    query: QueryDefinition,
    rules: Optional[Sequence[ValidationRule]] = None,
    options: Optional[ValidationOptions] = None,
) -> bool:
    return validate_query(query, rules, options).is_valid


def get_validation_severity(messages: Sequence[ValidationMessage]) -> Optional[Severity]:
    """Highest severity present in `messages`, or None when empty."""
    for severity in (Severity.ERROR, Severity.WARNING, Severity.INFO):
        if any(m.severity == severity for m in messages):
            return severity
    return None


def rules_for(strict: bool) -> List[ValidationRule]:
    return list(STRICT_RULES if strict else DEFAULT_RULES)
