"""
Exceptions raised by the extract query engine.

Validation problems are never raised; they are reported as messages by the
validation engine. These exceptions cover caller-level failures only.
"""

from typing import Optional

from extract_query.core.models import QueryValidation


class QueryEngineError(Exception):
    """Base class for all engine errors."""


class InvalidQueryError(QueryEngineError):
    """An action that requires a valid query was attempted on an invalid one."""

    def __init__(self, message: str, validation: Optional[QueryValidation] = None):
        super().__init__(message)
        self.validation = validation


class QueryNotFoundError(QueryEngineError, KeyError):
    """No stored query exists with the requested id."""

    def __init__(self, query_id: str):
        super().__init__(query_id)
        self.query_id = query_id

    def __str__(self) -> str:
        return f"Query '{self.query_id}' not found"


class PreviewBackendError(QueryEngineError):
    """A preview backend failed to produce a result."""


class PreviewError(QueryEngineError):
    """The latest preview request was rejected."""

    def __init__(self, message: str, query_id: Optional[str] = None):
        super().__init__(message)
        self.query_id = query_id
