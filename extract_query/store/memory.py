"""
In-memory query store.

Keyed collection of saved QueryDefinitions in insertion order. Nothing is
persisted beyond the lifetime of the store object.
"""

import logging
import time
from typing import Dict, Iterable, List, Optional, Sequence

from extract_query.core.errors import InvalidQueryError, QueryNotFoundError
from extract_query.core.models import QueryDefinition, QueryValidation, utc_now
from extract_query.validation.engine import validate_query
from extract_query.validation.rules import ValidationOptions, ValidationRule

logger = logging.getLogger(__name__)

STATUS_DRAFT = "draft"
STATUS_INVALID = "invalid"
STATUS_VALID = "valid"


class QueryStore:
    """
    Stores query definitions keyed by id.

    By default the store does not validate what it is given: callers gate
    create/update on the validation verdict. With `require_valid=True` the
    store re-validates on every write and rejects invalid definitions.
    Stored definitions are copies, so callers cannot mutate store state.
    """

    def __init__(
        self,
        queries: Optional[Iterable[QueryDefinition]] = None,
        require_valid: bool = False,
        rules: Optional[Sequence[ValidationRule]] = None,
        options: Optional[ValidationOptions] = None,
    ):
        """
        Initialize query store.

        Args:
            queries: Definitions to seed the store with, stored as given
            require_valid: Re-validate on create/update
            rules: Rule set used when re-validating
            options: Rule thresholds used when re-validating
        """
        self.require_valid = require_valid
        self.rules = rules
        self.options = options
        self._queries: Dict[str, QueryDefinition] = {}
        self._validations: Dict[str, QueryValidation] = {}
        for query in queries or []:
            self._queries[query.id] = query.model_copy(deep=True)

    def __len__(self) -> int:
        return len(self._queries)

    def __contains__(self, query_id: object) -> bool:
        return query_id in self._queries

    def _new_id(self) -> str:
        base = f"query-{int(time.time() * 1000)}"
        candidate = base
        suffix = 2
        while candidate in self._queries:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def _check(self, query: QueryDefinition) -> None:
        if not self.require_valid:
            return
        validation = validate_query(query, self.rules, self.options)
        if not validation.is_valid:
            codes = ", ".join(m.code for m in validation.errors)
            raise InvalidQueryError(f"Query '{query.name}' is not valid: {codes}", validation)

    def create(self, query: QueryDefinition) -> QueryDefinition:
        """
        Insert a definition under a newly generated id.

        Args:
            query: Definition to store; its id and timestamps are replaced

        Returns:
            Copy of the stored definition

        Raises:
            InvalidQueryError: If require_valid is set and the query is invalid
        """
        self._check(query)
        now = utc_now()
        stored = query.model_copy(
            update={"id": self._new_id(), "created_at": now, "updated_at": now},
            deep=True,
        )
        self._queries[stored.id] = stored
        logger.info("Created query '%s' (%s)", stored.id, stored.name)
        return stored.model_copy(deep=True)

    def update(self, query_id: str, query: QueryDefinition) -> QueryDefinition:
        """
        Replace a stored definition, keeping its id and creation time.

        Args:
            query_id: Id of the stored definition
            query: New content

        Returns:
            Copy of the stored definition with updated_at refreshed

        Raises:
            QueryNotFoundError: If no definition has this id
            InvalidQueryError: If require_valid is set and the query is invalid
        """
        existing = self._queries.get(query_id)
        if existing is None:
            raise QueryNotFoundError(query_id)
        self._check(query)

        stored = query.model_copy(
            update={
                "id": existing.id,
                "created_at": existing.created_at,
                "updated_at": utc_now(),
            },
            deep=True,
        )
        self._queries[query_id] = stored
        # A stale verdict must not survive a content change
        self._validations.pop(query_id, None)
        logger.info("Updated query '%s'", query_id)
        return stored.model_copy(deep=True)

    def delete(self, query_id: str) -> None:
        """Remove a definition. Deleting an unknown id is a no-op."""
        if self._queries.pop(query_id, None) is not None:
            logger.info("Deleted query '%s'", query_id)
        self._validations.pop(query_id, None)

    def get(self, query_id: str) -> Optional[QueryDefinition]:
        query = self._queries.get(query_id)
        return query.model_copy(deep=True) if query is not None else None

    def list(self) -> List[QueryDefinition]:
        """All stored definitions in insertion order."""
        return [q.model_copy(deep=True) for q in self._queries.values()]

    def record_validation(self, query_id: str, validation: QueryValidation) -> None:
        """Remember the latest verdict for a stored query (used by status())."""
        if query_id in self._queries:
            self._validations[query_id] = validation

    def status(self, query_id: str) -> str:
        """
        Status label for a stored query.

        Returns:
            "draft" when no verdict is recorded, otherwise "valid" or "invalid"

        Raises:
            QueryNotFoundError: If no definition has this id
        """
        if query_id not in self._queries:
            raise QueryNotFoundError(query_id)
        validation = self._validations.get(query_id)
        if validation is None:
            return STATUS_DRAFT
        return STATUS_VALID if validation.is_valid else STATUS_INVALID
