"""
Preview execution coordinator.

Wraps a preview backend and sequences requests: every call takes a
monotonically increasing token, and only the response to the latest token
is accepted. Responses to superseded requests are discarded.
"""

import logging
from typing import Optional

from extract_query.core.errors import PreviewError
from extract_query.core.interfaces import IPreviewBackend
from extract_query.core.models import QueryDefinition, QueryResult

logger = logging.getLogger(__name__)


class PreviewExecutor:
    """
    Coordinates preview execution.

    Not cancellable and no retries: a failure of the latest request is
    raised to the caller as PreviewError.
    """

    def __init__(self, backend: IPreviewBackend):
        """
        Initialize preview executor.

        Args:
            backend: Preview backend implementation
        """
        self.backend = backend
        self._sequence = 0
        self.latest_result: Optional[QueryResult] = None
        self.latest_query_id: Optional[str] = None

    @property
    def latest_token(self) -> int:
        """Token of the most recently issued request (0 before any)."""
        return self._sequence

    def is_current(self, token: int) -> bool:
        return token == self._sequence

    def invalidate(self) -> None:
        """Supersede any pending request and forget the latest result."""
        self._sequence += 1
        self.latest_result = None
        self.latest_query_id = None

    async def preview(self, query: QueryDefinition) -> Optional[QueryResult]:
        """
        Execute a preview request.

        Args:
            query: Query definition to preview

        Returns:
            The result, or None if a newer request was issued while this one
            was pending

        Raises:
            PreviewError: If the backend fails and this is still the latest
                request
        """
        self._sequence += 1
        token = self._sequence
        logger.debug("Preview #%d started for query '%s'", token, query.id)

        try:
            result = await self.backend.execute(query)
        except Exception as e:
            if not self.is_current(token):
                logger.info(
                    "Ignoring failure of superseded preview #%d (latest #%d): %s",
                    token, self._sequence, e,
                )
                return None
            logger.warning("Preview #%d failed for query '%s': %s", token, query.id, e)
            raise PreviewError(f"Preview failed for query '{query.id}': {e}", query.id) from e

        if not self.is_current(token):
            logger.debug(
                "Discarding superseded preview #%d (latest #%d)", token, self._sequence
            )
            return None

        self.latest_result = result
        self.latest_query_id = query.id
        logger.info(
            "Preview #%d for query '%s' returned %d row(s)", token, query.id, result.total_rows
        )
        return result
