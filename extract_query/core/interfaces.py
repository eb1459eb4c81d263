"""
Abstract interfaces for external collaborators.

These protocols define the contracts the engine consumes: a catalog of
source table metadata and a backend able to execute (or simulate) a query
preview.
"""

from typing import List, Optional, Protocol

from extract_query.core.models import QueryDefinition, QueryField, QueryResult, QuerySource
from extract_query.core.sources import TableMetadata


class ISourceCatalog(Protocol):
    """
    Provide table metadata for registered data sources.

    Implementations resolve a table name (case-insensitive) to its metadata
    and map it into fields scoped to a query alias.
    """

    def get_table(self, table_name: str) -> Optional[TableMetadata]:
        """
        Look up table metadata by name.

        Args:
            table_name: Table name, matched case-insensitively

        Returns:
            Table metadata, or None if the table is unknown
        """
        ...

    def get_source_fields(self, source: QuerySource) -> List[QueryField]:
        """
        Map the source's table fields into query fields.

        Args:
            source: Query-local source reference

        Returns:
            Fields scoped to `source.alias`, empty if the table is unknown
        """
        ...


class IPreviewBackend(Protocol):
    """
    Execute a query definition and return a bounded result set.

    The engine ships a sample-data implementation only; a real backend would
    run the full relational semantics against live sources.
    """

    async def execute(self, query: QueryDefinition) -> QueryResult:
        """
        Produce a preview result for a query.

        Args:
            query: Query definition to execute

        Returns:
            Result with columns matching the selected fields

        Raises:
            PreviewBackendError: If the backend fails
        """
        ...
