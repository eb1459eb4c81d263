"""
Field catalog resolution.

Maps registered data source table metadata into query fields scoped to a
query-local source alias.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from extract_query.catalog.type_mappings import TypeMapper
from extract_query.core.models import QueryDefinition, QueryField, QuerySource
from extract_query.core.sources import DataSource, FieldMetadata, TableMetadata

logger = logging.getLogger(__name__)

FieldDescriptor = Union[FieldMetadata, Mapping[str, Any]]


def _lookup_table(
    catalog: Mapping[str, Sequence[FieldDescriptor]], table: str
) -> Optional[Sequence[FieldDescriptor]]:
    if table in catalog:
        return catalog[table]
    wanted = table.lower()
    for name, fields in catalog.items():
        if name.lower() == wanted:
            return fields
    return None


def _to_metadata(descriptor: FieldDescriptor) -> FieldMetadata:
    if isinstance(descriptor, FieldMetadata):
        return descriptor
    return FieldMetadata.model_validate(descriptor)


def get_source_fields(
    source: QuerySource, catalog: Mapping[str, Sequence[FieldDescriptor]]
) -> List[QueryField]:
    """
    Map a source's table fields into query fields.

    Args:
        source: Query-local source reference
        catalog: Table name -> field descriptors ({name, type, nullable})

    Returns:
        Fields with `source` set to the source alias, in catalog order.
        Empty when the source has no table or the table is unknown.
    """
    if not source.table:
        return []

    descriptors = _lookup_table(catalog, source.table)
    if descriptors is None:
        return []

    fields = []
    for descriptor in descriptors:
        meta = _to_metadata(descriptor)
        fields.append(
            QueryField(
                name=meta.name,
                type=meta.type,
                source=source.alias,
                table=source.table,
                description=meta.description,
            )
        )
    return fields


class SourceCatalog:
    """
    Catalog of table metadata built from registered data sources.

    Implements the ISourceCatalog interface. Native field types are
    normalized per source kind when sources are registered; table names are
    matched case-insensitively.
    """

    def __init__(self, data_sources: Optional[Iterable[DataSource]] = None):
        """
        Initialize catalog.

        Args:
            data_sources: Registered data sources to read table metadata from
        """
        self._sources: Dict[str, DataSource] = {}
        # source id -> table key -> normalized field metadata
        self._tables_by_source: Dict[str, Dict[str, List[FieldMetadata]]] = {}
        for data_source in data_sources or []:
            self.register(data_source)

    def register(self, data_source: DataSource) -> None:
        """Register (or replace) a data source and index its tables."""
        kind = data_source.type.value
        tables: Dict[str, List[FieldMetadata]] = {}
        for table in data_source.metadata.tables:
            tables[table.name.lower()] = [
                field.model_copy(
                    update={"type": TypeMapper.normalize_type(field.type, kind)}
                )
                for field in table.fields
            ]

        for other_id, other_tables in self._tables_by_source.items():
            if other_id == data_source.id:
                continue
            shared = set(tables) & set(other_tables)
            if shared:
                logger.warning(
                    "Tables %s of source '%s' are also provided by '%s'",
                    sorted(shared), data_source.id, other_id,
                )

        self._sources[data_source.id] = data_source
        self._tables_by_source[data_source.id] = tables
        logger.debug("Registered source '%s' with %d table(s)", data_source.id, len(tables))

    def unregister(self, source_id: str) -> None:
        self._sources.pop(source_id, None)
        self._tables_by_source.pop(source_id, None)

    @property
    def data_sources(self) -> List[DataSource]:
        return list(self._sources.values())

    def get_data_source(self, source_id: str) -> Optional[DataSource]:
        return self._sources.get(source_id)

    def as_mapping(self) -> Dict[str, List[FieldMetadata]]:
        """
        Flatten into a table name -> fields mapping.

        When two sources provide the same table name, the first registered
        source wins.
        """
        mapping: Dict[str, List[FieldMetadata]] = {}
        for tables in self._tables_by_source.values():
            for name, fields in tables.items():
                mapping.setdefault(name, fields)
        return mapping

    def get_table(self, table_name: str) -> Optional[TableMetadata]:
        fields = self.as_mapping().get(table_name.lower())
        if fields is None:
            return None
        return TableMetadata(name=table_name.lower(), fields=list(fields))

    def get_source_fields(self, source: QuerySource) -> List[QueryField]:
        """
        Map a query source into fields, preferring its own data source.

        Args:
            source: Query-local source reference

        Returns:
            Fields scoped to the source alias
        """
        own_tables = self._tables_by_source.get(source.source_id)
        if own_tables is not None and source.table and source.table.lower() in own_tables:
            return get_source_fields(source, own_tables)
        return get_source_fields(source, self.as_mapping())

    def available_fields(self, query: QueryDefinition) -> List[QueryField]:
        """All catalog fields for every source of a query, in source order."""
        fields: List[QueryField] = []
        for source in query.sources:
            fields.extend(self.get_source_fields(source))
        return fields
