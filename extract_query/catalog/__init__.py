"""Source catalog resolution and type normalization."""

from extract_query.catalog.type_mappings import TypeMapper
from extract_query.catalog.resolver import SourceCatalog, get_source_fields

__all__ = ["TypeMapper", "SourceCatalog", "get_source_fields"]
