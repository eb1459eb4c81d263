"""
Extract Query - cross-source query definition and validation engine.

Main entry point for composing, validating, previewing and storing extract
queries over databases, flat files and APIs.
"""

from extract_query.orchestrator import QueryWorkbench
from extract_query.catalog.resolver import SourceCatalog, get_source_fields
from extract_query.config import EngineSettings
from extract_query.execution import PreviewExecutor, SamplePreviewBackend
from extract_query.store import QueryStore
from extract_query.validation import validate_query

__all__ = [
    "QueryWorkbench",
    "SourceCatalog",
    "get_source_fields",
    "EngineSettings",
    "PreviewExecutor",
    "SamplePreviewBackend",
    "QueryStore",
    "validate_query",
]
