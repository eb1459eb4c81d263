"""In-memory storage of saved query definitions."""

from extract_query.store.memory import (
    STATUS_DRAFT,
    STATUS_INVALID,
    STATUS_VALID,
    QueryStore,
)

__all__ = ["QueryStore", "STATUS_DRAFT", "STATUS_INVALID", "STATUS_VALID"]
