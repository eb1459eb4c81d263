"""Shared utilities."""

from extract_query.utils.log import configure_logging

__all__ = ["configure_logging"]
