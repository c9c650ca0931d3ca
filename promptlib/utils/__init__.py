"""Shared utilities."""
from promptlib.utils.datetime_helpers import ensure_utc
from promptlib.utils.search import escape_like, contains_pattern, prefix_pattern, LIKE_ESCAPE_CHAR

__all__ = ["ensure_utc", "escape_like", "contains_pattern", "prefix_pattern", "LIKE_ESCAPE_CHAR"]
