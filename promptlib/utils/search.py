"""Helpers for building LIKE patterns from user input."""

LIKE_ESCAPE_CHAR = "\\"


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user text matches literally.

    The escape character itself is escaped first so a trailing backslash in the
    input can't swallow the closing wildcard.
    """
    return (
        value.replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", LIKE_ESCAPE_CHAR + "%")
        .replace("_", LIKE_ESCAPE_CHAR + "_")
    )


def contains_pattern(value: str) -> str:
    """Pattern for a substring match against ``value``."""
    return f"%{escape_like(value)}%"


def prefix_pattern(value: str) -> str:
    """Pattern for a prefix match against ``value``."""
    return f"{escape_like(value)}%"
