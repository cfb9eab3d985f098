"""Shared SQL filter helpers."""

LIKE_ESCAPE_CHAR = "\\"


def contains_pattern(term: str) -> str:
    """LIKE pattern matching `term` anywhere, with wildcards escaped."""

    escaped = (
        term.replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", LIKE_ESCAPE_CHAR + "%")
        .replace("_", LIKE_ESCAPE_CHAR + "_")
    )
    return f"%{escaped}%"
