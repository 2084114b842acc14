"""Helpers for building LIKE filters from untrusted text."""


def escape_like_pattern(pattern: str, escape_char: str = "\\") -> str:
    """Escape LIKE wildcards so ``pattern`` matches literally.

    Use together with ``column.like(..., escape=escape_char)``.

    >>> escape_like_pattern("2026-10")
    '2026-10'
    >>> escape_like_pattern("20%_")
    '20\\\\%\\\\_'
    """
    if not pattern:
        return pattern

    # Escape character first so it is not doubled later
    pattern = pattern.replace(escape_char, escape_char + escape_char)
    for wildcard in ("%", "_"):
        pattern = pattern.replace(wildcard, escape_char + wildcard)
    return pattern
