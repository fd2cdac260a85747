"""Shared helpers for the service layer."""


def escape_ilike(value: str) -> str:
    r"""
    Escape special ILIKE characters so they match literally.

    `%` matches any run of characters, `_` any single character, and `\\`
    escapes the next one; a search term must match none of them as wildcards.
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
