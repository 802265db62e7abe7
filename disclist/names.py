"""
The names module turns raw directory names into the names we display and the keys we sort them by.
Display names and sort keys are deliberately distinct: sort keys are never shown to the user.
"""

ARTICLE_PREFIX = "the "


def display_name(name: str) -> str:
    """Hook for cosmetic formatting of directory names. Currently the identity."""
    return name


def sort_key(name: str) -> str:
    """
    Normalize a display name for ordering: lowercase it, drop a leading "the ", and trim the
    surrounding whitespace. So "The Beatles" sorts as "beatles", between "ABBA" and "Zz Top".
    """
    name = name.lower().removeprefix(ARTICLE_PREFIX)
    return name.strip()
