"""
Word transformations used to derive root keys, type tags and side-load buckets.
"""

from __future__ import annotations

import re

from .settings import get_settings

__all__ = [
    "QUERY_MARKER",
    "underscore",
    "pluralize",
    "strip_query_marker",
]

QUERY_MARKER = "?"
"""
Trailing character marking a boolean query attribute, e.g. `"overdue?"`.
"""

# ordered most specific first
_PLURAL_RULES: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(p, re.IGNORECASE), r)
    for p, r in (
        (r"(quiz)$", r"\1zes"),
        (r"^(ox)$", r"\1en"),
        (r"(matr|vert|ind)(?:ix|ex)$", r"\1ices"),
        (r"(x|ch|ss|sh)$", r"\1es"),
        (r"([^aeiouy]|qu)y$", r"\1ies"),
        (r"(hive)$", r"\1s"),
        (r"(?:([^f])fe|([lr])f)$", r"\1\2ves"),
        (r"sis$", "ses"),
        (r"([ti])um$", r"\1a"),
        (r"(buffal|tomat)o$", r"\1oes"),
        (r"(bu)s$", r"\1ses"),
        (r"(alias|status)$", r"\1es"),
        (r"(octop|vir)us$", r"\1i"),
        (r"(ax|test)is$", r"\1es"),
        (r"s$", "s"),
    )
)

_IRREGULAR_PLURALS = {
    "person": "people",
    "man": "men",
    "child": "children",
    "sex": "sexes",
    "move": "moves",
}

_UNCOUNTABLE = frozenset(
    ("equipment", "information", "rice", "money", "species", "series", "fish")
)


def underscore(word: str) -> str:
    """
    Convert a camel-cased name to lower case with underscores, e.g.
    `"BlogPost" -> "blog_post"`.
    """
    word = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", word)
    word = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", word)
    return word.replace("-", "_").lower()


def pluralize(word: str) -> str:
    """
    Pluralize the last underscore-separated part of a word, honoring irregular and
    uncountable words from settings.
    """
    if not word:
        return word

    settings = get_settings()
    head, sep, last = word.rpartition("_")
    lower = last.lower()

    if lower in settings.uncountable or lower in _UNCOUNTABLE:
        return word

    irregulars = {**_IRREGULAR_PLURALS, **settings.irregular_plurals}
    if lower in {p.lower() for p in irregulars.values()}:
        return word
    if lower in irregulars:
        plural = irregulars[lower]
        # keep leading capital
        if last[:1].isupper():
            plural = plural[:1].upper() + plural[1:]
        return f"{head}{sep}{plural}"

    for pattern, replacement in _PLURAL_RULES:
        if pattern.search(last):
            return f"{head}{sep}{pattern.sub(replacement, last)}"

    return f"{word}s"


def strip_query_marker(name: str) -> str:
    """
    Remove a trailing query marker, e.g. `"overdue?" -> "overdue"`.
    """
    return name[: -len(QUERY_MARKER)] if name.endswith(QUERY_MARKER) else name
