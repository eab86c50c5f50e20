"""
Small text helpers shared by the parsers and importers.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

# Words left lowercase by to_title_case unless they start the string
_SMALL_WORDS = {
    "a", "an", "and", "as", "at", "but", "by", "for", "in", "nor",
    "of", "on", "or", "so", "the", "to", "up", "yet", "with",
}


def to_title_case(text: str | None) -> str:
    """Convert a string to English-style title case.

    Strings that are already mixed case are returned unchanged, so
    "Goblin Warrior" stays as written while "GOBLIN WARRIOR" and
    "goblin warrior" both become "Goblin Warrior".

    Args:
        text: The input string.

    Returns:
        The title-cased string, or "" for empty input.
    """
    if not text:
        return ""
    if text.lower() != text and text.upper() != text:
        return text

    words: list[str] = []
    for i, word in enumerate(text.lower().split()):
        if i == 0 or word not in _SMALL_WORDS:
            words.append(word[:1].upper() + word[1:])
        else:
            words.append(word)
    return " ".join(words)


def csv_to_flags(text: str | None) -> set[str]:
    """Split a comma-separated string into a set of trimmed values."""
    if not text:
        return set()
    return {value.strip() for value in text.split(",") if value.strip()}


def summarize_names(items: Iterable[object]) -> str:
    """Comma-separated ``name`` attributes of *items*, or "(none)"."""
    names = [str(getattr(item, "name", item)) for item in items]
    return ", ".join(names) if names else "(none)"


def to_int(value: str | int | None) -> int | None:
    """Convert a captured number to int, returning None when it isn't one."""
    if value is None:
        return None
    try:
        return int(str(value).replace(" ", ""))
    except ValueError:
        return None


# Typographic characters normalized before parsing, and the MCDM symbol
# glyphs replaced by the ``#name#`` markers the patterns expect
_TEXT_REPLACEMENTS = {
    "\u2013": "-",
    "\u2014": "-",
    "\u2212": "-",
    "\u2018": "'",
    "\u2019": "'",
    "\u201c": '"',
    "\u201d": '"',
    "\u2026": "...",
    "\u00ad": "-",
    "\u00a0": " ",
    "\u2726": "#diamond#",
    "\u2605": "#star#",
    "\u2738": "#sun#",
    "\u2264": "#lte#",
    "\u25c6": " ",
}

_TEXT_TRANSLATION = str.maketrans(_TEXT_REPLACEMENTS)
_HORIZONTAL_SPACE = re.compile(r"[ \t\f\v]+")


def sanitize_text(text: str | None) -> str:
    """Normalize pasted stat block text.

    Drops carriage returns and trailing whitespace, replaces typographic
    punctuation with ASCII, rewrites stat block symbols as ``#diamond#``,
    ``#star#``, ``#sun#`` and ``#lte#`` markers and collapses runs of
    horizontal whitespace to one space. Line breaks are kept.
    """
    if not text:
        return ""
    text = text.replace("\r", "").rstrip()
    text = text.translate(_TEXT_TRANSLATION)
    return _HORIZONTAL_SPACE.sub(" ", text)
