"""Shared text preprocessing for the document processor.

Every document goes through the same pipeline so that a word spelled
``Dog``, ``dog,`` or ``"DOG"`` lands on a single term.
"""

from __future__ import annotations

import regex

# Unicode properties, not str.isalpha()/str.split(): Alphabetic also covers
# combining vowel signs and letter numbers, and White_Space excludes the
# U+001C..U+001F separators.
_NON_ALPHABETIC = regex.compile(r"\P{Alphabetic}+")
_WHITESPACE = regex.compile(r"\p{White_Space}+")


def normalize(token: str) -> str:
    """Keep alphabetic characters only → lowercase each one.

    Lowercasing is per character (``str.lower``), not ``casefold``, so
    ``ß`` stays ``ß``.  A token with no letters normalizes to ``""``.
    """
    return "".join(ch.lower() for ch in _NON_ALPHABETIC.sub("", token))


def tokenize(line: str) -> list[str]:
    """Split on runs of whitespace.  Blank lines produce no tokens."""
    return [tok for tok in _WHITESPACE.split(line) if tok]


def terms(line: str) -> list[str]:
    """Tokenize → normalize → drop empty terms."""
    return [t for t in (normalize(tok) for tok in tokenize(line)) if t]
