"""
Matching policies for word filters.

A policy is chosen once per parse and then fixed on every leaf of the tree.
"""

from __future__ import annotations

import re
from enum import Enum

_WORD_SPLIT = re.compile(r"[^\w#@']+")


class MatchPolicy(Enum):
    """How a term is looked for in an item's text."""

    SUBSTRING = "substring"
    WORD = "word"

    def contains(self, text: str, term: str) -> bool:
        """Return True if `term` occurs in `text` under this policy."""
        if self is MatchPolicy.SUBSTRING:
            return term.lower() in text.lower()
        # Terms split like text: `red!` looks for `red`, `e-mail` for `e` then `mail`
        needle = _words(term)
        if not needle:
            return False
        haystack = _words(text)
        width = len(needle)
        return any(haystack[i : i + width] == needle for i in range(len(haystack) - width + 1))


def _words(text: str) -> list[str]:
    # Hashtags and mentions count as the bare word
    words = (w.strip("'").lstrip("#@") for w in _WORD_SPLIT.split(text.lower()))
    return [w for w in words if w]
