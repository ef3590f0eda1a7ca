"""
Exceptions raised by termfilter.

All errors derive from FilterError so callers can catch everything the
package raises with a single except clause.
"""

from __future__ import annotations


class FilterError(Exception):
    """Base class for termfilter errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class FilterSyntaxError(FilterError, ValueError):
    """
    A filter string could not be parsed.

    Parsing is all-or-nothing: the first error aborts the parse and no
    partial filter is returned.
    """

    def __init__(self, message: str, *, position: int | None = None) -> None:
        super().__init__(message)
        self.position = position


class ItemError(FilterError, TypeError):
    """An item offers nothing a word filter can search."""
