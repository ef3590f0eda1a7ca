"""
termfilter: boolean keyword filters for streams of text posts.

Example:
    from termfilter import parse

    expr = parse("blue or green and not red")
    expr.matches("I love blue skies")  # True
"""

from __future__ import annotations

from .exceptions import FilterError, FilterSyntaxError, ItemError
from .filters import (
    AndFilter,
    F,
    Filter,
    FilterExpression,
    FilterNode,
    NotFilter,
    OrFilter,
    WordFilter,
    filter_items,
)
from .models import Post, load_posts
from .parser import Parser, parse
from .policies import MatchPolicy
from .scanner import Scanner

__version__ = "0.1.0"

__all__ = [
    "AndFilter",
    "F",
    "Filter",
    "FilterError",
    "FilterExpression",
    "FilterNode",
    "FilterSyntaxError",
    "ItemError",
    "MatchPolicy",
    "NotFilter",
    "OrFilter",
    "Parser",
    "Post",
    "Scanner",
    "WordFilter",
    "__version__",
    "filter_items",
    "load_posts",
    "parse",
]
