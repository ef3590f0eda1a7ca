"""
Filter expression tree.

A parsed filter is an immutable tree of four node kinds: ``OrFilter``,
``AndFilter``, ``NotFilter`` and the ``WordFilter`` leaf. Trees can be shared
freely between threads once built.

Example:
    from termfilter.filters import F

    # Build a filter directly instead of parsing one
    expr = (F.word("blue") | F.word("green")) & ~F.word("red")
    expr.matches("green and blue skies")   # True
    str(expr)                              # '((blue or green) and (not red))'
    expr.terms()                           # ['blue', 'green', 'red']
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar, TypeVar, Union

from .exceptions import ItemError
from .policies import MatchPolicy

T = TypeVar("T")


def _item_text(item: Any) -> str:
    """
    Get the searchable text of an item.

    Accepts, in order:
    1. A plain string
    2. A mapping with a "text" key
    3. Any object with a string ``text`` attribute (e.g. ``Post``)
    """
    if isinstance(item, str):
        return item
    if isinstance(item, Mapping):
        text = item.get("text")
    else:
        text = getattr(item, "text", None)
    if text is None:
        raise ItemError(f"Item of type {type(item).__name__} has no text to match against")
    return str(text)


class FilterExpression(ABC):
    """Base class for filter expressions."""

    @abstractmethod
    def to_string(self) -> str:
        """Render the expression in fully parenthesized infix form."""
        ...

    @abstractmethod
    def matches(self, item: Any) -> bool:
        """Evaluate the filter against a single item."""
        ...

    @abstractmethod
    def terms(self) -> list[str]:
        """
        Every leaf word in the subtree.

        Words appear in left-to-right order, repeated as often as they occur.
        """
        ...

    def _children(self) -> tuple[FilterExpression, ...]:
        return ()

    def _label(self) -> tuple[Any, ...]:
        return (type(self),)

    def _signature(self) -> tuple[Any, ...]:
        """Node labels in pre-order; two trees are equal iff their signatures are."""
        labels: list[Any] = []
        stack: list[FilterExpression] = [self]
        while stack:
            node = stack.pop()
            labels.append(node._label())
            stack.extend(reversed(node._children()))
        return tuple(labels)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FilterExpression):
            return NotImplemented
        return self._signature() == other._signature()

    def __hash__(self) -> int:
        return hash(self._signature())

    def __and__(self, other: FilterExpression) -> FilterExpression:
        """Combine two expressions with `and`."""
        return AndFilter(self, other)

    def __or__(self, other: FilterExpression) -> FilterExpression:
        """Combine two expressions with `or`."""
        return OrFilter(self, other)

    def __invert__(self) -> FilterExpression:
        """Negate the expression with `not`."""
        return NotFilter(self)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_string()!r})"


@dataclass(frozen=True, eq=False, repr=False)
class WordFilter(FilterExpression):
    """Leaf that matches items containing a single term."""

    term: str
    policy: MatchPolicy = MatchPolicy.SUBSTRING

    def _label(self) -> tuple[Any, ...]:
        return (WordFilter, self.term, self.policy)

    def to_string(self) -> str:
        return self.term

    def matches(self, item: Any) -> bool:
        """Items with their own ``contains`` method decide for themselves."""
        contains = getattr(item, "contains", None)
        if callable(contains) and not isinstance(item, str):
            return bool(contains(self.term))
        return self.policy.contains(_item_text(item), self.term)

    def terms(self) -> list[str]:
        return [self.term]


@dataclass(frozen=True, eq=False, repr=False)
class NotFilter(FilterExpression):
    """`not` negation of an expression."""

    child: FilterExpression

    def _children(self) -> tuple[FilterExpression, ...]:
        return (self.child,)

    def to_string(self) -> str:
        return f"(not {self.child.to_string()})"

    def matches(self, item: Any) -> bool:
        return not self.child.matches(item)

    def terms(self) -> list[str]:
        return self.child.terms()


@dataclass(frozen=True, eq=False, repr=False)
class _BinaryFilter(FilterExpression):
    left: FilterExpression
    right: FilterExpression

    keyword: ClassVar[str]

    def _children(self) -> tuple[FilterExpression, ...]:
        return (self.left, self.right)

    def _operands(self) -> list[FilterExpression]:
        """
        Operands of the left-folded chain of this operator, left to right.

        ``a or b or c`` parses as ``((a or b) or c)``, so a long keyword list is
        a tree as deep as the list is long; it is walked here with a loop.
        """
        operands: list[FilterExpression] = []
        node: FilterExpression = self
        while isinstance(node, _BinaryFilter) and node.keyword == self.keyword:
            operands.append(node.right)
            node = node.left
        operands.append(node)
        operands.reverse()
        return operands

    def to_string(self) -> str:
        operands = self._operands()
        parts = ["(" * (len(operands) - 1), operands[0].to_string()]
        for operand in operands[1:]:
            parts.append(f" {self.keyword} {operand.to_string()})")
        return "".join(parts)

    def terms(self) -> list[str]:
        result: list[str] = []
        for operand in self._operands():
            result.extend(operand.terms())
        return result


@dataclass(frozen=True, eq=False, repr=False)
class AndFilter(_BinaryFilter):
    """`and` combination of two expressions."""

    keyword = "and"

    def matches(self, item: Any) -> bool:
        """Both sides must match."""
        return all(operand.matches(item) for operand in self._operands())


@dataclass(frozen=True, eq=False, repr=False)
class OrFilter(_BinaryFilter):
    """`or` combination of two expressions."""

    keyword = "or"

    def matches(self, item: Any) -> bool:
        """Either side must match."""
        return any(operand.matches(item) for operand in self._operands())


# The node kinds are fixed; nothing outside this module adds to them.
FilterNode = Union[OrFilter, AndFilter, NotFilter, WordFilter]


def filter_items(expr: FilterExpression, items: Iterable[T]) -> Iterator[T]:
    """Yield the items matched by `expr`, in input order."""
    for item in items:
        if expr.matches(item):
            yield item


class Filter:
    """
    Factory for building filter expressions without parsing.

    Example:
        Filter.or_(Filter.word("blue"), Filter.word("green"))

        # Same tree as parse("blue and not red")
        Filter.word("blue") & ~Filter.word("red")
    """

    @staticmethod
    def word(term: str, policy: MatchPolicy = MatchPolicy.SUBSTRING) -> WordFilter:
        """Leaf filter for a single term."""
        if not term or any(ch.isspace() for ch in term):
            raise ValueError(f"Invalid term {term!r}: terms must be non-empty and unspaced")
        return WordFilter(term, policy)

    @staticmethod
    def and_(*expressions: FilterExpression) -> FilterExpression:
        """Combine multiple expressions with `and`, folding left."""
        if not expressions:
            raise ValueError("and_() requires at least one expression")
        result = expressions[0]
        for expr in expressions[1:]:
            result = result & expr
        return result

    @staticmethod
    def or_(*expressions: FilterExpression) -> FilterExpression:
        """Combine multiple expressions with `or`, folding left."""
        if not expressions:
            raise ValueError("or_() requires at least one expression")
        result = expressions[0]
        for expr in expressions[1:]:
            result = result | expr
        return result


# Shorthand alias for convenience
F = Filter
