"""
Recursive descent (LL(1)) parser for filter strings.

Grammar (EBNF):

    goal    ::= expr EOF
    expr    ::= orexpr
    orexpr  ::= andexpr ( "or" andexpr )*
    andexpr ::= notexpr ( "and" notexpr )*
    notexpr ::= "not" notexpr | prim
    prim    ::= "(" expr ")" | word

Precedence comes from the layering of the rules, tightest first: parentheses,
``not``, ``and``, ``or``. So

    blue or green and not red or yellow and purple

parses as

    ((blue or (green and (not red))) or (yellow and purple))

``and`` and ``or`` fold to the left; stacked ``not`` nests to the right.
The reserved words are case-sensitive and can never be used as terms.
"""

from __future__ import annotations

import logging

from .exceptions import FilterSyntaxError
from .filters import AndFilter, FilterExpression, NotFilter, OrFilter, WordFilter
from .policies import MatchPolicy
from .scanner import LPAREN, RPAREN, Scanner

logger = logging.getLogger(__name__)

OR = "or"
AND = "and"
NOT = "not"

# Tokens that can never start a term
_NOT_A_TERM = frozenset([RPAREN, OR, AND])


class Parser:
    """Parse one filter string into a FilterExpression tree."""

    def __init__(self, text: str, *, match: MatchPolicy = MatchPolicy.SUBSTRING):
        self.text = text
        self.match = match
        self._scanner = Scanner(text)

    def parse(self) -> FilterExpression:
        """Parse the whole input; tokens left over after the expression are an error."""
        expr = self._expr()
        token = self._scanner.current_token()
        if token is not None:
            raise FilterSyntaxError(
                f"Extra stuff at end of input at position {self._scanner.position}: {token!r}",
                position=self._scanner.position,
            )
        return expr

    def _expr(self) -> FilterExpression:
        return self._or_expr()

    def _or_expr(self) -> FilterExpression:
        """Parse OR expressions (lowest precedence)."""
        left = self._and_expr()
        token = self._scanner.current_token()
        while token == OR:
            self._scanner.advance_and_current_token()
            right = self._and_expr()
            left = OrFilter(left, right)
            token = self._scanner.current_token()
        return left

    def _and_expr(self) -> FilterExpression:
        """Parse AND expressions (medium precedence)."""
        left = self._not_expr()
        token = self._scanner.current_token()
        while token == AND:
            self._scanner.advance_and_current_token()
            right = self._not_expr()
            left = AndFilter(left, right)
            token = self._scanner.current_token()
        return left

    def _not_expr(self) -> FilterExpression:
        """Parse NOT expressions (high precedence)."""
        if self._scanner.current_token() == NOT:
            self._scanner.advance_and_current_token()
            return NotFilter(self._not_expr())  # NOT is right-associative
        return self._prim()

    def _prim(self) -> FilterExpression:
        """Parse a word or a parenthesized expression."""
        token = self._scanner.current_token()
        if token is None:
            raise FilterSyntaxError("Unexpected end of input", position=self._scanner.position)

        if token == LPAREN:
            self._scanner.advance_and_current_token()
            expr = self._expr()
            if self._scanner.current_token() != RPAREN:
                raise FilterSyntaxError(
                    f"Expected ')' at position {self._scanner.position}",
                    position=self._scanner.position,
                )
            self._scanner.advance_and_current_token()
            return expr

        if token in _NOT_A_TERM:
            raise FilterSyntaxError(
                f"Expected a term at position {self._scanner.position}, got {token!r}",
                position=self._scanner.position,
            )

        self._scanner.advance_and_current_token()
        return WordFilter(token, self.match)


def parse(text: str, *, match: MatchPolicy = MatchPolicy.SUBSTRING) -> FilterExpression:
    """
    Parse a filter string into a FilterExpression tree.

    Args:
        text: The filter string, e.g. ``"blue or green and not red"``
        match: How leaf terms are matched against item text

    Returns:
        The root of the filter tree

    Raises:
        FilterSyntaxError: If the filter string is invalid

    A `)`, `and` or `or` where a term is expected is a missing operand and
    raises FilterSyntaxError; it is never taken as a search word. There is no
    quoting, so the reserved words cannot be searched for.

    Examples:
        >>> expr = parse("blue or green and not red")
        >>> str(expr)
        '(blue or (green and (not red)))'
        >>> expr.matches("I love blue skies")
        True
        >>> expr.matches("green and red mix")
        False
    """
    try:
        expr = Parser(text, match=match).parse()
    except FilterSyntaxError as exc:
        logger.debug("Rejected filter %r: %s", text, exc)
        raise
    logger.debug("Parsed filter %r as %s", text, expr)
    return expr
