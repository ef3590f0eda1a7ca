"""
Tokenizer for filter strings.

Tokens are plain strings classified by value at the point of use: the
parentheses, the reserved words ``and``/``or``/``not`` and any other run of
non-whitespace characters (a word). Parentheses always stand alone, so
``(red)`` scans as ``(``, ``red``, ``)``.
"""

from __future__ import annotations

LPAREN = "("
RPAREN = ")"
_PARENS = (LPAREN, RPAREN)


class Scanner:
    """Lazy single-token-lookahead scanner over a filter string."""

    def __init__(self, text: str):
        self._text = text
        self._length = len(text)
        self._start = 0
        self._token: str | None = None
        self._scan(0)

    def _scan(self, pos: int) -> None:
        """Position the lookahead on the first token at or after `pos`."""
        while pos < self._length and self._text[pos].isspace():
            pos += 1
        self._start = pos
        if pos >= self._length:
            self._token = None
            return
        if self._text[pos] in _PARENS:
            self._token = self._text[pos]
            return
        end = pos
        while end < self._length:
            ch = self._text[end]
            if ch.isspace() or ch in _PARENS:
                break
            end += 1
        self._token = self._text[pos:end]

    @property
    def position(self) -> int:
        """Offset of the current token, or the input length at end of input."""
        return self._start

    def current_token(self) -> str | None:
        """Return the current token without consuming it (None at end of input)."""
        return self._token

    def advance_and_current_token(self) -> str | None:
        """Consume the current token and return the one after it."""
        if self._token is not None:
            self._scan(self._start + len(self._token))
        return self._token
