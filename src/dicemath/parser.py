"""Recursive-descent parser for dice arithmetic.

Grammar (lowest precedence first)::

    expression = term, { ("+" | "-" | "d"), term } ;
    term       = factor, { ("*" | "/"), factor } ;
    factor     = value, [ "^", value ] ;
    value      = number | identifier | "(", expression, ")" ;

``d`` sits with ``+`` and ``-``, so ``2 + 1 d 6`` rolls three six-sided dice.
"""

from __future__ import annotations

import logging

from .errors import ParseError
from .lexer import significant_tokens
from .models import (
    ADDITIVE_OPERATORS,
    MULTIPLICATIVE_OPERATORS,
    Expression,
    Factor,
    NumberLiteral,
    Operator,
    Parenthesized,
    Position,
    Term,
    Token,
    TokenKind,
    Value,
    VariableReference,
)

log = logging.getLogger(__name__)

_VALUE_START = "number, identifier or '('"

# Keeps literals well inside the interpreter's int <-> str conversion limit.
MAX_DIGITS = 3000


class _TokenStream:
    """Cursor over one input's tokens. Created per parse, never shared."""

    def __init__(self, tokens: list[Token], end: Position) -> None:
        self._tokens = tokens
        self._index = 0
        self._end = end

    def peek(self) -> Token | None:
        if self._index < len(self._tokens):
            return self._tokens[self._index]
        return None

    def next(self) -> Token:
        token = self._tokens[self._index]
        self._index += 1
        return token

    def fail(self, expected: str) -> ParseError:
        token = self.peek()
        if token is None:
            return ParseError(self._end, expected, "end of input")
        return ParseError(token.position, expected, repr(token.text))


def _operator_at(token: Token | None, allowed: frozenset[Operator]) -> Operator | None:
    if token is None or token.kind not in (TokenKind.PUNCTUATION, TokenKind.IDENTIFIER):
        return None
    try:
        op = Operator.from_symbol(token.text)
    except ValueError:
        return None
    return op if op in allowed else None


class Parser:
    """Immutable grammar; safe to share across threads."""

    def parse(self, text: str) -> Expression:
        """Parse ``text`` into an :class:`Expression`.

        Raises:
            LexError: If ``text`` holds a character no token rule accepts.
            ParseError: If the tokens do not form an expression.
        """
        tokens = significant_tokens(text)
        stream = _TokenStream(tokens, _end_position(text))

        try:
            expr = self._expression(stream)
        except RecursionError:
            raise ParseError(_end_position(text), "shallower nesting", "too many nested parentheses") from None

        if stream.peek() is not None:
            raise stream.fail("operator")

        log.debug("parsed %r into %r", text, expr)
        return expr

    def _expression(self, stream: _TokenStream) -> Expression:
        left = self._term(stream)
        right: list[tuple[Operator, Term]] = []
        while (op := _operator_at(stream.peek(), ADDITIVE_OPERATORS)) is not None:
            stream.next()
            right.append((op, self._term(stream)))
        return Expression(left=left, right=tuple(right))

    def _term(self, stream: _TokenStream) -> Term:
        left = self._factor(stream)
        right: list[tuple[Operator, Factor]] = []
        while (op := _operator_at(stream.peek(), MULTIPLICATIVE_OPERATORS)) is not None:
            stream.next()
            right.append((op, self._factor(stream)))
        return Term(left=left, right=tuple(right))

    def _factor(self, stream: _TokenStream) -> Factor:
        base = self._value(stream)
        token = stream.peek()
        if token is not None and token.text == "^":
            stream.next()
            return Factor(base=base, exponent=self._value(stream))
        return Factor(base=base)

    def _value(self, stream: _TokenStream) -> Value:
        token = stream.peek()
        if token is None:
            raise stream.fail(_VALUE_START)

        if token.kind is TokenKind.NUMBER:
            if len(token.text) > MAX_DIGITS:
                raise ParseError(token.position, f"a number of at most {MAX_DIGITS} digits", f"{len(token.text)} digits")
            stream.next()
            return NumberLiteral(int(token.text))

        if token.kind is TokenKind.IDENTIFIER:
            stream.next()
            return VariableReference(token.text)

        if token.text == "(":
            stream.next()
            inner = self._expression(stream)
            closing = stream.peek()
            if closing is None or closing.text != ")":
                raise stream.fail("')'")
            stream.next()
            return Parenthesized(inner)

        raise stream.fail(_VALUE_START)


def _end_position(text: str) -> Position:
    line = text.count("\n") + 1
    column = len(text) - text.rfind("\n")
    return Position(offset=len(text), line=line, column=column)


_PARSER = Parser()


def parse(text: str) -> Expression:
    return _PARSER.parse(text)
