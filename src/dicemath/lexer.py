from __future__ import annotations

import re
from collections.abc import Iterator

from .errors import LexError
from .models import Position, Token, TokenKind


# fmt: off
_TOKEN_SPEC = [
    (TokenKind.COMMENT,     r";[^,]*"),                             # `;` up to the next comma
    (TokenKind.IDENTIFIER,  r"[a-zA-Z]+"),
    (TokenKind.NUMBER,      r"\d+"),
    (TokenKind.PUNCTUATION, r"[-\[\]!@#$%^&*()+_={}\\|:;\"'<,>.?/]"),
    (TokenKind.WHITESPACE,  r"[ \t\n\r]+"),
]
# fmt: on

_TOKEN_RE = re.compile(
    "|".join(f"(?P<{kind.name}>{pattern})" for kind, pattern in _TOKEN_SPEC),
    re.ASCII,
)

_ELIDED = {TokenKind.COMMENT, TokenKind.WHITESPACE}


def _advance(position: Position, text: str) -> Position:
    newlines = text.count("\n")
    if newlines:
        column = len(text) - text.rindex("\n")
    else:
        column = position.column + len(text)
    return Position(offset=position.offset + len(text), line=position.line + newlines, column=column)


def tokenize(text: str) -> Iterator[Token]:
    """Split ``text`` into tokens covering the whole input, comments and whitespace included.

    Raises:
        LexError: At the first character no token rule accepts.
    """
    position = Position(offset=0)
    while position.offset < len(text):
        m = _TOKEN_RE.match(text, position.offset)
        if m is None:
            raise LexError(position, text[position.offset])

        kind = TokenKind[m.lastgroup]
        value = m.group()
        yield Token(kind=kind, text=value, position=position)
        position = _advance(position, value)


def significant_tokens(text: str) -> list[Token]:
    """Tokens the parser cares about: everything except comments and whitespace."""
    return [t for t in tokenize(text) if t.kind not in _ELIDED]
