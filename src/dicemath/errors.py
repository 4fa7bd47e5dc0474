from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Position


class DiceMathError(ValueError):
    """Recoverable failure while lexing, parsing or evaluating an expression.

    Messages start with a stable bracketed code, e.g. ``[PARSE_ERROR]``.
    """

    code = "DICEMATH_ERROR"


class LexError(DiceMathError):
    code = "LEX_ERROR"

    def __init__(self, position: Position, text: str) -> None:
        self.position = position
        self.text = text
        super().__init__(
            f"[{self.code}] Unrecognized input {text!r} at line {position.line}, column {position.column}."
        )


class ParseError(DiceMathError):
    code = "PARSE_ERROR"

    def __init__(self, position: Position, expected: str, found: str) -> None:
        self.position = position
        self.expected = expected
        self.found = found
        super().__init__(
            f"[{self.code}] Expected {expected} but found {found} at line {position.line}, column {position.column}."
        )


class EvalErrorKind(str, Enum):
    UNDEFINED_VARIABLE = "UNDEFINED_VARIABLE"
    DIVISION_BY_ZERO = "DIVISION_BY_ZERO"
    INVALID_DICE_SPEC = "INVALID_DICE_SPEC"
    OVERFLOW = "OVERFLOW"
    INVALID_VARIABLE = "INVALID_VARIABLE"


_EVAL_MESSAGES = {
    EvalErrorKind.UNDEFINED_VARIABLE: "No such variable",
    EvalErrorKind.DIVISION_BY_ZERO: "Division by zero",
    EvalErrorKind.INVALID_DICE_SPEC: "Invalid dice roll",
    EvalErrorKind.OVERFLOW: "Result is too large to represent",
    EvalErrorKind.INVALID_VARIABLE: "Not an integer variable",
}


class EvalError(DiceMathError):
    def __init__(self, kind: EvalErrorKind, name: str | None = None, detail: str | None = None) -> None:
        self.kind = kind
        self.name = name
        self.detail = detail

        message = _EVAL_MESSAGES[kind]
        if name is not None:
            message += f" '{name}'"
        if detail:
            message += f": {detail}"
        super().__init__(f"[{kind.value}] {message}.")

    @property
    def code(self) -> str:  # type: ignore[override]
        return self.kind.value
