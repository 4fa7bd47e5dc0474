from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias


class TokenKind(str, Enum):
    IDENTIFIER = "Identifier"
    NUMBER = "Number"
    PUNCTUATION = "Punctuation"
    COMMENT = "Comment"
    WHITESPACE = "Whitespace"


@dataclass(frozen=True)
class Position:
    offset: int
    line: int = 1
    column: int = 1


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    position: Position


class Operator(str, Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    DICE_ROLL = "d"

    @classmethod
    def from_symbol(cls, symbol: str) -> Operator:
        return cls(symbol)

    @property
    def symbol(self) -> str:
        return self.value


ADDITIVE_OPERATORS: frozenset[Operator] = frozenset({Operator.ADD, Operator.SUBTRACT, Operator.DICE_ROLL})
MULTIPLICATIVE_OPERATORS: frozenset[Operator] = frozenset({Operator.MULTIPLY, Operator.DIVIDE})


@dataclass(frozen=True)
class NumberLiteral:
    value: int


@dataclass(frozen=True)
class VariableReference:
    name: str


@dataclass(frozen=True)
class Parenthesized:
    expression: Expression


Value: TypeAlias = NumberLiteral | VariableReference | Parenthesized


@dataclass(frozen=True)
class Factor:
    """``base [^ exponent]``"""

    base: Value
    exponent: Value | None = None


@dataclass(frozen=True)
class Term:
    """``factor {(* | /) factor}``, folded left to right."""

    left: Factor
    right: tuple[tuple[Operator, Factor], ...] = ()


@dataclass(frozen=True)
class Expression:
    """``term {(+ | - | d) term}``, folded left to right."""

    left: Term
    right: tuple[tuple[Operator, Term], ...] = ()


@dataclass(frozen=True)
class DieRoll:
    count: int
    sides: int
    rolls: tuple[int, ...]
    subtotal: int


@dataclass(frozen=True)
class Evaluation:
    input: str
    expression: Expression
    normalized_expression: str
    total: int
    rolls: tuple[DieRoll, ...] = ()

    @property
    def display(self) -> str:
        return f"{self.normalized_expression} = {self.total}"
