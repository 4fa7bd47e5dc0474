from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .errors import EvalError, EvalErrorKind
from .formatter import format_expression
from .models import (
    DieRoll,
    Evaluation,
    Expression,
    Factor,
    NumberLiteral,
    Operator,
    Parenthesized,
    Term,
    Value,
    VariableReference,
)
from .parser import parse
from .randomness import RandomnessSource, SystemRandomness

log = logging.getLogger(__name__)


# Results wider than this could not be printed (int -> str digit limit).
MAX_RESULT_BITS = 9_900


def _checked(value: int) -> int:
    if abs(value).bit_length() > MAX_RESULT_BITS:
        raise EvalError(EvalErrorKind.OVERFLOW, detail=f"more than {MAX_RESULT_BITS} bits")
    return value


def _integer_variable(name: str, value: object) -> int:
    if isinstance(value, bool):
        raise EvalError(EvalErrorKind.INVALID_VARIABLE, name=name, detail=f"got {value!r}")
    if isinstance(value, int):
        return _checked(value)
    if isinstance(value, float) and value.is_integer():
        return _checked(int(value))
    raise EvalError(EvalErrorKind.INVALID_VARIABLE, name=name, detail=f"got {value!r}")


def _freeze(variables: Mapping[str, int] | None) -> Mapping[str, int]:
    """Read-only copy of ``variables``; integral floats become ints.

    Raises:
        EvalError: If a value is not an integer.
    """
    return MappingProxyType({name: _integer_variable(name, value) for name, value in (variables or {}).items()})


@dataclass(frozen=True)
class EvaluatorConfig:
    """Everything an evaluation consults besides the tree itself.

    ``max_dice`` and ``max_sides`` cap a single ``d`` operation; ``None`` means
    no cap beyond the usual ``count >= 0`` and ``sides >= 1``.
    """

    randomness: RandomnessSource = field(default_factory=SystemRandomness)
    variables: Mapping[str, int] = field(default_factory=dict)
    max_dice: int | None = None
    max_sides: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "variables", _freeze(self.variables))


def _truncating_div(left: int, right: int) -> int:
    quotient = abs(left) // abs(right)
    return -quotient if (left < 0) != (right < 0) else quotient


def _power(base: int, exponent: int) -> int:
    try:
        result = math.pow(base, exponent)
    except (OverflowError, ValueError):
        raise EvalError(EvalErrorKind.OVERFLOW, detail=f"{base} ^ {exponent}") from None
    if not math.isfinite(result):
        raise EvalError(EvalErrorKind.OVERFLOW, detail=f"{base} ^ {exponent}")
    return _checked(int(result))


class Evaluator:
    """Walks an :class:`Expression` bottom-up and folds it into an integer.

    The evaluator reads its variables and draws from its randomness source, and
    never writes to either; one instance may evaluate many trees.
    """

    def __init__(self, config: EvaluatorConfig | None = None) -> None:
        self.config = config or EvaluatorConfig()

    def evaluate(self, expr: Expression) -> int:
        total, _rolls = self.evaluate_with_rolls(expr)
        return total

    def evaluate_with_rolls(self, expr: Expression) -> tuple[int, tuple[DieRoll, ...]]:
        """Evaluate ``expr`` and also return every dice roll made, in order.

        Raises:
            EvalError: For undefined variables, division by zero, invalid dice
                or a result too large to represent.
        """
        rolls: list[DieRoll] = []
        total = self._expression(expr, rolls)
        return total, tuple(rolls)

    def _value(self, value: Value, rolls: list[DieRoll]) -> int:
        if isinstance(value, NumberLiteral):
            return value.value
        if isinstance(value, VariableReference):
            try:
                return self.config.variables[value.name]
            except KeyError:
                raise EvalError(EvalErrorKind.UNDEFINED_VARIABLE, name=value.name) from None
        if isinstance(value, Parenthesized):
            return self._expression(value.expression, rolls)
        raise TypeError(f"Not a value node: {value!r}")

    def _factor(self, factor: Factor, rolls: list[DieRoll]) -> int:
        base = self._value(factor.base, rolls)
        if factor.exponent is None:
            return base
        return _power(base, self._value(factor.exponent, rolls))

    def _term(self, term: Term, rolls: list[DieRoll]) -> int:
        acc = self._factor(term.left, rolls)
        for op, factor in term.right:
            acc = self._apply(op, acc, self._factor(factor, rolls), rolls)
        return acc

    def _expression(self, expr: Expression, rolls: list[DieRoll]) -> int:
        acc = self._term(expr.left, rolls)
        for op, term in expr.right:
            acc = self._apply(op, acc, self._term(term, rolls), rolls)
        return acc

    def _apply(self, op: Operator, left: int, right: int, rolls: list[DieRoll]) -> int:
        return _checked(self._combine(op, left, right, rolls))

    def _combine(self, op: Operator, left: int, right: int, rolls: list[DieRoll]) -> int:
        if op is Operator.ADD:
            return left + right
        if op is Operator.SUBTRACT:
            return left - right
        if op is Operator.MULTIPLY:
            return left * right
        if op is Operator.DIVIDE:
            if right == 0:
                raise EvalError(EvalErrorKind.DIVISION_BY_ZERO, detail=f"{left} / {right}")
            return _truncating_div(left, right)
        if op is Operator.DICE_ROLL:
            roll = self._roll(left, right)
            rolls.append(roll)
            return roll.subtotal
        raise ValueError(f"Unsupported operator: {op!r}")

    def _roll(self, count: int, sides: int) -> DieRoll:
        cfg = self.config
        if count < 0:
            raise EvalError(EvalErrorKind.INVALID_DICE_SPEC, detail=f"dice count must not be negative, got {count}")
        if sides < 1:
            raise EvalError(EvalErrorKind.INVALID_DICE_SPEC, detail=f"dice need at least one side, got {sides}")
        if cfg.max_dice is not None and count > cfg.max_dice:
            raise EvalError(EvalErrorKind.INVALID_DICE_SPEC, detail=f"too many dice: {count} (max {cfg.max_dice})")
        if cfg.max_sides is not None and sides > cfg.max_sides:
            raise EvalError(EvalErrorKind.INVALID_DICE_SPEC, detail=f"too many sides: {sides} (max {cfg.max_sides})")

        log.debug("Rolling %dd%d", count, sides)
        results = []
        for _ in range(count):
            result = cfg.randomness(1, sides)
            log.debug("  d%d: %d", sides, result)
            results.append(result)

        return DieRoll(count=count, sides=sides, rolls=tuple(results), subtotal=sum(results))


def evaluate_text(
    text: str,
    variables: Mapping[str, int] | None = None,
    randomness: RandomnessSource | None = None,
    *,
    max_dice: int | None = None,
    max_sides: int | None = None,
) -> Evaluation:
    """Parse, format, then evaluate ``text``.

    Raises:
        DiceMathError: Any lex, parse or evaluation failure.
    """
    expr = parse(text)
    config = EvaluatorConfig(
        randomness=randomness if randomness is not None else SystemRandomness(),
        variables=variables if variables is not None else {},
        max_dice=max_dice,
        max_sides=max_sides,
    )
    total, rolls = Evaluator(config).evaluate_with_rolls(expr)

    return Evaluation(
        input=text,
        expression=expr,
        normalized_expression=format_expression(expr),
        total=total,
        rolls=rolls,
    )


def roll(
    text: str,
    variables: Mapping[str, int] | None = None,
    randomness: RandomnessSource | None = None,
    *,
    max_dice: int | None = None,
    max_sides: int | None = None,
) -> str:
    """Evaluate ``text`` and render it as ``"<expression> = <result>"``."""
    return evaluate_text(text, variables, randomness, max_dice=max_dice, max_sides=max_sides).display
