from __future__ import annotations

from .models import Expression, Factor, NumberLiteral, Parenthesized, Term, Value, VariableReference


def format_value(value: Value) -> str:
    if isinstance(value, NumberLiteral):
        return str(value.value)
    if isinstance(value, VariableReference):
        return value.name
    if isinstance(value, Parenthesized):
        return f"({format_expression(value.expression)})"
    raise TypeError(f"Not a value node: {value!r}")


def format_factor(factor: Factor) -> str:
    out = format_value(factor.base)
    if factor.exponent is not None:
        out += f" ^ {format_value(factor.exponent)}"
    return out


def format_term(term: Term) -> str:
    chunks = [format_factor(term.left)]
    for op, factor in term.right:
        chunks.append(f"{op.symbol} {format_factor(factor)}")
    return " ".join(chunks)


def format_expression(expr: Expression) -> str:
    """Render ``expr`` on one line with single spaces around every operator.

    Parentheses wrap their contents without padding: ``(1 + 2) * 3``.
    """
    chunks = [format_term(expr.left)]
    for op, term in expr.right:
        chunks.append(f"{op.symbol} {format_term(term)}")
    return " ".join(chunks)
