import pytest

from dicemath.errors import LexError, ParseError
from dicemath.formatter import format_expression
from dicemath.models import (
    Expression,
    Factor,
    NumberLiteral,
    Operator,
    Parenthesized,
    Term,
    VariableReference,
)
from dicemath.parser import Parser, parse


def _num(n):
    return Term(left=Factor(base=NumberLiteral(n)))


def test_additive_chain_keeps_source_order():
    assert parse("10 - 3 - 2") == Expression(
        left=_num(10),
        right=((Operator.SUBTRACT, _num(3)), (Operator.SUBTRACT, _num(2))),
    )


def test_dice_shares_the_additive_tier():
    expr = parse("2 + 1 d 6")
    assert [op for op, _ in expr.right] == [Operator.ADD, Operator.DICE_ROLL]


def test_multiplication_binds_tighter_than_addition():
    expr = parse("2 + 3 * 4")
    assert expr.left == _num(2)
    assert expr.right == (
        (Operator.ADD, Term(left=Factor(NumberLiteral(3)), right=((Operator.MULTIPLY, Factor(NumberLiteral(4))),))),
    )


def test_exponent_applies_to_its_immediate_base():
    expr = parse("2 * 3 ^ 2")
    assert expr.left.right == ((Operator.MULTIPLY, Factor(NumberLiteral(3), NumberLiteral(2))),)


def test_variables_and_parentheses():
    expr = parse("(juice)")
    inner = Expression(left=Term(left=Factor(VariableReference("juice"))))
    assert expr == Expression(left=Term(left=Factor(Parenthesized(inner))))


def test_lone_d_is_a_variable():
    assert parse("d") == Expression(left=Term(left=Factor(VariableReference("d"))))


def test_deep_nesting_parses():
    depth = 100
    expr = parse("(" * depth + "1" + ")" * depth)
    assert format_expression(expr) == "(" * depth + "1" + ")" * depth


def test_pathological_nesting_is_a_parse_error():
    with pytest.raises(ParseError):
        parse("(" * 100_000 + "1" + ")" * 100_000)


def test_parser_is_reusable():
    parser = Parser()
    assert parser.parse("1 + 2") == parser.parse("1+2")


@pytest.mark.parametrize(
    ("text", "expected", "found"),
    [
        ("", "number, identifier or '('", "end of input"),
        ("1 +", "number, identifier or '('", "end of input"),
        ("(1 + 2", "')'", "end of input"),
        ("1 2", "operator", "'2'"),
        ("juiced4", "operator", "'4'"),
        ("1 ^ 2 ^ 3", "operator", "'^'"),
        ("* 3", "number, identifier or '('", "'*'"),
        ("1.5", "operator", "'.'"),
    ],
)
def test_parse_rejections(text, expected, found):
    with pytest.raises(ParseError) as exc:
        parse(text)
    assert exc.value.expected == expected
    assert exc.value.found == found
    assert str(exc.value).startswith("[PARSE_ERROR]")


def test_parse_error_position_points_at_offending_token():
    with pytest.raises(ParseError) as exc:
        parse("1 + )")
    assert exc.value.position.offset == 4


def test_lex_errors_propagate_from_parse():
    with pytest.raises(LexError):
        parse("1 + ~~€")


def test_overlong_number_is_a_parse_error():
    with pytest.raises(ParseError) as exc:
        parse("1" * 5000)
    assert exc.value.found == "5000 digits"
    assert exc.value.position.offset == 0
