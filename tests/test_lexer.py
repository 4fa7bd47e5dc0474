import pytest

from dicemath.errors import LexError
from dicemath.lexer import significant_tokens, tokenize
from dicemath.models import Position, TokenKind


def test_tokens_cover_the_whole_input():
    text = "3d6 +(x) ; loud, 2"
    tokens = list(tokenize(text))
    assert "".join(t.text for t in tokens) == text


def test_dice_lexes_as_identifier():
    tokens = significant_tokens("1d4")
    assert [(t.kind, t.text) for t in tokens] == [
        (TokenKind.NUMBER, "1"),
        (TokenKind.IDENTIFIER, "d"),
        (TokenKind.NUMBER, "4"),
    ]


def test_comments_and_whitespace_are_elided():
    tokens = significant_tokens("1 +\t2 ;fire damage")
    assert [t.text for t in tokens] == ["1", "+", "2"]


def test_comment_stops_at_comma():
    kinds = [t.kind for t in tokenize(";a,b")]
    assert kinds == [TokenKind.COMMENT, TokenKind.PUNCTUATION, TokenKind.IDENTIFIER]


def test_positions_track_lines_and_columns():
    tokens = significant_tokens("1 +\n  juice")
    assert tokens[0].position == Position(offset=0, line=1, column=1)
    assert tokens[1].position == Position(offset=2, line=1, column=3)
    assert tokens[2].position == Position(offset=6, line=2, column=3)


@pytest.mark.parametrize(("text", "offending", "column"), [("2 € 3", "€", 3), ("café", "é", 4)])
def test_unknown_characters_are_rejected(text, offending, column):
    with pytest.raises(LexError) as exc:
        list(tokenize(text))
    assert exc.value.text == offending
    assert exc.value.position.column == column
    assert str(exc.value).startswith("[LEX_ERROR]")
