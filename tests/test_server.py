import pytest

from dicemath import server
from dicemath.randomness import FixedRandomness


def test_roll_dice_reports_rolls(monkeypatch):
    monkeypatch.setattr("dicemath.dice.SystemRandomness", lambda: FixedRandomness(3))
    result = server.roll_dice("2 d 6 + bonus", {"bonus": 1})

    assert result["expression"] == "2 d 6 + bonus"
    assert result["normalized_expression"] == "2 d 6 + bonus"
    assert result["total"] == 7
    assert result["display"] == "2 d 6 + bonus = 7"
    assert result["rolls"] == [{"count": 2, "sides": 6, "rolls": [3, 3], "subtotal": 6}]


def test_roll_dice_applies_configured_limits(monkeypatch):
    monkeypatch.setattr(server.settings, "max_dice", 2)
    with pytest.raises(ValueError) as exc:
        server.roll_dice("3 d 6")
    assert str(exc.value).startswith("[INVALID_DICE_SPEC]")


def test_roll_dice_surfaces_error_codes():
    with pytest.raises(ValueError) as exc:
        server.roll_dice("1 +")
    assert str(exc.value).startswith("[PARSE_ERROR]")
