import pytest

from mcp_dice_notation.errors import DiceError
from mcp_dice_notation.models import (
    AtomicRoll,
    CombinedResult,
    CombinedRoll,
    RollResult,
    average,
    describe,
    dice_count,
    term_count,
)


@pytest.mark.parametrize(
    ("expr", "text"),
    [
        (AtomicRoll(sides=6), "1d6"),
        (AtomicRoll(count=3, sides=8, bonus=-5), "3d8-5"),
        (AtomicRoll(count=2, sides=4, bonus=3), "2d4+3"),
        (CombinedRoll(AtomicRoll(sides=4), AtomicRoll(sides=6)), "1d4 & 1d6"),
    ],
)
def test_describe(expr, text):
    assert describe(expr) == text


@pytest.mark.parametrize(
    ("count", "sides"),
    [(0, 6), (2, 0), (-1, 6), (1, -4)],
)
def test_atomic_roll_rejects_non_positive(count, sides):
    with pytest.raises(DiceError) as exc:
        AtomicRoll(count=count, sides=sides)
    assert str(exc.value).startswith("[INVALID_DIE]")


def test_average():
    assert average(AtomicRoll(count=2, sides=6, bonus=1)) == 8.0
    assert average(CombinedRoll(AtomicRoll(sides=20), AtomicRoll(sides=4, bonus=-1))) == 12.0


def test_roll_result_total():
    result = RollResult(rolls=(3, 5, 1), bonus=-2)
    assert result.total == 7


def test_combined_result_keeps_both_sides():
    left = RollResult(rolls=(6, 2), bonus=5)
    right = RollResult(rolls=(4,), bonus=2)
    combined = CombinedResult(left=left, right=right)

    assert combined.subtotals == (13, 6)
    assert combined.total == 19
    assert combined.rolls == (6, 2, 4)
    assert combined.bonus == 7


def test_walkers_handle_deep_trees():
    expr = AtomicRoll(sides=4)
    for _ in range(4999):
        expr = CombinedRoll(AtomicRoll(sides=4), expr)

    assert describe(expr) == " & ".join(["1d4"] * 5000)
    assert average(expr) == 12500.0
    assert dice_count(expr) == 5000
    assert term_count(expr) == 5000


def test_describe_is_flat_for_either_nesting():
    a, b, c = AtomicRoll(sides=4), AtomicRoll(sides=6), AtomicRoll(sides=8)

    assert describe(CombinedRoll(CombinedRoll(a, b), c)) == "1d4 & 1d6 & 1d8"
    assert describe(CombinedRoll(a, CombinedRoll(b, c))) == "1d4 & 1d6 & 1d8"
