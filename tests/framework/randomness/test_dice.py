from __future__ import annotations

import pytest

from sortition.framework.randomness import (
    CONVENIENT_NONZERO_DAMAGE,
    Dice,
    RandomnessError,
    RandomnessStream,
    calc_dice,
)


@pytest.mark.parametrize(
    "notation, expected",
    [("3d6", Dice(3, 6)), ("d20", Dice(1, 20)), (" 2 D 4 ", Dice(2, 4)), ("0d6", Dice(0, 6))],
)
def test_from_string(notation: str, expected: Dice) -> None:
    assert Dice.from_string(notation) == expected


@pytest.mark.parametrize("notation", ["", "3", "3d", "d", "3x6", "-1d6", "3d6+1"])
def test_from_string_invalid(notation: str) -> None:
    with pytest.raises(ValueError, match="Invalid dice notation"):
        Dice.from_string(notation)


def test_negative_dice_raise() -> None:
    with pytest.raises(RandomnessError):
        Dice(-1, 6)
    with pytest.raises(RandomnessError):
        Dice(3, -6)


@pytest.mark.parametrize(
    "dice, min_roll, max_roll",
    [(Dice(3, 6), 3, 18), (Dice(1, 1), 1, 1), (Dice(0, 6), 0, 0), (Dice(4, 0), 0, 0), (Dice(), 0, 0)],
)
def test_roll_bounds(
    randomness_stream: RandomnessStream, dice: Dice, min_roll: int, max_roll: int
) -> None:
    assert dice.min_roll == min_roll
    assert dice.max_roll == max_roll
    rolls = {dice.roll(randomness_stream) for _ in range(2000)}
    assert min(rolls) == min_roll
    assert max(rolls) == max_roll


def test_str() -> None:
    assert str(Dice(3, 6)) == "3d6"
    assert Dice.from_string(str(CONVENIENT_NONZERO_DAMAGE)) == CONVENIENT_NONZERO_DAMAGE


@pytest.mark.parametrize(
    "num_dice, max_damage, expected",
    [
        (1, 10, Dice(1, 10)),
        (0, 10, Dice(1, 10)),
        (5, 3, Dice(3, 1)),
        (3, 9, Dice(3, 3)),
        (4, 10, Dice(4, 3)),
        (4, 9, Dice(4, 2)),
        (3, -5, Dice(0, 1)),
    ],
)
def test_calc_dice(num_dice: int, max_damage: int, expected: Dice) -> None:
    assert calc_dice(num_dice, max_damage) == expected


def test_calc_dice_random_remainder(randomness_stream: RandomnessStream) -> None:
    results = {calc_dice(4, 10, randomness_stream) for _ in range(200)}
    assert results == {Dice(4, 2), Dice(4, 3)}
    assert all(calc_dice(3, 9, randomness_stream) == Dice(3, 3) for _ in range(50))
