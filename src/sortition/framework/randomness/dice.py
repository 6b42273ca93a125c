"""
====
Dice
====

Descriptions of sum-of-uniform-draws distributions.

"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sortition.framework.randomness.exceptions import RandomnessError

if TYPE_CHECKING:
    from sortition.framework.randomness.stream import RandomnessStream

_DICE_NOTATION = re.compile(r"^\s*(\d*)\s*[dD]\s*(\d+)\s*$")


@dataclass(frozen=True)
class Dice:
    """A number of dice, each with the same number of faces.

    ``Dice(3, 6)`` rolls like three six sided dice, giving values in
    [3, 18]. A zero count or zero faces always rolls 0.
    """

    num: int = 0
    size: int = 0

    def __post_init__(self) -> None:
        if self.num < 0 or self.size < 0:
            raise RandomnessError(
                f"Dice must have a non-negative count and size, got {self.num}d{self.size}."
            )

    @classmethod
    def from_string(cls, notation: str) -> Dice:
        """Parses dice notation such as ``3d6`` or ``d20``.

        Raises
        ------
        ValueError
            If the notation is malformed.
        """
        match = _DICE_NOTATION.match(notation)
        if match is None:
            raise ValueError(f"Invalid dice notation {notation!r}. Expected e.g. '3d6'.")
        num, size = match.groups()
        return cls(int(num) if num else 1, int(size))

    @property
    def min_roll(self) -> int:
        return self.num if self.size else 0

    @property
    def max_roll(self) -> int:
        return self.num * self.size

    def roll(self, stream: RandomnessStream) -> int:
        return stream.roll_dice(self.num, self.size)

    def __str__(self) -> str:
        return f"{self.num}d{self.size}"


CONVENIENT_NONZERO_DAMAGE = Dice(42, 1)


def calc_dice(
    num_dice: int, max_damage: int, stream: RandomnessStream | None = None
) -> Dice:
    """Builds dice whose maximum roll is close to max_damage.

    The damage is split evenly among ``num_dice`` dice. The remainder of the
    split is made up by adding a face to every die, either when the remainder
    is at least half the number of dice or, if a stream is provided, with
    probability remainder/num_dice.

    Parameters
    ----------
    num_dice
        The desired number of dice.
    max_damage
        The desired maximum roll.
    stream
        If provided, the remainder is resolved randomly.

    Returns
    -------
        The resulting dice.
    """
    max_damage = max(max_damage, 0)
    if num_dice <= 1:
        return Dice(1, max_damage)
    if max_damage <= num_dice:
        return Dice(max_damage, 1)

    size, remainder = divmod(max_damage, num_dice)
    if stream is not None:
        size += int(stream.x_chance_in_y(remainder, num_dice))
    elif remainder >= num_dice // 2:
        size += 1
    return Dice(num_dice, size)
