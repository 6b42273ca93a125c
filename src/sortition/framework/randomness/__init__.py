"""
===============================
Random Numbers in ``sortition``
===============================

This package contains the classes and functions supporting reproducible
randomness for turn-based simulations.

A simulation needs to replay exactly. Given the same seed and the same
sequence of player actions, every gameplay decision must come out the same,
no matter how much randomness was spent on cosmetic effects in the meantime.
Randomness is therefore drawn from a small set of independent, separately
seeded :class:`GeneratorStream` sequences owned by a
:class:`RandomnessManager` that is passed to whatever needs it, rather than
from a process-wide generator.

On top of each stream sit the scalar distributions of
:class:`RandomnessStream`, weighted selection, dice and the
:class:`DeferredRandom` tree of persistent random fractions.

"""
from sortition.framework.randomness.choice import (
    NO_SELECTION,
    choose_random_weighted,
    choose_weighted,
    choose_weighted_args,
    choose_weighted_index,
    choose_weighted_iter,
)
from sortition.framework.randomness.deferred import DeferredRandom
from sortition.framework.randomness.dice import CONVENIENT_NONZERO_DAMAGE, Dice, calc_dice
from sortition.framework.randomness.exceptions import RandomnessError
from sortition.framework.randomness.generators import BitGenerator, GeneratorStream
from sortition.framework.randomness.manager import RandomnessInterface, RandomnessManager
from sortition.framework.randomness.stream import RandomnessStream, div_round_up
