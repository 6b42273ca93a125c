"""
==================
Generator Streams
==================

The bit source underneath every other part of the randomness system.

A simulation consumes randomness for very different reasons. Rolling to hit a
monster changes the outcome of a game, choosing which flavour message to show
does not. If both were served from one sequence, opening a menu would shift
every later gameplay draw and a recorded game could no longer be replayed.
Randomness is therefore split into a small, closed set of
:class:`GeneratorStream` identifiers, each backed by its own
:class:`BitGenerator` with its own state.

Each generator wraps a :class:`numpy.random.PCG64` bit generator seeded through
a :class:`numpy.random.SeedSequence`. The stream's index is used as the spawn
key of the seed sequence, so seeding every stream with the same number still
gives each of them an independent sequence.

"""
from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

import numpy as np
from loguru import logger

from sortition.framework.randomness.exceptions import RandomnessError

_UINT64_MASK = 0xFFFF_FFFF_FFFF_FFFF


def _as_entropy(value: int) -> int:
    # Seed sequences only take non-negative entropy. Negative seeds are read
    # as their 64-bit two's complement.
    value = int(value)
    return value if value >= 0 else value & _UINT64_MASK


class GeneratorStream(Enum):
    """Identifiers for the independent generator streams."""

    GAMEPLAY = 0
    """Randomness that affects the outcome of the simulation."""
    UI = 1
    """Cosmetic randomness that must never perturb the gameplay stream."""
    SYSTEM_SPECIFIC = 2
    """Randomness whose consumption may legitimately differ between platforms."""
    LEVELGEN = 3
    """Randomness used while generating maps."""

    @classmethod
    def from_name(cls, name: str) -> GeneratorStream:
        try:
            return cls[name.upper()]
        except KeyError:
            raise RandomnessError(
                f"Unknown generator stream {name!r}. "
                f"Valid streams are {[s.name.lower() for s in cls]}."
            ) from None


class BitGenerator:
    """The seedable state of a single generator stream.

    A freshly constructed generator is unseeded and refuses to produce values
    until one of the forms of :meth:`seed` has been called.

    """

    def __init__(self, stream: GeneratorStream):
        self.stream = stream
        """The stream this generator serves."""
        self.seed_entropy: int | list[int] | None = None
        """The entropy used for the most recent seeding, for replay."""
        self._bit_generator: np.random.PCG64 | None = None

    @property
    def is_seeded(self) -> bool:
        return self._bit_generator is not None

    def seed(
        self,
        seed: int | Sequence[int] | np.ndarray | None = None,
        count: int | None = None,
    ) -> None:
        """(Re)initializes the state of this generator.

        Parameters
        ----------
        seed
            ``None`` seeds from operating system entropy. An integer seeds
            from that value. A sequence or one dimensional array of integers is
            treated as an explicit state vector.
        count
            The number of leading entries of a state vector to use. ``None``
            uses the whole vector. Ignored for scalar seeds.
        """
        if seed is None:
            entropy = None
        elif isinstance(seed, (Sequence, np.ndarray)):
            values = list(seed) if count is None else list(seed)[:count]
            if not values:
                raise RandomnessError(
                    f"Cannot seed the {self.stream.name} stream from an empty state vector."
                )
            entropy = [_as_entropy(v) for v in values]
        else:
            entropy = _as_entropy(seed)

        seed_sequence = np.random.SeedSequence(entropy, spawn_key=(self.stream.value,))
        self._bit_generator = np.random.PCG64(seed_sequence)
        self.seed_entropy = seed_sequence.entropy
        logger.bind(stream=self.stream.name.lower()).debug(
            f"Seeded with entropy {self.seed_entropy}."
        )

    def next_uint64(self) -> int:
        """Returns the next 64-bit unsigned value of this stream."""
        return int(self._get_bit_generator().random_raw())

    def next_uint32(self) -> int:
        """Returns the next 32-bit unsigned value of this stream."""
        # The high bits of a PCG64 output are its strongest.
        return self.next_uint64() >> 32

    def _get_bit_generator(self) -> np.random.PCG64:
        if self._bit_generator is None:
            raise RandomnessError(
                f"The {self.stream.name} generator stream was used before being seeded."
            )
        return self._bit_generator

    def __repr__(self) -> str:
        return f"BitGenerator(stream={self.stream.name}, seed_entropy={self.seed_entropy!r})"
