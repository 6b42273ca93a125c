"""
=========================
Randomness System Manager
=========================

"""
from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np
from loguru import logger

from sortition.framework.randomness.deferred import DeferredRandom
from sortition.framework.randomness.exceptions import RandomnessError
from sortition.framework.randomness.generators import BitGenerator, GeneratorStream
from sortition.framework.randomness.stream import RandomnessStream
from sortition.manager import Interface, Manager

if TYPE_CHECKING:
    from layered_config_tree import LayeredConfigTree

Seed = int | Sequence[int] | np.ndarray | None


class RandomnessManager(Manager):
    """Registry of the generator streams of one simulation.

    The manager owns one :class:`BitGenerator` per :class:`GeneratorStream`.
    It is passed explicitly to whatever needs randomness, so several
    simulations may run side by side in one process with independent streams.

    """

    CONFIGURATION_DEFAULTS = {
        "randomness": {
            "random_seed": None,
            "additional_seed": None,
        }
    }

    def __init__(self) -> None:
        self._generators: dict[GeneratorStream, BitGenerator] = {
            stream: BitGenerator(stream) for stream in GeneratorStream
        }
        self._streams: dict[GeneratorStream, RandomnessStream] = {}
        self._seed: list[int] | None = None

    @property
    def name(self) -> str:
        return "randomness_manager"

    def setup(self, configuration: LayeredConfigTree) -> None:
        random_seed = configuration.randomness.random_seed
        if random_seed is None:
            random_seed = int(np.random.SeedSequence().entropy)
            logger.info(
                f"No random seed configured, seeding from system entropy: {random_seed}. "
                "Set randomness.random_seed to this value to replay this run."
            )
        seed = [int(random_seed)]
        if configuration.randomness.additional_seed is not None:
            seed.append(int(configuration.randomness.additional_seed))
        self.seed_all(seed)

    def seed(
        self, stream: GeneratorStream, seed: Seed = None, count: int | None = None
    ) -> None:
        """(Re)seeds a single generator stream.

        Parameters
        ----------
        stream
            The stream to seed. No other stream is affected.
        seed
            ``None`` for system entropy, an integer, or an explicit state
            vector.
        count
            The number of leading entries of a state vector to use.
        """
        self._generators[stream].seed(seed, count)

    def seed_all(self, seed: Seed = None) -> None:
        """(Re)seeds every generator stream from one seed.

        Each stream derives an independent sequence from the seed.
        """
        if seed is None:
            seed = int(np.random.SeedSequence().entropy)
        if isinstance(seed, (Sequence, np.ndarray)):
            self._seed = [int(s) for s in seed]
        else:
            self._seed = [int(seed)]
        for stream in GeneratorStream:
            self.seed(stream, self._seed)
        logger.info(f"Seeded all generator streams with {self._seed}.")

    def get_generator(self, stream: GeneratorStream = GeneratorStream.GAMEPLAY) -> BitGenerator:
        return self._generators[stream]

    def get_stream(
        self, stream: GeneratorStream = GeneratorStream.GAMEPLAY
    ) -> RandomnessStream:
        """Provides the scalar distributions for a generator stream.

        Parameters
        ----------
        stream
            The generator stream the distributions draw from.

        Returns
        -------
            The randomness stream bound to that generator. Repeated calls
            return the same object.
        """
        if stream not in self._streams:
            self._streams[stream] = RandomnessStream(
                key=stream.name.lower(), generator=self._generators[stream]
            )
        return self._streams[stream]

    def get_tree(self, stream: GeneratorStream = GeneratorStream.GAMEPLAY) -> DeferredRandom:
        """Provides the root of a new deferred random tree.

        The tree draws the bits of its fractions from the given stream as
        queries require them.
        """
        return DeferredRandom(self.get_stream(stream))

    def get_seed_entropy(self, stream: GeneratorStream = GeneratorStream.GAMEPLAY) -> int | list[int]:
        """The entropy the given stream was last seeded with.

        Raises
        ------
        RandomnessError
            If the stream has never been seeded.
        """
        generator = self._generators[stream]
        if generator.seed_entropy is None:
            raise RandomnessError(f"The {stream.name} stream has not been seeded.")
        return generator.seed_entropy

    def ui_random(self, max_value: int) -> int:
        """A bounded integer from the cosmetic stream."""
        return self.get_stream(GeneratorStream.UI).random2(max_value)

    def __str__(self) -> str:
        return "RandomnessManager()"

    def __repr__(self) -> str:
        return f"RandomnessManager(seed={self._seed})"


class RandomnessInterface(Interface):
    def __init__(self, manager: RandomnessManager):
        self._manager = manager

    def get_stream(
        self, stream: GeneratorStream = GeneratorStream.GAMEPLAY
    ) -> RandomnessStream:
        """Provides the scalar distributions for a generator stream.

        Consumers whose randomness must not perturb the simulation, such as
        cosmetic effects, should ask for ``GeneratorStream.UI``.

        Parameters
        ----------
        stream
            The generator stream the distributions draw from.

        Returns
        -------
            The randomness stream bound to that generator.
        """
        return self._manager.get_stream(stream)

    def get_tree(self, stream: GeneratorStream = GeneratorStream.GAMEPLAY) -> DeferredRandom:
        """Provides the root of a new deferred random tree."""
        return self._manager.get_tree(stream)

    def get_seed_entropy(
        self, stream: GeneratorStream = GeneratorStream.GAMEPLAY
    ) -> int | list[int]:
        return self._manager.get_seed_entropy(stream)
