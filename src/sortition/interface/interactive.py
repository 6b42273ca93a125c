"""
=======================
Sortition Context Tools
=======================

This module provides :class:`RandomnessContext`, which builds a configuration,
sets up a :class:`~sortition.framework.randomness.RandomnessManager` from it
and exposes the narrow interface that simulation code should be handed.

"""
from __future__ import annotations

from pathlib import Path
from typing import Any

from sortition.framework.configuration import build_configuration
from sortition.framework.randomness import (
    DeferredRandom,
    GeneratorStream,
    RandomnessInterface,
    RandomnessManager,
    RandomnessStream,
)


class RandomnessContext:
    """A configured set of generator streams.

    Parameters
    ----------
    configuration
        Configuration overrides, either as a dictionary or as the path to a
        yaml configuration file.
    """

    def __init__(self, configuration: dict[str, Any] | str | Path | None = None):
        self._randomness = RandomnessManager()
        self.configuration = build_configuration(configuration, [self._randomness])
        self._randomness.setup(self.configuration)
        self.randomness = RandomnessInterface(self._randomness)
        """The interface to hand to code that needs randomness."""

    def get_stream(
        self, stream: GeneratorStream = GeneratorStream.GAMEPLAY
    ) -> RandomnessStream:
        return self.randomness.get_stream(stream)

    def get_tree(self, stream: GeneratorStream = GeneratorStream.GAMEPLAY) -> DeferredRandom:
        return self.randomness.get_tree(stream)

    def reseed(self, seed: int | list[int] | None = None) -> None:
        """Reseeds every stream, e.g. to replay a recorded run."""
        self._randomness.seed_all(seed)

    def __repr__(self) -> str:
        return f"RandomnessContext({self._randomness!r})"
