from __future__ import annotations

import pytest

from sortition.framework.randomness import (
    GeneratorStream,
    RandomnessManager,
    RandomnessStream,
)


@pytest.fixture
def randomness_manager() -> RandomnessManager:
    manager = RandomnessManager()
    manager.seed_all(12345)
    return manager


@pytest.fixture
def randomness_stream(randomness_manager: RandomnessManager) -> RandomnessStream:
    return randomness_manager.get_stream()


@pytest.fixture(params=list(GeneratorStream))
def generator_stream(request: pytest.FixtureRequest) -> GeneratorStream:
    return request.param  # type: ignore [no-any-return]
