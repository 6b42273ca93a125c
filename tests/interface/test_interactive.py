from pathlib import Path

import pytest

from sortition.framework.randomness import DeferredRandom, GeneratorStream, RandomnessStream
from sortition.interface import RandomnessContext


def test_context_from_dict() -> None:
    context = RandomnessContext({"randomness": {"random_seed": 4}})
    assert context.configuration.randomness.random_seed == 4
    assert isinstance(context.get_stream(), RandomnessStream)
    assert context.get_stream(GeneratorStream.UI).key == "ui"
    assert isinstance(context.get_tree(), DeferredRandom)


def test_context_from_file(tmp_path: Path) -> None:
    config_path = tmp_path / "context.yaml"
    config_path.write_text("configuration:\n  randomness:\n    random_seed: 4\n")

    from_file = RandomnessContext(config_path).get_stream()
    from_dict = RandomnessContext({"randomness": {"random_seed": 4}}).get_stream()
    assert [from_file.random2(100) for _ in range(20)] == [
        from_dict.random2(100) for _ in range(20)
    ]


def test_context_without_seed_is_usable() -> None:
    context = RandomnessContext()
    assert 0 <= context.get_stream().random2(6) < 6


def test_reseed() -> None:
    context = RandomnessContext({"randomness": {"random_seed": 10}})
    stream = context.get_stream()
    first = [stream.roll_dice(2, 6) for _ in range(10)]

    context.reseed(10)
    assert [stream.roll_dice(2, 6) for _ in range(10)] == first

    context.reseed(11)
    assert [stream.roll_dice(2, 6) for _ in range(10)] != first


@pytest.mark.parametrize("stream", list(GeneratorStream))
def test_randomness_interface(stream: GeneratorStream) -> None:
    context = RandomnessContext({"randomness": {"random_seed": 10}})
    assert context.randomness.get_stream(stream) is context.get_stream(stream)
    assert context.randomness.get_seed_entropy(stream) is not None
