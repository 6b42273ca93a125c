from pathlib import Path

import pandas as pd
import pytest
from click.testing import CliRunner
from loguru import logger
from scipy import stats

from sortition.framework.randomness import Dice
from sortition.interface import RandomnessContext
from sortition.interface.cli import sortition


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def config_file(tmp_path: Path) -> str:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("configuration:\n  randomness:\n    random_seed: 555\n")
    return str(config_path)


def _lines(output: str) -> list[str]:
    return output.split()


@pytest.mark.parametrize("command", ["roll", "draw", "shuffle", "tree", "sample"])
def test_common_parameters(command: str) -> None:
    parameters = {param.name for param in sortition.commands[command].params}
    expected = {"seed", "config_path", "verbose", "log_dir", "with_debugger"}
    assert expected <= parameters


def test_roll(runner: CliRunner) -> None:
    result = runner.invoke(sortition, ["roll", "3d6", "-n", "50", "-s", "1"])
    assert result.exit_code == 0
    rolls = [int(line) for line in _lines(result.output)]
    assert len(rolls) == 50
    assert all(3 <= roll <= 18 for roll in rolls)

    stream = RandomnessContext({"randomness": {"random_seed": 1}}).get_stream()
    assert rolls == [Dice(3, 6).roll(stream) for _ in range(50)]


def test_roll_bad_notation(runner: CliRunner) -> None:
    result = runner.invoke(sortition, ["roll", "three dice"])
    assert result.exit_code == 2
    assert "Invalid dice notation" in result.output


def test_draw_is_reproducible(runner: CliRunner, config_file: str) -> None:
    args = ["draw", "100", "-n", "20", "-c", config_file]
    first = runner.invoke(sortition, args)
    second = runner.invoke(sortition, args)
    assert first.exit_code == 0
    assert _lines(first.output) == _lines(second.output)
    assert all(0 <= int(value) < 100 for value in _lines(first.output))


def test_seed_overrides_config(runner: CliRunner, config_file: str) -> None:
    from_config = runner.invoke(sortition, ["draw", "1000", "-n", "10", "-c", config_file])
    overridden = runner.invoke(
        sortition, ["draw", "1000", "-n", "10", "-c", config_file, "-s", "556"]
    )
    from_seed = runner.invoke(sortition, ["draw", "1000", "-n", "10", "-s", "556"])
    assert _lines(overridden.output) == _lines(from_seed.output)
    assert _lines(overridden.output) != _lines(from_config.output)


def test_draw_streams_are_independent(runner: CliRunner) -> None:
    gameplay = runner.invoke(sortition, ["draw", "1000", "-n", "10", "-s", "3"])
    ui = runner.invoke(sortition, ["draw", "1000", "-n", "10", "-s", "3", "--stream", "ui"])
    assert ui.exit_code == 0
    assert _lines(gameplay.output) != _lines(ui.output)


def test_draw_unknown_stream(runner: CliRunner) -> None:
    result = runner.invoke(sortition, ["draw", "10", "--stream", "cosmic_rays"])
    assert result.exit_code == 2


def test_shuffle(runner: CliRunner) -> None:
    items = ["orc", "goblin", "kobold", "dragon", "newt"]
    result = runner.invoke(sortition, ["shuffle", *items, "-s", "8"])
    assert result.exit_code == 0
    assert sorted(_lines(result.output)) == sorted(items)


def test_tree(runner: CliRunner) -> None:
    args = ["tree", "3", "7", "-s", "9"]
    default = runner.invoke(sortition, args)
    assert default.exit_code == 0
    percentile = int(default.output.strip())
    assert 0 <= percentile < 100

    # Queries on one node agree with each other.
    result = runner.invoke(sortition, args + ["--ratio", f"{percentile}/100", "--random2", "100"])
    assert result.exit_code == 0
    assert _lines(result.output) == ["False", str(percentile)]

    result = runner.invoke(sortition, args + ["--ratio", f"{percentile + 1}/100"])
    assert _lines(result.output) == ["True"]


@pytest.mark.parametrize("ratio", ["1", "a/b", "1/0", "1/-3"])
def test_tree_bad_ratio(runner: CliRunner, ratio: str) -> None:
    result = runner.invoke(sortition, ["tree", "--ratio", ratio])
    assert result.exit_code == 2


def test_sample(runner: CliRunner) -> None:
    result = runner.invoke(
        sortition, ["sample", "uniform", "-n", "30", "-p", "loc=5", "-p", "scale=2", "-s", "4"]
    )
    assert result.exit_code == 0
    samples = [float(line) for line in _lines(result.output)]
    assert len(samples) == 30
    assert all(5 <= value < 7 for value in samples)

    stream = RandomnessContext({"randomness": {"random_seed": 4}}).get_stream()
    expected = stream.sample_from_distribution(
        pd.RangeIndex(30), stats.uniform, loc=5, scale=2
    )
    assert samples == pytest.approx(expected.tolist())


@pytest.mark.parametrize(
    "args", [["not_a_distribution"], ["binom"], ["norm", "-p", "loc"], ["norm", "-p", "loc=x"]]
)
def test_sample_bad_arguments(runner: CliRunner, args: list[str]) -> None:
    result = runner.invoke(sortition, ["sample", *args])
    assert result.exit_code == 2


def test_log_dir(runner: CliRunner, tmp_path: Path) -> None:
    log_dir = tmp_path / "logs"
    try:
        result = runner.invoke(sortition, ["draw", "10", "-s", "21", "--log-dir", str(log_dir)])
    finally:
        logger.remove()
    assert result.exit_code == 0

    log_file = log_dir / "sortition.log"
    assert log_file.exists()
    assert "Seeded all generator streams with [21]" in log_file.read_text()
