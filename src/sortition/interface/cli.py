"""
============================
Sortition Command Line Tools
============================

``sortition`` provides the tool :command:`sortition` for drawing reproducible
random values from the command line, mostly to inspect the behaviour of a
seed while debugging or balancing.

.. list-table:: ``sortition`` sub-commands
    :header-rows: 1
    :widths: 30, 40

    *   - Name
        - Description
    *   - | **roll**
        - | Rolls dice given in dice notation, e.g. ``3d6``.
    *   - | **draw**
        - | Draws bounded integers from a generator stream.
    *   - | **shuffle**
        - | Shuffles the given items.
    *   - | **tree**
        - | Queries a node of a deferred random tree.
    *   - | **sample**
        - | Samples a continuous ``scipy.stats`` distribution.

Every sub-command accepts ``--seed`` and ``--config`` to fix the generator
state, so the same invocation always prints the same values, and
``--log-dir`` to keep a debug log of the run.

.. click:: sortition.interface.cli:sortition
   :prog: sortition
   :show-nested:

"""
from __future__ import annotations

import functools
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
import pandas as pd
from loguru import logger
from scipy import stats

from sortition.framework.configuration import load_configuration_file
from sortition.framework.logging import (
    configure_logging_to_file,
    configure_logging_to_terminal,
)
from sortition.framework.randomness import Dice, GeneratorStream
from sortition.framework.utilities import handle_exceptions
from sortition.interface.interactive import RandomnessContext


def _common_options(func: Callable[..., Any]) -> Callable[..., Any]:
    @click.option(
        "--seed",
        "-s",
        type=int,
        default=None,
        help="Seed for every generator stream. Overrides any configured seed.",
    )
    @click.option(
        "--config",
        "-c",
        "config_path",
        type=click.Path(exists=True, dir_okay=False, resolve_path=True),
        help="A yaml configuration file.",
    )
    @click.option(
        "--verbose",
        "-v",
        count=True,
        help="Logs verbosely. Pass twice for debug output.",
    )
    @click.option(
        "--log-dir",
        type=click.Path(file_okay=False, resolve_path=True, path_type=Path),
        help="Also write a debug log, sortition.log, to this directory.",
    )
    @click.option(
        "--pdb",
        "with_debugger",
        is_flag=True,
        help="Drop into python debugger if an error occurs.",
    )
    @functools.wraps(func)
    def wrapped(
        seed: int | None,
        config_path: str | None,
        verbose: int,
        log_dir: Path | None,
        with_debugger: bool,
        **kwargs: Any,
    ) -> None:
        configure_logging_to_terminal(verbosity=min(verbose, 2), long_format=verbose > 1)
        if log_dir is not None:
            log_dir.mkdir(parents=True, exist_ok=True)
            configure_logging_to_file(log_dir)
        configuration = load_configuration_file(config_path) if config_path else {}
        if seed is not None:
            configuration.setdefault("randomness", {})["random_seed"] = seed
        main = handle_exceptions(func, logger, with_debugger)
        main(RandomnessContext(configuration), **kwargs)

    return wrapped


@click.group()
def sortition() -> None:
    """A command line utility for drawing reproducible random values."""
    pass


def _parse_dice(ctx: click.Context, param: click.Parameter, value: str) -> Dice:
    try:
        return Dice.from_string(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


def _parse_distribution(
    ctx: click.Context, param: click.Parameter, value: str
) -> stats.rv_continuous:
    distribution = getattr(stats, value, None)
    if not isinstance(distribution, stats.rv_continuous):
        raise click.BadParameter(f"{value!r} is not a continuous scipy.stats distribution.")
    return distribution


def _parse_parameters(
    ctx: click.Context, param: click.Parameter, value: tuple[str, ...]
) -> dict[str, float]:
    parameters = {}
    for item in value:
        name, sep, number = item.partition("=")
        try:
            if not sep or not name:
                raise ValueError
            parameters[name] = float(number)
        except ValueError:
            raise click.BadParameter(f"Expected NAME=VALUE, got {item!r}.")
    return parameters


def _parse_ratio(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> tuple[int, int] | None:
    if value is None:
        return None
    try:
        x, y = (int(part) for part in value.split("/"))
    except ValueError:
        raise click.BadParameter(f"Expected X/Y, got {value!r}.")
    if y <= 0:
        raise click.BadParameter(f"The denominator must be positive, got {y}.")
    return x, y


@sortition.command()
@click.argument("dice", callback=_parse_dice)
@click.option("--count", "-n", type=int, default=1, help="The number of rolls.")
@_common_options
def roll(context: RandomnessContext, dice: Dice, count: int) -> None:
    """Roll DICE, given in dice notation such as 3d6, on the gameplay stream."""
    stream = context.get_stream()
    for _ in range(count):
        click.echo(dice.roll(stream))


@sortition.command()
@click.argument("max_value", metavar="MAX", type=int)
@click.option("--count", "-n", type=int, default=1, help="The number of draws.")
@click.option(
    "--stream",
    "stream_name",
    type=click.Choice([s.name.lower() for s in GeneratorStream]),
    default="gameplay",
    help="The generator stream to draw from.",
)
@_common_options
def draw(context: RandomnessContext, max_value: int, count: int, stream_name: str) -> None:
    """Draw integers uniformly from [0, MAX)."""
    stream = context.get_stream(GeneratorStream.from_name(stream_name))
    for _ in range(count):
        click.echo(stream.random2(max_value))


@sortition.command()
@click.argument("items", nargs=-1, required=True)
@_common_options
def shuffle(context: RandomnessContext, items: tuple[str, ...]) -> None:
    """Print ITEMS in a random order."""
    shuffled = list(items)
    context.get_stream().shuffle_array(shuffled)
    click.echo(" ".join(shuffled))


@sortition.command()
@click.argument("path", nargs=-1, type=int)
@click.option(
    "--ratio",
    callback=_parse_ratio,
    help="Test the node's fraction against a ratio X/Y.",
)
@click.option("--random2", "maxp1", type=int, help="Scale the node's fraction to [0, N).")
@_common_options
def tree(
    context: RandomnessContext,
    path: tuple[int, ...],
    ratio: tuple[int, int] | None,
    maxp1: int | None,
) -> None:
    """Query the deferred random tree node at PATH.

    PATH is a sequence of integer keys leading from the root. Every query in
    one invocation is answered from the same node. Without --ratio or
    --random2 the node's fraction is shown as a percentile, random2(100).
    """
    node = context.get_tree().path(*path)
    if ratio is not None:
        click.echo(node.x_chance_in_y(*ratio))
    if maxp1 is not None or ratio is None:
        click.echo(node.random2(maxp1 if maxp1 is not None else 100))


@sortition.command()
@click.argument("distribution", callback=_parse_distribution)
@click.option("--count", "-n", type=int, default=1, help="The number of samples.")
@click.option(
    "--param",
    "-p",
    "parameters",
    multiple=True,
    callback=_parse_parameters,
    help="A distribution parameter as NAME=VALUE, e.g. loc=5. May be repeated.",
)
@_common_options
def sample(
    context: RandomnessContext,
    distribution: stats.rv_continuous,
    count: int,
    parameters: dict[str, float],
) -> None:
    """Sample DISTRIBUTION, any continuous scipy.stats distribution such as
    norm or expon, on the gameplay stream."""
    index = pd.RangeIndex(max(count, 0), name="sample")
    samples = context.get_stream().sample_from_distribution(index, distribution, **parameters)
    for value in samples:
        click.echo(value)
