"""
==================
Weighted Selection
==================

Choosing an item with probability proportional to a non-negative integer
weight.

Every function in this module is a rendition of one single pass weighted
reservoir algorithm. A running total of the weights seen so far and a current
candidate are the only state. Each entry, in order, replaces the candidate
with probability ``weight / total`` where ``total`` already includes the
entry's own weight. After the last entry every item has been chosen with
probability ``weight / grand_total``. As the input is only traversed once, the
items may come from a lazy iterator that is expensive or impossible to
materialize, e.g. all the map positions at some distance from a point.

Entries with a weight of zero (or less) never add to the total and are never
selected, unless noted otherwise below for the inline form.

"""
from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from sortition.framework.randomness.exceptions import RandomnessError

if TYPE_CHECKING:
    from sortition.framework.randomness.stream import RandomnessStream

T = TypeVar("T")

NO_SELECTION = -1
"""The index returned by :func:`choose_weighted_index` when nothing can be chosen."""


def _reservoir(
    stream: RandomnessStream, entries: Iterable[tuple[T, int]]
) -> tuple[T | None, bool]:
    chosen: T | None = None
    found = False
    total = 0
    for item, weight in entries:
        if weight <= 0:
            continue
        total += weight
        if stream.x_chance_in_y(weight, total):
            chosen = item
            found = True
    return chosen, found


def choose_weighted(
    stream: RandomnessStream, choices: Mapping[T, int] | Iterable[tuple[T, int]]
) -> T | None:
    """Chooses an item from a collection of item-weight pairs.

    Parameters
    ----------
    stream
        The source of randomness.
    choices
        Either a mapping from items to weights or an iterable of
        ``(item, weight)`` pairs.

    Returns
    -------
        The chosen item itself (not a copy), so mutable items may be
        modified in place by the caller. None if every weight is zero.
    """
    entries = choices.items() if isinstance(choices, Mapping) else choices
    chosen, _ = _reservoir(stream, entries)
    return chosen


def choose_weighted_index(stream: RandomnessStream, weights: Iterable[int]) -> int:
    """Chooses an index into a fixed array of weights.

    Parameters
    ----------
    stream
        The source of randomness.
    weights
        The weight of each position. Non-positive weights are skipped.

    Returns
    -------
        The chosen index, or ``NO_SELECTION`` (-1) if every weight was
        skipped.
    """
    index, found = _reservoir(stream, enumerate(weights))
    return index if found else NO_SELECTION


def choose_weighted_args(
    stream: RandomnessStream, weight: int, value: T, *weights_and_values: Any
) -> T:
    """Chooses among values given inline as ``weight, value, weight, value...``.

    The choice is folded left: each new value displaces the current one with
    probability ``new_weight / total``. While the running total is still zero
    the newest value is taken unconditionally, so a call with all zero weights
    returns the last value and a call with a single value returns it whatever
    its weight.

    This differs from a recursive formulation that tests each head against
    ``random2(total) < weight`` on the way down, which would return the
    first value when every weight is zero. The last value is what this
    returns.

    Raises
    ------
    RandomnessError
        If a weight is given without a value.
    """
    if len(weights_and_values) % 2:
        raise RandomnessError(
            "Inline weighted choices must alternate weights and values, "
            f"got a trailing weight {weights_and_values[-1]!r}."
        )
    total, current = weight, value
    for next_weight, next_value in zip(weights_and_values[::2], weights_and_values[1::2]):
        total += next_weight
        if total <= 0 or stream.random2(total) < next_weight:
            current = next_value
    return current


def choose_weighted_iter(
    stream: RandomnessStream,
    items: Iterable[T],
    weight: Callable[[T], int],
    default: T | None = None,
) -> T | None:
    """Chooses an item from any iterable using a weight function.

    The iterable is consumed exactly once and ``weight`` is called exactly
    once per item.

    Parameters
    ----------
    stream
        The source of randomness.
    items
        The items to choose among. May be a lazy generator.
    weight
        A function giving the weight of an item.
    default
        Returned when every weight is zero.

    Returns
    -------
        The chosen item, or ``default``.
    """
    chosen, found = _reservoir(stream, ((item, weight(item)) for item in items))
    return chosen if found else default


def choose_random_weighted(stream: RandomnessStream, weights: Iterable[int]) -> int:
    """Chooses an index from weights which must admit at least one choice.

    Raises
    ------
    RandomnessError
        If no weight is positive.
    """
    index = choose_weighted_index(stream, weights)
    if index == NO_SELECTION:
        raise RandomnessError("A weighted choice was requested but every weight is zero.")
    return index
