"""
==================
Randomness Streams
==================

This module provides the scalar distributions of ``sortition``: coin flips,
bounded integers, ranges, random rounding, dice, binomial trials, fuzzing and
percentage checks, along with array shuffling and the bound forms of weighted
selection.

Every distribution is a pure function of the 32 and 64-bit values produced by
a single :class:`~sortition.framework.randomness.generators.BitGenerator`.
Degenerate inputs (empty ranges, non-positive denominators, zero dice) produce
a defined default instead of raising, so callers never need to guard them.

"""
from __future__ import annotations

import itertools
import math
from collections.abc import Callable, Hashable, Iterable, Mapping, MutableSequence
from collections.abc import Sequence, Sized
from numbers import Integral
from typing import Any, TypeVar

import numpy as np
import pandas as pd
from scipy import stats

from sortition.framework.randomness import choice
from sortition.framework.randomness.generators import BitGenerator

T = TypeVar("T")

PPFCallable = Callable[..., Any]

_WORD_BITS = 32


def div_round_up(num: int, den: int) -> int:
    """Integer division rounding toward positive infinity.

    Non-positive denominators give 0.
    """
    if den <= 0:
        return 0
    return -(-num // den)


def _truncating_div(num: int, den: int) -> int:
    # Integer division rounding toward zero.
    quotient = abs(num) // abs(den)
    return -quotient if (num < 0) != (den < 0) else quotient


def _is_integral(value: Any) -> bool:
    return isinstance(value, (Integral, np.integer)) and not isinstance(value, bool)


class RandomnessStream:
    """A source of scalar random values bound to one generator stream.

    `RandomnessStream` objects are handed out by the
    :class:`~sortition.framework.randomness.manager.RandomnessManager`.
    Several streams may share a generator, in which case their draws
    interleave in one sequence.

    Notes
    -----
    Should not usually be constructed by client code::

        gameplay = randomness.get_stream()
        if gameplay.x_chance_in_y(2, 3):
            ...

    """

    def __init__(self, key: str, generator: BitGenerator):
        self.key = key
        """The name of the randomness stream."""
        self.generator = generator
        """The bit source all draws come from."""

    ###############
    # Raw values  #
    ###############

    def get_uint32(self) -> int:
        return self.generator.next_uint32()

    def get_uint64(self) -> int:
        return self.generator.next_uint64()

    def random_real(self) -> float:
        """Returns a float uniformly distributed in [0, 1).

        The value carries the full 53 bits of double precision.
        """
        return (self.get_uint64() >> 11) * 2.0**-53

    def _random_bits(self, words: int) -> int:
        if words == 1:
            return self.get_uint32()
        value = 0
        for _ in range(words):
            value = (value << _WORD_BITS) | self.get_uint32()
        return value

    ############################
    # Comparisons and integers #
    ############################

    def coinflip(self) -> bool:
        return bool(self.get_uint32() >> 31)

    def random2(self, max_value: int) -> int:
        """Returns an integer uniformly distributed in [0, max_value).

        Values of ``max_value`` of 1 or less return 0 without consuming a draw.

        Parameters
        ----------
        max_value
            The exclusive upper bound.

        Returns
        -------
            An integer in [0, max_value).
        """
        if max_value <= 1:
            return 0
        max_value = int(max_value)
        words = -(-(max_value - 1).bit_length() // _WORD_BITS)
        # Split the draw range into max_value equally sized partitions and
        # reject draws landing in the leftover tail.
        partition = (1 << (words * _WORD_BITS)) // max_value
        while True:
            value = self._random_bits(words) // partition
            if value < max_value:
                return value

    def x_chance_in_y(self, x: int, y: int) -> bool:
        """Integer ratio comparison, true with probability x/y.

        Returns False whenever ``y`` is not positive.  ``x`` is clamped to
        [0, y] so no draw is made for certain outcomes.
        """
        if y <= 0 or x <= 0:
            return False
        if x >= y:
            return True
        return self.random2(y) < x

    def real_chance_in_y(self, x: float, y: float) -> bool:
        """Real ratio comparison, true with probability x/y."""
        if y <= 0 or x <= 0:
            return False
        if x >= y:
            return True
        return self.random_real() * y < x

    def chance_in_y(self, x: int | float, y: int | float) -> bool:
        """Ratio comparison dispatching on the kind of its operands.

        Uses :meth:`real_chance_in_y` if either operand is not an integral
        value and :meth:`x_chance_in_y` otherwise.
        """
        if _is_integral(x) and _is_integral(y):
            return self.x_chance_in_y(int(x), int(y))
        return self.real_chance_in_y(float(x), float(y))

    def one_chance_in(self, a_million: int) -> bool:
        return self.random2(a_million) == 0

    def random_range(self, low: int, high: int, nrolls: int | None = None) -> int:
        """Returns an integer in [low, high].

        Parameters
        ----------
        low
            The inclusive lower bound.
        high
            The inclusive upper bound. If it is below ``low``, ``low`` is
            returned.
        nrolls
            If provided, the result is the randomly rounded average of this
            many uniform draws over the range, which pulls results toward the
            middle of the range as ``nrolls`` grows.

        Returns
        -------
            An integer in [low, high].
        """
        if high < low:
            return low
        span = high - low + 1
        if nrolls is None:
            return low + self.random2(span)
        nrolls = max(nrolls, 1)
        total = sum(self.random2(span) for _ in range(nrolls))
        return low + self.div_rand_round(total, nrolls)

    def random2avg(self, max_value: int, rolls: int) -> int:
        rolls = max(rolls, 1)
        total = self.random2(max_value)
        for _ in range(rolls - 1):
            total += self.random2(max_value + 1)
        return total // rolls

    def biased_random2(self, max_value: int, n: int) -> int:
        """Returns an integer in [0, max_value) skewed toward 0.

        Larger ``n`` flattens the skew.
        """
        for i in range(max_value):
            if self.x_chance_in_y(n, n + max_value):
                return i
        return 0

    def random2limit(self, max_value: int, limit: int) -> int:
        total = 0
        for i in range(max_value):
            if self.random2(limit) >= i:
                total += 1
        return total

    def maybe_random2(self, x: int, random_factor: bool) -> int:
        return self.random2(x) if random_factor else x // 2

    def maybe_random_div(self, nom: int, denom: int, random_factor: bool) -> int:
        if nom <= 0 or denom <= 0:
            return 0
        if random_factor:
            return self.random2(nom + denom) // denom
        return nom // 2 // denom

    def maybe_roll_dice(self, num: int, size: int, random: bool) -> int:
        if random:
            return self.roll_dice(num, size)
        return (num + num * size) // 2

    ############
    # Rounding #
    ############

    def div_rand_round(self, num: int, den: int) -> int:
        """Divides, rounding the remainder up with probability remainder/den.

        The expected value of the result is exactly ``num / den``.
        Non-positive denominators give 0.
        """
        if den <= 0:
            return 0
        quotient, remainder = divmod(num, den)
        if remainder:
            return quotient + int(self.random2(den) < remainder)
        return quotient

    def rand_round(self, x: float) -> int:
        whole = math.floor(x)
        fraction = x - whole
        if fraction:
            return whole + int(self.random_real() < fraction)
        return whole

    ##########
    # Trials #
    ##########

    def binomial(self, n_trials: int, trial_prob: int, scale: int = 100) -> int:
        """Counts successes over n_trials each passing with trial_prob/scale."""
        return sum(1 for _ in range(n_trials) if self.x_chance_in_y(trial_prob, scale))

    def bernoulli(self, n_trials: float, trial_prob: float) -> bool:
        """Whether at least one success occurs over a real number of trials.

        Parameters
        ----------
        n_trials
            The number of trials, which need not be whole.
        trial_prob
            The probability of success of a single trial.

        Returns
        -------
            True with probability ``1 - (1 - trial_prob) ** n_trials``.
        """
        if n_trials <= 0 or trial_prob <= 0:
            return False
        if trial_prob >= 1:
            return True
        return not self.random_real() < (1 - trial_prob) ** n_trials

    def fuzz_value(self, val: int, lowfuzz: int, highfuzz: int, naverage: int = 2) -> int:
        """Adds noise of up to lowfuzz percent below and highfuzz percent above val."""
        low = _truncating_div(lowfuzz * val, 100)
        high = _truncating_div(highfuzz * val, 100)
        return val + self.random2avg(low + high + 1, naverage) - low

    def roll_dice(self, num: int, size: int) -> int:
        """Sums num independent draws over [1, size]."""
        if num <= 0 or size <= 0:
            return 0
        return num + sum(self.random2(size) for _ in range(num))

    def decimal_chance(self, percent: float) -> bool:
        return self.random_real() * 100 < percent

    def percent_chance(self, percent: int) -> bool:
        return self.x_chance_in_y(percent, 100)

    #############
    # Selection #
    #############

    def random_choose(self, first: T, *rest: T) -> T:
        """Returns one of the arguments uniformly at random."""
        elements = (first, *rest)
        return elements[self.random2(len(elements))]

    def random_element(self, container: Iterable[T]) -> T | None:
        """Returns a uniformly chosen element of a sized container.

        Containers that do not support indexing are advanced to the chosen
        position. Empty containers give None.
        """
        if not isinstance(container, Sized):
            container = list(container)
        size = len(container)
        if not size:
            return None
        position = self.random2(size)
        if isinstance(container, (Sequence, np.ndarray, pd.Index)):
            return container[position]
        return next(itertools.islice(container, position, None))

    def choose_weighted(
        self, choices: Mapping[T, int] | Iterable[tuple[T, int]]
    ) -> T | None:
        return choice.choose_weighted(self, choices)

    def choose_weighted_index(self, weights: Sequence[int]) -> int:
        return choice.choose_weighted_index(self, weights)

    def choose_weighted_args(self, weight: int, value: T, *weights_and_values: Any) -> T:
        return choice.choose_weighted_args(self, weight, value, *weights_and_values)

    def choose_weighted_iter(
        self,
        items: Iterable[T],
        weight: Callable[[T], int],
        default: T | None = None,
    ) -> T | None:
        return choice.choose_weighted_iter(self, items, weight, default)

    def choose_random_weighted(self, weights: Iterable[int]) -> int:
        return choice.choose_random_weighted(self, weights)

    def shuffle_array(
        self, items: MutableSequence[Any] | np.ndarray, n: int | None = None
    ) -> None:
        """Shuffles items in place with a Fisher-Yates shuffle.

        Parameters
        ----------
        items
            Any mutable, indexable sequence.
        n
            Shuffle only the first n elements. Defaults to the whole sequence.
        """
        n = len(items) if n is None else min(n, len(items))
        while n > 1:
            i = self.random2(n)
            n -= 1
            if isinstance(items, np.ndarray):
                # Swapping views of a multidimensional array would alias rows.
                items[[i, n]] = items[[n, i]]
            else:
                items[i], items[n] = items[n], items[i]

    ##################
    # Vectorized use #
    ##################

    def get_draw(self, index: pd.Index[Any]) -> pd.Series[float]:
        """Get an indexed set of numbers uniformly drawn from the unit interval.

        Parameters
        ----------
        index
            An index whose length is the number of random draws made
            and which indexes the returned `pandas.Series`.

        Returns
        -------
            A series of random numbers indexed by the provided `pandas.Index`.
        """
        # Return a structured null value if an empty index is passed
        if index.empty:
            return pd.Series(index=index, dtype=float)
        draws = np.fromiter((self.random_real() for _ in range(len(index))), dtype=float)
        return pd.Series(draws, index=index)

    def sample_from_distribution(
        self,
        index: pd.Index[Any],
        distribution: stats.rv_continuous | None = None,
        ppf: PPFCallable | None = None,
        **distribution_kwargs: Any,
    ) -> pd.Series[float]:
        """Given a distribution, returns an indexed set of samples from that
        distribution, by inverse transform of the draws of :meth:`get_draw`.

        Parameters
        ----------
        index
            An index whose length is the number of samples drawn
            and which indexes the returned `pandas.Series`.
        distribution
            A scipy.stats distribution object.
        ppf
            A percent point function mapping a series of draws in [0, 1) to
            samples.
        distribution_kwargs
            Additional keyword arguments to pass to the percent point function.

        Returns
        -------
            An indexed set of samples from the distribution.

        Raises
        ------
        ValueError
            If neither or both of ``distribution`` and ``ppf`` are provided.
        """
        if ppf is None:
            if distribution is None:
                raise ValueError("Either distribution or ppf must be provided")
            ppf = distribution.ppf
        else:
            if distribution is not None:
                raise ValueError("Only one of distribution or ppf can be provided")
        draws = self.get_draw(index)
        return pd.Series(ppf(draws, **distribution_kwargs), index=index, dtype=float)

    def __repr__(self) -> str:
        return f"RandomnessStream(key={self.key!r}, generator={self.generator!r})"
