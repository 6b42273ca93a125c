"""
=====================
Deferred Random Trees
=====================

A :class:`DeferredRandom` object represents an infinite tree of random values,
allowing a much more functional approach to randomness. Querying the same
path of the tree any number of times always gives the same answer.

Each node owns a single uniform fraction ``r`` in [0, 1). The fraction is
never stored as a number. Instead the node keeps the prefix of its binary
expansion that previous queries needed, as an append-only list of 32-bit
chunks. A query compares ``r`` against an exact rational ``x / y`` using the
known chunks first and draws a further chunk from the underlying stream only
when the known prefix cannot decide the comparison. Chunks are never replaced,
so every query made on a node, at whatever scale, is answered from the same
``r``:

* ``node.x_chance_in_y(x, y)`` is ``r < x / y``, which is monotonic in
  ``x / y`` and true with probability ``x / y``;
* ``node.random2(n)`` is ``floor(r * n)``, so ``random2(n) / n`` agrees with
  ``random2(m) / m`` up to rounding for all ``n`` and ``m``.

Children are addressed by integer keys and created the first time they are
requested. A child has a fraction of its own, independent of its parent and
its siblings::

    tree = randomness.get_tree()
    tree[3][7].x_chance_in_y(1, 4)   # decided once, then always the same
    tree[3][7].random2(100)          # consistent with the decision above

Nodes are mutable and not thread safe.

"""
from __future__ import annotations

from collections.abc import Iterator
from numbers import Integral
from typing import TYPE_CHECKING

from sortition.framework.randomness.exceptions import RandomnessError

if TYPE_CHECKING:
    from sortition.framework.randomness.stream import RandomnessStream

_CHUNK_BITS = 32


def _require_integral(*values: int) -> None:
    for value in values:
        if not isinstance(value, Integral):
            raise RandomnessError(
                f"Deferred random queries take integer operands, got {value!r}."
            )


class DeferredRandom:
    """A node of a lazily materialized tree of persistent random fractions."""

    def __init__(self, stream: RandomnessStream):
        self._stream = stream
        self._bits: list[int] = []
        self._children: dict[int, DeferredRandom] = {}

    @property
    def cached_bits(self) -> tuple[int, ...]:
        """The 32-bit chunks of this node's fraction drawn so far."""
        return tuple(self._bits)

    def _chunk(self, index: int) -> int:
        if index == len(self._bits):
            self._bits.append(self._stream.get_uint32())
        return self._bits[index]

    def x_chance_in_y(self, x: int, y: int) -> bool:
        """Whether this node's fraction is less than x/y.

        Parameters
        ----------
        x
            The numerator of the ratio. Values at or below zero are always
            false, values at or above ``y`` always true.
        y
            The denominator of the ratio.

        Returns
        -------
            True with probability x/y, consistently for every ratio asked
            of this node.

        Raises
        ------
        RandomnessError
            If ``y`` is not positive or either operand is not an integer.
        """
        _require_integral(x, y)
        if y <= 0:
            raise RandomnessError(f"Cannot compare against the ratio {x}/{y}.")
        if x <= 0:
            return False
        if x >= y:
            return True

        x, y = int(x), int(y)
        index = 0
        while True:
            # r < x / y  <=>  rest * y < x * 2**32 - chunk * y, rest in [0, 1).
            x = (x << _CHUNK_BITS) - self._chunk(index) * y
            index += 1
            if x <= 0:
                return False
            if x >= y:
                return True

    def one_chance_in(self, a_million: int) -> bool:
        return self.x_chance_in_y(1, a_million)

    def random2(self, maxp1: int) -> int:
        """Returns ``floor(r * maxp1)``, an integer in [0, maxp1).

        Values of ``maxp1`` of 1 or less give 0.
        """
        _require_integral(maxp1)
        if maxp1 <= 1:
            return 0
        maxp1 = int(maxp1)
        # Enough leading chunks to cover maxp1 give a lower bound at most one
        # below the answer.
        chunks = -(-maxp1.bit_length() // _CHUNK_BITS)
        prefix = 0
        for index in range(chunks):
            prefix = (prefix << _CHUNK_BITS) | self._chunk(index)
        value = (prefix * maxp1) >> (chunks * _CHUNK_BITS)
        while not self.x_chance_in_y(value + 1, maxp1):
            value += 1
        return value

    def random_range(self, low: int, high: int) -> int:
        if high < low:
            return low
        return low + self.random2(high - low + 1)

    def random2avg(self, max_value: int, rolls: int) -> int:
        """Averages ``rolls`` draws, each taken from a child of this node."""
        rolls = max(rolls, 1)
        total = self[0].random2(max_value)
        for i in range(1, rolls):
            total += self[i].random2(max_value + 1)
        return total // rolls

    def path(self, *keys: int) -> DeferredRandom:
        """Returns the descendant reached by following ``keys`` from this node."""
        node = self
        for key in keys:
            node = node[key]
        return node

    def __getitem__(self, key: int) -> DeferredRandom:
        if key not in self._children:
            self._children[key] = DeferredRandom(self._stream)
        return self._children[key]

    def __contains__(self, key: int) -> bool:
        return key in self._children

    def __iter__(self) -> Iterator[int]:
        return iter(self._children)

    def __repr__(self) -> str:
        return (
            f"DeferredRandom(cached_chunks={len(self._bits)}, "
            f"children={sorted(self._children)})"
        )
