"""
============================
Randomness System Exceptions
============================

Errors related to improper use of the Randomness system.

"""
from sortition.exceptions import SortitionError


class RandomnessError(SortitionError):
    """Raised for contract violations in random number and choice generation."""

    pass
