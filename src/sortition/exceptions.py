"""
==========
Exceptions
==========

Module containing package-wide exception definitions. Exceptions for
particular subsystems are defined in their respective modules.

"""


class SortitionError(Exception):
    """Generic exception raised for errors in ``sortition``."""

    pass
