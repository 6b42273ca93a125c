"""
===========================
Framework Utility Functions
===========================

Collection of utility functions shared by the ``sortition`` framework.

"""
import functools
from bdb import BdbQuit
from collections.abc import Callable
from typing import Any

from click import ClickException


def handle_exceptions(
    func: Callable[..., Any], logger: Any, with_debugger: bool
) -> Callable[..., Any]:
    """Logs errors raised by an entry point and optionally drops a user into
    an interactive debugger.

    Usage errors meant for click are re-raised untouched.
    """

    @functools.wraps(func)
    def wrapped(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except (BdbQuit, KeyboardInterrupt, ClickException):
            raise
        except Exception as e:
            logger.exception("Uncaught exception {}".format(e))
            if with_debugger:
                import pdb
                import traceback

                traceback.print_exc()
                pdb.post_mortem()
            else:
                raise

    return wrapped
