from __future__ import annotations

from bdb import BdbQuit

import click
import pytest
from _pytest.logging import LogCaptureFixture
from loguru import logger
from pytest_mock import MockerFixture

from sortition.framework.randomness import RandomnessError
from sortition.framework.utilities import handle_exceptions


@pytest.mark.parametrize(
    "test_input", [KeyboardInterrupt, BdbQuit, click.UsageError, RandomnessError, ValueError]
)
def test_handle_exceptions(test_input: type[BaseException]) -> None:
    def raise_me() -> None:
        raise test_input("boom")

    with pytest.raises(test_input):
        handle_exceptions(raise_me, logger, False)()


def test_handle_exceptions_passes_results_through() -> None:
    func = handle_exceptions(lambda x, y=1: x + y, logger, False)
    assert func(1, y=2) == 3


def test_handle_exceptions_logs_errors(caplog: LogCaptureFixture) -> None:
    def raise_me() -> None:
        raise RandomnessError("the dice fell off the table")

    with pytest.raises(RandomnessError):
        handle_exceptions(raise_me, logger, False)()
    assert "Uncaught exception the dice fell off the table" in caplog.text


def test_handle_exceptions_usage_errors_are_not_logged(caplog: LogCaptureFixture) -> None:
    def raise_me() -> None:
        raise click.BadParameter("not a number")

    with pytest.raises(click.BadParameter):
        handle_exceptions(raise_me, logger, False)()
    assert "Uncaught exception" not in caplog.text


def test_handle_exceptions_with_debugger(mocker: MockerFixture) -> None:
    post_mortem = mocker.patch("pdb.post_mortem")

    def raise_me() -> None:
        raise ValueError("boom")

    assert handle_exceptions(raise_me, logger, True)() is None
    post_mortem.assert_called_once()
