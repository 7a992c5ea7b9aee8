"""testcommand pytest plugin."""

from __future__ import annotations

import logging
import typing as t

import pytest

from testcommand.reporter import RecordingReporter
from testcommand.tester import CommandTester, set_default_tester

if t.TYPE_CHECKING:
    from collections.abc import Generator

logger = logging.getLogger(__name__)


class PytestReporter(RecordingReporter):
    """Record checks during a test and fail the test afterwards if any failed.

    A failed check does not raise, so the command's output can still be
    inspected and the remaining checks of the test still run.
    """

    def check(self) -> None:
        """Fail the current test if any recorded check failed."""
        failures = self.failures
        if not failures:
            return
        lines = [f"{len(failures)} of {len(self.outcomes)} command checks failed:"]
        lines += [f"  {outcome}" for outcome in failures]
        pytest.fail("\n".join(lines), pytrace=False)


@pytest.hookimpl(wrapper=True)
def pytest_runtest_call(item: pytest.Item) -> Generator[None, object, object]:
    """Fail a test whose body passed but made failing command checks."""
    result = yield
    reporter = getattr(item, "funcargs", {}).get("command_reporter")
    if isinstance(reporter, PytestReporter):
        reporter.check()
    return result


@pytest.fixture
def command_reporter() -> PytestReporter:
    """Return a reporter that fails the test if any of its checks failed.

    >>> def test_example(command_reporter) -> None:
    ...     command_reporter.report_boolean(True, 'fine')
    ...     assert command_reporter.passed
    """
    return PytestReporter()


@pytest.fixture
def command(
    command_reporter: PytestReporter,
) -> Generator[CommandTester, None, None]:
    """Return a fresh :class:`~testcommand.tester.CommandTester`.

    For the duration of the test it also backs the module-level functions
    (:func:`testcommand.run`, :func:`testcommand.stdout`, ...).

    >>> def test_example(command) -> None:
    ...     command.run_ok('echo', 'hello')
    ...     assert command.stdout() == b'hello\\n'
    """
    tester = CommandTester(reporter=command_reporter)
    previous = set_default_tester(tester)
    try:
        yield tester
    finally:
        set_default_tester(previous)
