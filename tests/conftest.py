"""Fixtures for testcommand tests."""

from __future__ import annotations

import typing as t

import pytest

from testcommand.reporter import RecordingReporter
from testcommand.tester import CommandTester, set_default_tester

if t.TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def reporter() -> RecordingReporter:
    """Return a reporter that only records outcomes."""
    return RecordingReporter()


@pytest.fixture
def tester(reporter: RecordingReporter) -> CommandTester:
    """Return a :class:`CommandTester` reporting into :func:`reporter`."""
    return CommandTester(reporter=reporter)


@pytest.fixture
def default_tester(tester: CommandTester) -> Generator[CommandTester, None, None]:
    """Install :func:`tester` behind the module-level functions."""
    previous = set_default_tester(tester)
    yield tester
    set_default_tester(previous)
