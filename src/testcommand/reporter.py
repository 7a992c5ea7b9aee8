"""Reporters turn the checks made by a tester into pass/fail outcomes.

testcommand.reporter
~~~~~~~~~~~~~~~~~~~~

Any object implementing :class:`Reporter` can be handed to a
:class:`~testcommand.tester.CommandTester`. The pytest plugin ships its own
(:class:`~testcommand.pytest_plugin.PytestReporter`).
"""

from __future__ import annotations

import dataclasses
import logging
import typing as t
from typing import Protocol

logger = logging.getLogger(__name__)


class Reporter(Protocol):
    """Receiver of the checks made while running commands."""

    def report_boolean(self, passed: bool, description: str) -> bool:
        """Record a check that passed or failed on its own."""
        ...

    def report_equality(
        self,
        actual: t.Any,
        expected: t.Any,
        description: str,
    ) -> bool:
        """Record a check that *actual* equals *expected*."""
        ...


@dataclasses.dataclass(frozen=True)
class Outcome:
    """Result of a single check.

    >>> failed = Outcome(False, "rc", actual=256, expected=0, is_equality=True)
    >>> failed.diagnostic
    'got: 256, expected: 0'
    """

    passed: bool
    description: str
    actual: t.Any = None
    expected: t.Any = None
    is_equality: bool = dataclasses.field(default=False, repr=False)

    @property
    def diagnostic(self) -> str | None:
        """Explanation of a failed equality check."""
        if self.passed or not self.is_equality:
            return None
        return f"got: {self.actual!r}, expected: {self.expected!r}"

    def __str__(self) -> str:
        line = f"{'ok' if self.passed else 'not ok'} - {self.description}"
        if self.diagnostic is not None:
            line += f" ({self.diagnostic})"
        return line


class LoggingReporter:
    """Log every check and keep nothing.

    Backs the process-wide default tester, whose lifetime is the process.

    >>> LoggingReporter().report_equality(0, 0, "Check return from 'true' is 0")
    True
    """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"

    def record(self, outcome: Outcome) -> bool:
        """Log *outcome* and return whether it passed."""
        if outcome.passed:
            logger.debug(str(outcome))
        else:
            logger.warning(str(outcome))
        return outcome.passed

    def report_boolean(self, passed: bool, description: str) -> bool:
        """Record a check that passed or failed on its own."""
        return self.record(Outcome(passed=bool(passed), description=description))

    def report_equality(
        self,
        actual: t.Any,
        expected: t.Any,
        description: str,
    ) -> bool:
        """Record a check that *actual* equals *expected*."""
        return self.record(
            Outcome(
                passed=actual == expected,
                description=description,
                actual=actual,
                expected=expected,
                is_equality=True,
            ),
        )


class RecordingReporter(LoggingReporter):
    """Keep every outcome, in the order checks were made.

    >>> reporter = RecordingReporter()
    >>> reporter.report_boolean(True, "Can run 'true'")
    True
    >>> reporter.report_equality(256, 0, "Check return from 'false' is 0")
    False
    >>> for outcome in reporter.outcomes:
    ...     print(outcome)
    ok - Can run 'true'
    not ok - Check return from 'false' is 0 (got: 256, expected: 0)
    >>> reporter.passed
    False
    """

    def __init__(self) -> None:
        self.outcomes: list[Outcome] = []

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"outcomes={len(self.outcomes)}, failures={len(self.failures)})"
        )

    def record(self, outcome: Outcome) -> bool:
        """Store *outcome* and return whether it passed."""
        self.outcomes.append(outcome)
        return super().record(outcome)

    @property
    def failures(self) -> list[Outcome]:
        """Outcomes that did not pass."""
        return [o for o in self.outcomes if not o.passed]

    @property
    def passed(self) -> bool:
        """Return True if no recorded check failed."""
        return not self.failures

    def clear(self) -> None:
        """Forget every recorded outcome."""
        self.outcomes.clear()
