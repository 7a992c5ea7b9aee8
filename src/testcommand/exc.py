"""Provide exceptions used by testcommand.

testcommand.exc
~~~~~~~~~~~~~~~

Notes
-----
Exceptions in this module inherit from :exc:`TestCommandException`. Only
:exc:`StreamReadError` and :exc:`EmptyCommand` ever escape a run; a
:exc:`SpawnError` is turned into a failed report and a
:data:`~testcommand.status.NOT_SPAWNED` status by the runner.
"""

from __future__ import annotations

import typing as t

if t.TYPE_CHECKING:
    from collections.abc import Sequence


class TestCommandException(Exception):
    """Base exception for all testcommand errors."""

    __test__ = False


class EmptyCommand(TestCommandException, ValueError):
    """Raised if a command without a program is passed to the launcher."""

    def __init__(self, *args: object) -> None:
        super().__init__("Command must name a program to run")


class SpawnError(TestCommandException):
    """Raised if the child process could not be created.

    The underlying :exc:`OSError` (missing executable, permission denied,
    resource limits) is chained as ``__cause__``.
    """

    def __init__(self, argv: Sequence[str], reason: str | None = None) -> None:
        self.argv = tuple(argv)
        msg = f"Could not run {' '.join(self.argv)!r}"
        if reason is not None:
            msg += f": {reason}"
        super().__init__(msg)


class StreamReadError(TestCommandException):
    """Raised if reading a child's output pipe failed with something but EOF."""

    def __init__(self, fd: int, reason: str | None = None) -> None:
        self.fd = fd
        msg = f"Read from descriptor {fd} failed"
        if reason is not None:
            msg += f": {reason}"
        super().__init__(msg)


class StatusNotAvailable(TestCommandException):
    """Raised if exit details are requested from a process that never started."""

    def __init__(self, *args: object) -> None:
        super().__init__("Process was never started, no exit status available")
