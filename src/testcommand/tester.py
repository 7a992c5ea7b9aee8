"""Run commands and check on them, remembering the last run.

testcommand.tester
~~~~~~~~~~~~~~~~~~

A :class:`CommandTester` keeps a single slot, the result of the most recent
:meth:`~CommandTester.run`. Every run overwrites the whole slot, so copy what
you need before running the next command.

The module-level functions act on a process-wide default tester:

>>> run('sh', '-c', 'echo hello; exit 1')
256
>>> stdout(), stderr(), rc()
(b'hello\\n', b'', 256)
>>> run_ok(1, 'sh', '-c', 'exit 1')
True

Neither the slot nor the default tester is safe to share between threads.
"""

from __future__ import annotations

import logging
import typing as t

from .launcher import format_command, normalize_command
from .reporter import LoggingReporter, RecordingReporter
from .runner import CommandRunner, RunResult
from .status import encode_exit_code, is_exit_code

if t.TYPE_CHECKING:
    from ._internal.types import CommandArg
    from .reporter import Reporter
    from .status import ExitStatus

logger = logging.getLogger(__name__)


def split_expected_exit_code(
    args: tuple[t.Any, ...],
) -> tuple[int, tuple[t.Any, ...]]:
    """Split an optional leading exit code off the arguments of ``run_ok``.

    The first argument is taken as the expected exit code only if it is a
    whole number from 0 to 255. Otherwise it stays part of the command and the
    expected exit code is 0.

    >>> split_expected_exit_code((2, 'false'))
    (2, ('false',))
    >>> split_expected_exit_code(('true',))
    (0, ('true',))
    >>> split_expected_exit_code((300, 'cmd'))
    (0, (300, 'cmd'))
    """
    if args and is_exit_code(args[0]):
        return int(args[0]), args[1:]
    return 0, args


class CommandTester:
    """Run commands, report on them, and remember the most recent result.

    Parameters
    ----------
    reporter : :class:`~testcommand.reporter.Reporter`, optional
        Receives the checks; a :class:`~testcommand.reporter.RecordingReporter`
        by default.
    runner : :class:`~testcommand.runner.CommandRunner`, optional
        Engine that runs the commands.

    Examples
    --------
    >>> tester = CommandTester()
    >>> tester.run('echo', 'has this output')
    0
    >>> b'has this output' in tester.stdout()
    True
    >>> tester.run('/nonexistent/program')
    -1
    >>> [o.passed for o in tester.reporter.outcomes]
    [True, False]
    """

    def __init__(
        self,
        reporter: Reporter | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        self.reporter: Reporter = (
            reporter if reporter is not None else RecordingReporter()
        )
        self.runner = runner if runner is not None else CommandRunner()
        self.last = RunResult()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(last={self.last!r})"

    def run(self, *command: CommandArg) -> int:
        """Run *command* and return its raw wait status.

        Resets stdout, stderr and status before anything else. Counts as one
        check: whether the command could be started at all. A command that
        cannot be started leaves status ``-1``.
        """
        argv = normalize_command(command)
        self.last = RunResult(argv=argv)

        result = self.runner.run(*argv)
        self.reporter.report_boolean(
            result.spawned,
            f"Can run '{format_command(argv)}'",
        )
        self.last = result
        return result.rc

    def run_ok(self, *args: t.Any) -> bool:
        """Run a command and check that it exited normally with the expected code.

        If the first argument is an integer from 0 to 255 it is the expected
        exit code, otherwise 0 is expected. Only a normal exit can match; a
        command killed by a signal always fails the check.

        Counts as two checks: the one made by :meth:`run` and the comparison
        of the raw status against the expected code.

        Returns
        -------
        bool
            Whether the status check passed.
        """
        code, command = split_expected_exit_code(args)
        wanted = encode_exit_code(code)
        self.run(*command)
        return self.reporter.report_equality(
            self.rc(),
            wanted,
            f"Check return from '{format_command(self.last.argv)}' is {wanted}",
        )

    def stdout(self) -> bytes:
        """Return the last run's standard output."""
        return self.last.stdout

    def stderr(self) -> bytes:
        """Return the last run's standard error."""
        return self.last.stderr

    def rc(self) -> int:
        """Return the last run's raw wait status, ``-1`` if it never started."""
        return self.last.rc

    def status(self) -> ExitStatus:
        """Return the last run's status."""
        return self.last.status


#: Checks made through the module-level functions are logged, not kept
_default_tester = CommandTester(reporter=LoggingReporter())


def get_default_tester() -> CommandTester:
    """Return the tester behind the module-level functions."""
    return _default_tester


def set_default_tester(tester: CommandTester) -> CommandTester:
    """Install *tester* behind the module-level functions, returning the old one."""
    global _default_tester
    previous, _default_tester = _default_tester, tester
    return previous


def run(*command: CommandArg) -> int:
    """Run *command* with the default tester, see :meth:`CommandTester.run`."""
    return _default_tester.run(*command)


def run_ok(*args: t.Any) -> bool:
    """Check a command's exit code, see :meth:`CommandTester.run_ok`."""
    return _default_tester.run_ok(*args)


def stdout() -> bytes:
    """Return the last run's standard output."""
    return _default_tester.stdout()


def stderr() -> bytes:
    """Return the last run's standard error."""
    return _default_tester.stderr()


def rc() -> int:
    """Return the last run's raw wait status."""
    return _default_tester.rc()


def exit_status() -> ExitStatus:
    """Return the last run's status."""
    return _default_tester.status()


def last_result() -> RunResult:
    """Return the last run's complete result."""
    return _default_tester.last
