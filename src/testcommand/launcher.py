"""Start a child process with its standard streams connected to pipes.

testcommand.launcher
~~~~~~~~~~~~~~~~~~~~

"""

from __future__ import annotations

import logging
import os
import subprocess
import typing as t

from . import exc
from .status import Spawned

if t.TYPE_CHECKING:
    import sys
    import types
    from collections.abc import Iterable, Mapping

    if sys.version_info >= (3, 11):
        from typing import Self
    else:
        from typing_extensions import Self

    from ._internal.types import CommandArg, StrPath

logger = logging.getLogger(__name__)


def normalize_command(command: Iterable[CommandArg]) -> tuple[str, ...]:
    """Return *command* as a tuple of strings.

    >>> import pathlib
    >>> normalize_command([pathlib.Path('/bin/echo'), 'hi', 3])
    ('/bin/echo', 'hi', '3')
    """
    return tuple(
        os.fspath(arg) if isinstance(arg, (str, os.PathLike)) else str(arg)
        for arg in command
    )


def format_command(argv: Iterable[str]) -> str:
    """Return *argv* joined by spaces, as used in report descriptions."""
    return " ".join(argv)


class LaunchedProcess:
    """A running child whose output and error pipes have not been drained yet.

    The parent's end of the input pipe is already closed, so the child reads
    end-of-stream from its stdin. The child must be reaped with :meth:`wait`
    exactly once; :meth:`wait` caches the status for later calls.
    """

    def __init__(
        self,
        argv: tuple[str, ...],
        process: subprocess.Popen[bytes],
    ) -> None:
        self.argv = argv
        self.process = process
        self._status: Spawned | None = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(pid={self.pid}, argv={self.argv!r})"

    @property
    def pid(self) -> int:
        """Process id of the child."""
        return self.process.pid

    @property
    def stdout(self) -> t.IO[bytes]:
        """Parent's read end of the child's output pipe."""
        return t.cast("t.IO[bytes]", self.process.stdout)

    @property
    def stderr(self) -> t.IO[bytes]:
        """Parent's read end of the child's error pipe."""
        return t.cast("t.IO[bytes]", self.process.stderr)

    @property
    def status(self) -> Spawned | None:
        """Status once reaped, ``None`` while the child has not been waited on."""
        return self._status

    def wait(self) -> Spawned:
        """Block until the child terminates and return its raw wait status."""
        if self._status is not None:
            return self._status

        _, raw = os.waitpid(self.pid, 0)
        # Popen must not reap the pid a second time.
        self.process.returncode = os.waitstatus_to_exitcode(raw)
        self._status = Spawned(raw)
        logger.debug(f"reaped pid={self.pid} raw_status={raw}")
        return self._status

    def close(self) -> None:
        """Close any pipe ends the parent still holds."""
        for stream in (self.process.stdin, self.process.stdout, self.process.stderr):
            if stream is not None and not stream.closed:
                stream.close()

    def __enter__(self) -> Self:
        """Enter the context, returning self."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        """Exit the context, closing the pipes and reaping the child."""
        self.close()
        self.wait()


def launch(
    command: Iterable[CommandArg],
    *,
    cwd: StrPath | None = None,
    env: Mapping[str, str] | None = None,
) -> LaunchedProcess:
    """Start *command* with stdin, stdout and stderr connected to pipes.

    No shell is involved: the first element is the program, resolved through
    :envvar:`PATH` unless it contains a path separator, the rest are passed
    verbatim.

    Parameters
    ----------
    command : iterable
        Program followed by its arguments.
    cwd : str or path-like, optional
        Working directory of the child, defaults to the parent's.
    env : mapping, optional
        Environment of the child, defaults to the parent's.

    Returns
    -------
    :class:`LaunchedProcess`

    Raises
    ------
    :exc:`exc.EmptyCommand`
        *command* has no elements.
    :exc:`exc.SpawnError`
        The process could not be created.

    Examples
    --------
    >>> proc = launch(['true'])
    >>> proc.close()
    >>> proc.wait().exit_code
    0

    >>> with launch(['sh', '-c', 'exit 3']) as proc:
    ...     pass
    >>> proc.status.exit_code
    3
    """
    argv = normalize_command(command)
    if not argv:
        raise exc.EmptyCommand

    try:
        process = subprocess.Popen(
            argv,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            bufsize=0,
            cwd=cwd,
            env=env,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"spawn failed for {subprocess.list2cmdline(argv)}: {e}")
        raise exc.SpawnError(argv, reason=str(e)) from e

    # Nothing is ever written to the child.
    t.cast("t.IO[bytes]", process.stdin).close()

    logger.debug(f"started pid={process.pid} argv={subprocess.list2cmdline(argv)}")
    return LaunchedProcess(argv, process)
