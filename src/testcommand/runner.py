"""Run a command to completion and collect everything it produced.

testcommand.runner
~~~~~~~~~~~~~~~~~~

:class:`CommandRunner` holds no per-run state: every call returns a fresh
:class:`RunResult`, so one runner may be shared freely.

>>> result = run_command('sh', '-c', 'echo out; echo err >&2; exit 3')
>>> result.stdout, result.stderr
(b'out\\n', b'err\\n')
>>> result.status.exit_code
3
"""

from __future__ import annotations

import dataclasses
import logging
import subprocess
import typing as t

from . import exc
from .constants import DEFAULT_ENCODING, READ_CHUNK_SIZE
from .launcher import launch, normalize_command
from .multiplexer import check_chunk_size, drain
from .status import NOT_SPAWNED, ExitStatus

if t.TYPE_CHECKING:
    from collections.abc import Mapping

    from ._internal.types import CommandArg, StrPath

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class RunResult:
    """Everything one run of a command left behind.

    Attributes
    ----------
    argv : tuple[str, ...]
        The command as it was passed to the process.
    stdout : bytes
        Exactly the bytes the child wrote to its standard output.
    stderr : bytes
        Exactly the bytes the child wrote to its standard error.
    status : :class:`~testcommand.status.ExitStatus`
        How the child terminated, or :data:`~testcommand.status.NOT_SPAWNED`.
    pid : int, optional
        Process id of the child, ``None`` if it never started.
    """

    argv: tuple[str, ...] = ()
    stdout: bytes = b""
    stderr: bytes = b""
    status: ExitStatus = NOT_SPAWNED
    pid: int | None = None

    @property
    def spawned(self) -> bool:
        """Return True if the child process was started."""
        return self.status.spawned

    @property
    def rc(self) -> int:
        """Raw wait status, ``-1`` if the child never started."""
        return self.status.raw

    @property
    def stdout_text(self) -> str:
        """Standard output decoded, undecodable bytes backslash-escaped."""
        return self.stdout.decode(DEFAULT_ENCODING, errors="backslashreplace")

    @property
    def stderr_text(self) -> str:
        """Standard error decoded, undecodable bytes backslash-escaped."""
        return self.stderr.decode(DEFAULT_ENCODING, errors="backslashreplace")


class CommandRunner:
    """Spawn a command, drain its output and error pipes, and reap it.

    Parameters
    ----------
    chunk_size : int
        Maximum bytes read from a pipe at a time, at least 1.
    cwd : str or path-like, optional
        Working directory for every child, defaults to the caller's.
    env : mapping, optional
        Environment for every child, defaults to the caller's.

    Examples
    --------
    >>> runner = CommandRunner()
    >>> runner.run('echo', 'hi').stdout
    b'hi\\n'

    >>> runner.run('/nonexistent/program').status
    NotSpawned(raw=-1)
    """

    def __init__(
        self,
        chunk_size: int = READ_CHUNK_SIZE,
        cwd: StrPath | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.chunk_size = check_chunk_size(chunk_size)
        self.cwd = cwd
        self.env = env

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(chunk_size={self.chunk_size})"

    def run(self, *command: CommandArg) -> RunResult:
        """Run *command* and block until it has exited and closed its streams.

        A command that cannot be started yields a result with empty output and
        :data:`~testcommand.status.NOT_SPAWNED` instead of raising.

        Raises
        ------
        :exc:`exc.EmptyCommand`
            No program given.
        :exc:`exc.StreamReadError`
            Reading a pipe failed. The child has been reaped before this
            propagates.
        """
        argv = normalize_command(command)
        try:
            process = launch(argv, cwd=self.cwd, env=self.env)
        except exc.SpawnError:
            return RunResult(argv=argv)

        stdout = bytearray()
        stderr = bytearray()
        try:
            drain({process.stdout: stdout, process.stderr: stderr}, self.chunk_size)
        except exc.StreamReadError:
            logger.exception(f"Exception for {subprocess.list2cmdline(argv)}")
            raise
        finally:
            process.close()
            status = process.wait()

        logger.debug(
            f"pid={process.pid} {subprocess.list2cmdline(argv)}: {status}, "
            f"stdout={len(stdout)} bytes, stderr={len(stderr)} bytes",
        )

        return RunResult(
            argv=argv,
            stdout=bytes(stdout),
            stderr=bytes(stderr),
            status=status,
            pid=process.pid,
        )


#: Runner used by :func:`run_command`
default_runner = CommandRunner()


def run_command(*command: CommandArg) -> RunResult:
    """Run *command* with the default :class:`CommandRunner`."""
    return default_runner.run(*command)
