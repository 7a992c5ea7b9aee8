"""Run commands from asyncio code.

testcommand.asyncio
~~~~~~~~~~~~~~~~~~~

The same contract as :class:`~testcommand.runner.CommandRunner`, with both
pipes read by concurrent tasks instead of a selector loop. The two readers are
joined before the process is waited on.

>>> import asyncio
>>> async def example():
...     result = await AsyncCommandRunner().run('sh', '-c', 'echo hi; exit 4')
...     return result.stdout, result.status.exit_code
>>> asyncio.run(example())
(b'hi\\n', 4)
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import subprocess
import typing as t

from . import exc
from .constants import READ_CHUNK_SIZE
from .launcher import normalize_command
from .multiplexer import check_chunk_size
from .runner import RunResult
from .status import from_returncode

if t.TYPE_CHECKING:
    from collections.abc import Mapping

    from ._internal.types import CommandArg, StrPath

logger = logging.getLogger(__name__)


async def _read_all(stream: asyncio.StreamReader, chunk_size: int) -> bytes:
    """Read *stream* to end-of-stream in chunks of at most *chunk_size*."""
    buffer = bytearray()
    while True:
        try:
            chunk = await stream.read(chunk_size)
        except OSError as e:
            raise exc.StreamReadError(-1, reason=str(e)) from e
        if not chunk:
            return bytes(buffer)
        buffer.extend(chunk)


class AsyncCommandRunner:
    """Spawn a command, drain both pipes concurrently, and await its exit.

    Parameters
    ----------
    chunk_size : int
        Maximum bytes read from a pipe at a time, at least 1.
    cwd : str or path-like, optional
        Working directory for every child, defaults to the caller's.
    env : mapping, optional
        Environment for every child, defaults to the caller's.
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

    async def run(self, *command: CommandArg) -> RunResult:
        """Run *command*, returning once it has exited and closed its streams.

        Raises
        ------
        :exc:`exc.EmptyCommand`
            No program given.
        :exc:`exc.StreamReadError`
            Reading a pipe failed. The child has been killed and awaited
            before this propagates.
        """
        argv = normalize_command(command)
        if not argv:
            raise exc.EmptyCommand

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self.cwd,
                env=self.env,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug(f"spawn failed for {subprocess.list2cmdline(argv)}: {e}")
            return RunResult(argv=argv)

        logger.debug(f"started pid={process.pid} argv={subprocess.list2cmdline(argv)}")

        assert process.stdin is not None
        assert process.stdout is not None
        assert process.stderr is not None
        # Nothing is ever written to the child.
        process.stdin.close()

        readers = [
            asyncio.ensure_future(_read_all(process.stdout, self.chunk_size)),
            asyncio.ensure_future(_read_all(process.stderr, self.chunk_size)),
        ]
        try:
            stdout, stderr = await asyncio.gather(*readers)
        except BaseException as e:
            # gather() leaves the other reader running when one fails.
            for reader in readers:
                reader.cancel()
            await asyncio.gather(*readers, return_exceptions=True)
            # The pipes are no longer read, a still running child could block.
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()
            if isinstance(e, exc.StreamReadError):
                logger.exception(f"Exception for {subprocess.list2cmdline(argv)}")
            raise

        returncode = await process.wait()

        status = from_returncode(returncode)
        logger.debug(
            f"pid={process.pid} {subprocess.list2cmdline(argv)}: {status}, "
            f"stdout={len(stdout)} bytes, stderr={len(stderr)} bytes",
        )
        return RunResult(
            argv=argv,
            stdout=stdout,
            stderr=stderr,
            status=status,
            pid=process.pid,
        )


async def arun_command(*command: CommandArg) -> RunResult:
    """Run *command* with a default :class:`AsyncCommandRunner`."""
    return await AsyncCommandRunner().run(*command)
