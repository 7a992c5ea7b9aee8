"""Process termination status.

testcommand.status
~~~~~~~~~~~~~~~~~~

A run ends in one of two states: the child was started and reaped
(:class:`Spawned`, holding the raw :func:`os.waitpid` status), or it could
never be started (:data:`NOT_SPAWNED`).

>>> status = Spawned(encode_exit_code(2))
>>> status.raw
512
>>> status.exit_code
2
>>> NOT_SPAWNED.raw
-1
"""

from __future__ import annotations

import dataclasses
import numbers
import os
import signal
import typing as t
from abc import ABC, abstractmethod

from . import exc
from .constants import MAX_EXIT_CODE, NOT_SPAWNED_RAW_STATUS


class ExitStatus(ABC):
    """Outcome of a run as far as process termination is concerned."""

    #: Wait status in :func:`os.waitpid` encoding, or ``-1`` if never started
    raw: int
    spawned: t.ClassVar[bool]

    @property
    @abstractmethod
    def exited(self) -> bool:
        """Return True if the process exited normally."""
        ...

    @property
    @abstractmethod
    def signaled(self) -> bool:
        """Return True if the process was terminated by a signal."""
        ...


@dataclasses.dataclass(frozen=True)
class Spawned(ExitStatus):
    """Status of a process that was started and reaped.

    >>> Spawned(9).signaled, Spawned(9).term_signal
    (True, 9)
    >>> Spawned(9).returncode
    -9
    >>> Spawned(256).exit_code, Spawned(256).returncode
    (1, 1)
    """

    raw: int
    spawned: t.ClassVar[bool] = True

    @property
    def exited(self) -> bool:
        """Return True if the process exited normally."""
        return os.WIFEXITED(self.raw)

    @property
    def signaled(self) -> bool:
        """Return True if the process was terminated by a signal."""
        return os.WIFSIGNALED(self.raw)

    @property
    def exit_code(self) -> int | None:
        """Exit code (0-255) of a normal exit, ``None`` if killed by a signal."""
        if not self.exited:
            return None
        return os.WEXITSTATUS(self.raw)

    @property
    def term_signal(self) -> int | None:
        """Number of the terminating signal, ``None`` for a normal exit."""
        if not self.signaled:
            return None
        return os.WTERMSIG(self.raw)

    @property
    def core_dumped(self) -> bool:
        """Return True if the terminating signal produced a core dump."""
        return self.signaled and os.WCOREDUMP(self.raw)

    @property
    def returncode(self) -> int:
        """Status in :attr:`subprocess.Popen.returncode` convention."""
        return os.waitstatus_to_exitcode(self.raw)

    def __str__(self) -> str:
        if self.signaled:
            signum = t.cast("int", self.term_signal)
            try:
                name = signal.Signals(signum).name
            except ValueError:
                name = "unknown"
            return f"killed by signal {signum} ({name})"
        return f"exited with code {self.exit_code}"


@dataclasses.dataclass(frozen=True)
class NotSpawned(ExitStatus):
    """Status of a command that could not be started."""

    raw: int = dataclasses.field(default=NOT_SPAWNED_RAW_STATUS, init=False)
    spawned: t.ClassVar[bool] = False

    @property
    def exited(self) -> bool:
        """Return False, the process never ran."""
        return False

    @property
    def signaled(self) -> bool:
        """Return False, the process never ran."""
        return False

    @property
    def exit_code(self) -> int:
        """Raise :exc:`~testcommand.exc.StatusNotAvailable`."""
        raise exc.StatusNotAvailable

    @property
    def term_signal(self) -> int:
        """Raise :exc:`~testcommand.exc.StatusNotAvailable`."""
        raise exc.StatusNotAvailable

    def __str__(self) -> str:
        return "could not be started"


#: The status of every command that could not be started
NOT_SPAWNED = NotSpawned()


def is_exit_code(value: object) -> bool:
    """Return True if *value* is a whole number in the range of exit codes.

    Strings never qualify, they are command arguments.

    >>> is_exit_code(2), is_exit_code(2.0), is_exit_code(2.5)
    (True, True, False)
    >>> is_exit_code(256), is_exit_code(-1), is_exit_code("2"), is_exit_code(True)
    (False, False, False, False)
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return 0 <= value <= MAX_EXIT_CODE and int(value) == value


def encode_exit_code(code: int) -> int:
    """Return the raw wait status of a process that exited with *code*.

    >>> encode_exit_code(0), encode_exit_code(1), encode_exit_code(255)
    (0, 256, 65280)
    """
    if not is_exit_code(code):
        msg = f"Exit code must be an integer from 0 to {MAX_EXIT_CODE}: {code!r}"
        raise ValueError(msg)
    return int(code) << 8


def from_returncode(returncode: int) -> Spawned:
    """Rebuild a raw status from a :mod:`subprocess`-style return code.

    The core dump flag is not recoverable and is left unset.

    >>> from_returncode(3).raw
    768
    >>> from_returncode(-15).term_signal
    15
    """
    if returncode < 0:
        return Spawned(-returncode)
    return Spawned(encode_exit_code(returncode))
