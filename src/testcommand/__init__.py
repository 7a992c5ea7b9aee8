"""testcommand, test external commands (nearly) as easily as loaded modules."""

from .__about__ import (
    __author__,
    __copyright__,
    __description__,
    __email__,
    __license__,
    __package_name__,
    __title__,
    __version__,
)
from .reporter import LoggingReporter, Outcome, RecordingReporter, Reporter
from .runner import CommandRunner, RunResult, run_command
from .status import NOT_SPAWNED, ExitStatus, NotSpawned, Spawned
from .tester import (
    CommandTester,
    exit_status,
    last_result,
    rc,
    run,
    run_ok,
    stderr,
    stdout,
)

__all__ = (
    "NOT_SPAWNED",
    "CommandRunner",
    "CommandTester",
    "ExitStatus",
    "LoggingReporter",
    "NotSpawned",
    "Outcome",
    "RecordingReporter",
    "Reporter",
    "RunResult",
    "Spawned",
    "__author__",
    "__copyright__",
    "__description__",
    "__email__",
    "__license__",
    "__package_name__",
    "__title__",
    "__version__",
    "exit_status",
    "last_result",
    "rc",
    "run",
    "run_command",
    "run_ok",
    "stderr",
    "stdout",
)
