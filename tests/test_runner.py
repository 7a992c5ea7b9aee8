"""Tests for testcommand.runner."""

from __future__ import annotations

import os
import signal
import typing as t

import pytest

from testcommand import constants, exc, runner
from testcommand.runner import CommandRunner, RunResult, run_command
from testcommand.status import NOT_SPAWNED
from tests.helpers import interleaved_expected, interleaved_writer, python_command

if t.TYPE_CHECKING:
    import pathlib

    from testcommand.launcher import LaunchedProcess


@pytest.mark.parametrize("code", [0, 1, 2, 127, 255])
def test_run_exit_code(code: int) -> None:
    """A quiet command exiting normally leaves its code and empty streams."""
    result = CommandRunner().run(*python_command(f"raise SystemExit({code})"))

    assert result.spawned
    assert result.status.exited
    assert result.status.exit_code == code
    assert result.rc == code << 8
    assert result.stdout == b""
    assert result.stderr == b""
    assert result.pid is not None


@pytest.mark.parametrize("signum", [signal.SIGKILL, signal.SIGTERM, signal.SIGHUP])
def test_run_killed_by_signal(signum: int) -> None:
    """A command killed by a signal reports the signal, not an exit code."""
    command = python_command(
        f"""
        import os
        os.kill(os.getpid(), {int(signum)})
        """,
    )
    result = CommandRunner().run(*command)

    assert result.spawned
    assert result.rc != NOT_SPAWNED.raw
    assert result.status.signaled
    assert result.status.term_signal == signum
    assert result.status.exit_code is None


def test_run_separates_streams() -> None:
    """stdout and stderr are captured apart, in write order."""
    result = run_command(
        "sh",
        "-c",
        "echo out1; echo err1 >&2; echo out2; echo err2 >&2",
    )

    assert result.stdout == b"out1\nout2\n"
    assert result.stderr == b"err1\nerr2\n"
    assert result.status.exit_code == 0


@pytest.mark.parametrize("rounds", [1, 10, 100])
def test_run_interleaved_writes(rounds: int) -> None:
    """Alternating 2000-byte writes arrive whole and in order on each stream."""
    result = CommandRunner().run(*interleaved_writer(rounds))
    expected_out, expected_err = interleaved_expected(rounds)

    assert len(result.stdout) == 2000 * rounds
    assert result.stdout == expected_out
    assert result.stderr == expected_err


def test_run_stderr_flood_before_stdout() -> None:
    """A child filling stderr before writing stdout does not deadlock."""
    command = python_command(
        """
        import os
        os.write(2, b"e" * 1024 * 1024)
        os.write(1, b"o" * 1024 * 1024)
        """,
    )
    result = CommandRunner().run(*command)

    assert result.stdout == b"o" * 1024 * 1024
    assert result.stderr == b"e" * 1024 * 1024


def test_run_bytes_are_verbatim() -> None:
    """Output is kept as raw bytes, undecodable ones included."""
    command = python_command(
        r"""
        import os
        os.write(1, b"\xff\x00\r\n")
        """,
    )
    result = CommandRunner().run(*command)

    assert result.stdout == b"\xff\x00\r\n"
    assert result.stdout_text == "\\xff\x00\r\n"
    assert result.stderr_text == ""


def test_run_missing_program() -> None:
    """A command that cannot be started returns the sentinel without raising."""
    result = CommandRunner().run("/nonexistent/testcommand-program", "arg")

    assert result == RunResult(argv=("/nonexistent/testcommand-program", "arg"))
    assert result.status is NOT_SPAWNED
    assert result.rc == -1
    assert not result.spawned
    assert result.stdout == b""
    assert result.stderr == b""
    assert result.pid is None


def test_run_missing_program_skips_drain(monkeypatch: pytest.MonkeyPatch) -> None:
    """Nothing is read when the command never started."""

    def unexpected_drain(*args: t.Any, **kwargs: t.Any) -> None:
        pytest.fail("drain() called for a command that was not started")

    monkeypatch.setattr(runner, "drain", unexpected_drain)
    assert not CommandRunner().run("/nonexistent/testcommand-program").spawned


def test_run_empty_command() -> None:
    """Running nothing is a usage error."""
    with pytest.raises(exc.EmptyCommand):
        CommandRunner().run()


def test_run_read_error_reaps_child(monkeypatch: pytest.MonkeyPatch) -> None:
    """A read failure propagates only after the child has been reaped."""
    launched: list[LaunchedProcess] = []
    real_launch = runner.launch

    def recording_launch(*args: t.Any, **kwargs: t.Any) -> LaunchedProcess:
        process = real_launch(*args, **kwargs)
        launched.append(process)
        return process

    def failing_drain(targets: t.Any, chunk_size: int) -> None:
        for stream in targets:
            stream.close()
        raise exc.StreamReadError(-1, reason="simulated")

    monkeypatch.setattr(runner, "launch", recording_launch)
    monkeypatch.setattr(runner, "drain", failing_drain)

    with pytest.raises(exc.StreamReadError):
        CommandRunner().run(*python_command("print('hello')"))

    (process,) = launched
    assert process.status is not None
    assert process.process.returncode is not None


def test_run_fresh_result_per_call() -> None:
    """The runner keeps nothing between calls."""
    engine = CommandRunner()
    first = engine.run("echo", "one")
    second = engine.run("echo", "two")

    assert first.stdout == b"one\n"
    assert second.stdout == b"two\n"
    assert first is not second


def test_run_cwd_and_env(tmp_path: pathlib.Path) -> None:
    """Runner-wide cwd and env reach every child."""
    engine = CommandRunner(
        cwd=tmp_path,
        env={**os.environ, "TESTCOMMAND_VALUE": "configured"},
    )
    result = engine.run(
        *python_command(
            """
            import os
            print(os.path.basename(os.getcwd()), os.environ["TESTCOMMAND_VALUE"])
            """,
        ),
    )

    assert result.stdout_text.split() == [tmp_path.name, "configured"]


def test_run_small_chunk_size() -> None:
    """A tiny chunk size changes nothing but the number of reads."""
    result = CommandRunner(chunk_size=3).run(*interleaved_writer(5))

    assert (result.stdout, result.stderr) == interleaved_expected(5)


def test_runner_uses_configured_chunk_size() -> None:
    """Without an explicit size the runner reads in configured chunks."""
    assert CommandRunner().chunk_size == constants.READ_CHUNK_SIZE
    assert constants.READ_CHUNK_SIZE == int(
        os.getenv("TESTCOMMAND_READ_CHUNK_SIZE", 1024),
    )


@pytest.mark.parametrize("chunk_size", [0, -1])
def test_runner_rejects_chunk_size_before_spawning(
    monkeypatch: pytest.MonkeyPatch,
    chunk_size: int,
) -> None:
    """A read size that cannot make progress is refused before any child runs."""
    launched: list[t.Any] = []
    monkeypatch.setattr(runner, "launch", lambda *a, **kw: launched.append(a))

    with pytest.raises(ValueError, match="chunk_size"):
        CommandRunner(chunk_size=chunk_size)

    assert launched == []


def test_run_closes_pipes_when_drain_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    """An unexpected drain failure cannot leave the reap blocked on a full pipe."""

    def broken_drain(targets: t.Any, chunk_size: int) -> None:
        msg = "broken"
        raise RuntimeError(msg)

    monkeypatch.setattr(runner, "drain", broken_drain)
    command = python_command(
        """
        import os
        os.write(1, b'x' * 1024 * 1024)
        """,
    )

    with pytest.raises(RuntimeError, match="broken"):
        CommandRunner().run(*command)
