"""Helpers for testcommand tests."""

from __future__ import annotations

import sys
import textwrap


def python_command(code: str) -> list[str]:
    """Return a command running *code* in a fresh Python interpreter."""
    return [sys.executable, "-c", textwrap.dedent(code)]


def interleaved_writer(rounds: int, size: int = 2000) -> list[str]:
    """Return a command alternating *size*-byte writes to stdout and stderr."""
    return python_command(
        f"""
        import os
        for i in range({rounds}):
            os.write(1, b"%04d" % i * ({size} // 4))
            os.write(2, b"E%03d" % i * ({size} // 4))
        """,
    )


def interleaved_expected(rounds: int, size: int = 2000) -> tuple[bytes, bytes]:
    """Return the stdout and stderr :func:`interleaved_writer` produces."""
    out = b"".join(b"%04d" % i * (size // 4) for i in range(rounds))
    err = b"".join(b"E%03d" % i * (size // 4) for i in range(rounds))
    return out, err
