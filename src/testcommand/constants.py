"""Constants for testcommand.

Values marked as configurable are read from the environment once, at import.
"""

from __future__ import annotations

import os

#: Bytes requested per read from a ready pipe.
#: Can be configured via :envvar:`TESTCOMMAND_READ_CHUNK_SIZE` environment variable
#: Defaults to 1024 bytes
READ_CHUNK_SIZE = int(os.getenv("TESTCOMMAND_READ_CHUNK_SIZE", 1024))

#: Raw status reported for a command that could not be started. A real wait
#: status is never negative.
NOT_SPAWNED_RAW_STATUS = -1

#: Highest exit code a process can report
MAX_EXIT_CODE = 255

#: Encoding used by the ``*_text`` helpers on run results
DEFAULT_ENCODING = "utf-8"
