"""Internal type annotations for command arguments.

Note
----
This is an internal API not covered by versioning policy.
"""

from __future__ import annotations

import typing as t

if t.TYPE_CHECKING:
    from os import PathLike
    from typing import TypeAlias

#: A program name or path, as accepted by :func:`os.fspath`.
StrPath: TypeAlias = "str | PathLike[str]"

#: Anything accepted as a command element. Numbers are ``str()``-ed.
CommandArg: TypeAlias = "StrPath | int | float"
