"""Drain several pipes at once without letting one starve the others.

testcommand.multiplexer
~~~~~~~~~~~~~~~~~~~~~~~

Reading a child's stdout to the end and only then its stderr deadlocks as soon
as the child fills the stderr pipe buffer while the parent is still blocked on
stdout. :func:`drain` waits on every pipe with :mod:`selectors` and reads from
whichever is ready.
"""

from __future__ import annotations

import logging
import os
import selectors
import typing as t

from . import exc
from .constants import READ_CHUNK_SIZE

if t.TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)


def check_chunk_size(chunk_size: int) -> int:
    """Return *chunk_size* if it is a usable read size, else raise ValueError.

    A read of zero bytes is indistinguishable from end-of-stream.

    >>> check_chunk_size(1024)
    1024
    >>> check_chunk_size(0)
    Traceback (most recent call last):
    ...
    ValueError: chunk_size must be positive: 0
    """
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int):
        msg = f"chunk_size must be an integer: {chunk_size!r}"
        raise TypeError(msg)
    if chunk_size < 1:
        msg = f"chunk_size must be positive: {chunk_size}"
        raise ValueError(msg)
    return chunk_size


def drain(
    targets: Mapping[t.IO[bytes], bytearray],
    chunk_size: int = READ_CHUNK_SIZE,
) -> None:
    """Read every stream in *targets* to end-of-stream into its buffer.

    Each stream is closed as soon as it reports end-of-stream. Bytes are
    appended verbatim, in the order they were read.

    Parameters
    ----------
    targets : mapping
        Readable streams, each mapped to the buffer it feeds.
    chunk_size : int
        Maximum bytes per read.

    Raises
    ------
    :exc:`exc.StreamReadError`
        A read failed. Every stream still open has been closed.

    Examples
    --------
    >>> r, w = os.pipe()
    >>> _ = os.write(w, b'hello')
    >>> os.close(w)
    >>> buffer = bytearray()
    >>> drain({os.fdopen(r, 'rb', buffering=0): buffer})
    >>> bytes(buffer)
    b'hello'
    """
    check_chunk_size(chunk_size)

    with selectors.DefaultSelector() as selector:
        for stream, buffer in targets.items():
            selector.register(stream, selectors.EVENT_READ, data=buffer)

        try:
            while selector.get_map():
                for key, _ in selector.select():
                    stream = t.cast("t.IO[bytes]", key.fileobj)
                    try:
                        chunk = os.read(key.fd, chunk_size)
                    except OSError as e:
                        raise exc.StreamReadError(key.fd, reason=str(e)) from e

                    if chunk:
                        key.data.extend(chunk)
                        continue

                    logger.debug(f"end-of-stream on fd={key.fd}")
                    selector.unregister(stream)
                    stream.close()
        except BaseException:
            for key in list(selector.get_map().values()):
                selector.unregister(key.fileobj)
                t.cast("t.IO[bytes]", key.fileobj).close()
            raise
