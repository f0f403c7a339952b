"""
=============================================================================
BODY TRANSMITTER
=============================================================================

Streams a resolved resource to the output sink. The content kind picks one
of two framing strategies:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        FRAMING STRATEGIES                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   TEXT (HTML, UNKNOWN)                                              │
    │   ────────────────────                                              │
    │   while chunk := readline(limit):      one line, or `limit` bytes   │
    │       write(chunk)                     of a very long line          │
    │                                                                      │
    │   BINARY (GIF, JPEG, MP3, PDF)                                      │
    │   ────────────────────────────                                      │
    │   size = seek(END); tell(); seek(0)    probe the size up front      │
    │   while sent < size:                                                 │
    │       chunk = read(min(C, size - sent))                             │
    │       short chunk? → ReadError         file shrank under us         │
    │       write(chunk)                                                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Nothing is buffered beyond one chunk, so a 700 MB MP3 costs the same memory
as a 1 KB page.

TEXT FRAMING BOUNDARY: an older loop checked for end-of-file only AFTER a
read, which produced one extra zero-length write when a file ended exactly
on a chunk boundary. Here an empty read ends the loop before any write, so
that empty write never happens.

The resource is always closed before returning, whichever way we leave.

=============================================================================
"""

import io
import logging
from typing import BinaryIO, Protocol

from ..errors import InternalError, ReadError
from .mime_types import ContentKind
from .response import OutputSink, write_chunk


logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024


class ResourceOpener(Protocol):
    def open(self, local_path: str) -> BinaryIO:
        ...


def send_text(sink: OutputSink, resource: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    """
    Send a resource line by line.

    Each read returns at most ``chunk_size`` bytes and never crosses a
    newline. Chunks are written verbatim.

    Returns:
        Total bytes written.
    """
    total = 0
    while True:
        chunk = resource.readline(chunk_size)
        if not chunk:
            break
        total += write_chunk(sink, chunk)
    return total


def probe_size(resource: BinaryIO) -> int:
    """Size of a seekable resource, leaving the position at the start."""
    resource.seek(0, io.SEEK_END)
    size = resource.tell()
    resource.seek(0, io.SEEK_SET)
    return size


def send_binary(sink: OutputSink, resource: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE) -> int:
    """
    Send a resource in fixed-size chunks.

    Returns:
        Total bytes written, equal to the probed size.

    Raises:
        ReadError: A read came back short before the probed size was reached.
    """
    size = probe_size(resource)

    total = 0
    while total < size:
        expected = min(chunk_size, size - total)
        chunk = resource.read(expected)
        if len(chunk) < expected:
            raise ReadError(
                f"Short read: got {len(chunk)} of {expected} bytes "
                f"at offset {total} (size {size})"
            )
        total += write_chunk(sink, chunk)
    return total


def transmit_body(
    sink: OutputSink,
    resources: ResourceOpener,
    local_path: str,
    kind: ContentKind,
    text_chunk_size: int = DEFAULT_CHUNK_SIZE,
    binary_chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int:
    """
    Stream a resource using the framing implied by its kind.

    Args:
        sink: Output channel.
        resources: Collaborator that opens resources by local path.
        local_path: Final local path from the status selector.
        kind: Final content kind from the status selector.
        text_chunk_size: Line read limit for text framing.
        binary_chunk_size: Chunk size for binary framing.

    Returns:
        Total body bytes written.

    Raises:
        InternalError: ``kind`` has no framing (ContentKind.NONE).
        ReadError: The resource cannot be opened or ends early.
        WriteError: The sink fails.
    """
    if kind in (ContentKind.HTML, ContentKind.UNKNOWN):
        send = send_text
        chunk_size = text_chunk_size
    elif kind.binary:
        send = send_binary
        chunk_size = binary_chunk_size
    else:
        raise InternalError(f"No body framing for content kind {kind.name}")

    try:
        resource = resources.open(local_path)
    except OSError as e:
        raise ReadError(f"Cannot open {local_path}: {e}") from e

    with resource:
        try:
            sent = send(sink, resource, chunk_size)
        except OSError as e:
            # Sink failures already surface as WriteError, so this is the file
            raise ReadError(f"Read failed on {local_path}: {e}") from e

    logger.debug(f"Sent {sent} body bytes of {local_path} ({kind.name})")
    return sent
