"""
=============================================================================
HTTP RESPONSE HEADER BUILDER
=============================================================================

Renders the status line and header fields for a response and writes them,
line by line, to the output sink.

=============================================================================
WIRE FORMAT (byte-exact)
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │    HTTP/1.1 200 OK\n                          ← status line         │
    │    Content-Type: application/pdf\n            ← only for known MIME │
    │    Accept-Ranges: bytes\n                                           │
    │    Content-Disposition: inline; filename="guide.pdf"\n  ← PDF, MP3  │
    │    \n                                         ← end of head         │
    │    %PDF-1.7 ...                               ← body, until close   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Two deliberate quirks, kept bit-for-bit:

1. Lines end in a bare LF, not CRLF. Every mainstream client accepts it.
2. There is NO Content-Length. The body ends when the connection closes,
   so every response is followed by close().

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Protocol

from ..errors import WriteError
from .mime_types import ContentKind
from .request import HeaderField
from .status_codes import HTTPStatus, reason_phrase


LINE_END = "\n"


class OutputSink(Protocol):
    """Anything bytes can be written to: a Connection, a BytesIO, a file."""

    def write(self, data: bytes) -> int:
        ...


@dataclass
class ResponseHeader:
    """
    A rendered response head.

    Attributes:
        status_line: ``"<version> <code> <reason>"`` without terminator.
        fields: Header fields in emission order.
    """

    status_line: str
    fields: List[HeaderField] = field(default_factory=list)

    def add(self, name: str, value: str) -> "ResponseHeader":
        """Append a header field. Returns self for chaining."""
        self.fields.append(HeaderField(name=name, value=value))
        return self

    def lines(self) -> Iterator[str]:
        """Yield every wire line, terminators included, in order."""
        yield self.status_line + LINE_END
        for header in self.fields:
            yield f"{header.name}: {header.value}{LINE_END}"
        yield LINE_END

    def to_bytes(self) -> bytes:
        return "".join(self.lines()).encode("utf-8")


def write_chunk(sink: OutputSink, data: bytes) -> int:
    """
    Write one chunk to the sink, all or nothing.

    Returns:
        Number of bytes written (always len(data)).

    Raises:
        WriteError: The sink raised OSError or accepted fewer bytes.
    """
    try:
        written = sink.write(data)
    except OSError as e:
        raise WriteError(f"Write failed: {e}") from e

    if written != len(data):
        raise WriteError(f"Short write: {written} of {len(data)} bytes")
    return written


def build_response_header(
    version: str,
    code: int,
    kind: ContentKind,
    path: str,
) -> ResponseHeader:
    """
    Build the response head for a final (code, kind, path).

    =====================================================================
    HEADER RULES
    =====================================================================

    Kind with a MIME type   → Content-Type + Accept-Ranges
    PDF / MP3               → + Content-Disposition: inline; filename=...
    UNKNOWN / NONE          → nothing (client assumes text/plain)
    301                     → Location: /<path>

    =====================================================================

    Args:
        version: HTTP version echoed from the request line.
        code: Status code.
        kind: Final content kind.
        path: Final local path (the redirect target for 301).

    Raises:
        UnknownStatus: If ``code`` has no reason phrase.
    """
    header = ResponseHeader(status_line=f"{version} {int(code)} {reason_phrase(code)}")

    if code == HTTPStatus.MOVED_PERMANENTLY:
        header.add("Location", "/" + path.lstrip("/"))

    if kind.has_mime_type:
        header.add("Content-Type", kind.mime_type)
        header.add("Accept-Ranges", "bytes")
        if kind.inline_disposition:
            header.add("Content-Disposition", f'inline; filename="{path}"')

    return header


def write_response_header(
    sink: OutputSink,
    version: str,
    code: int,
    kind: ContentKind,
    path: str,
) -> int:
    """
    Build the response head and write it to the sink.

    Each line is written as soon as it is rendered, in order, so a client
    sees the status line even if a later write fails.

    Returns:
        Total header bytes written.

    Raises:
        UnknownStatus: Before anything is written, for an unmapped code.
        WriteError: On a failed or short write.
    """
    header = build_response_header(version, code, kind, path)

    total = 0
    for line in header.lines():
        total += write_chunk(sink, line.encode("utf-8"))
    return total
