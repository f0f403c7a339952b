"""
=============================================================================
HTTP REQUEST DECODER
=============================================================================

Splits the raw bytes read from a client into a request line and an ordered
list of header fields.

=============================================================================
HTTP REQUEST ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     HTTP REQUEST STRUCTURE                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    GET /images/logo.gif HTTP/1.1\r\n        ← request line          │
    │    ─┬─ ────────┬─────── ────┬────                                   │
    │   Method      Path       Version                                    │
    │                                                                      │
    │    Host: localhost:8080\r\n                 ← header fields         │
    │    Accept: image/*\r\n                                              │
    │    \r\n                                     ← empty line            │
    │    (anything here is ignored)               ← no body parsing       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
WHAT THIS DECODER DOES NOT DO
=============================================================================

- No method validation (the status selector rejects non-GET)
- No URL decoding or query string parsing
- No header folding, no case normalization, no merging of duplicates

Headers are kept EXACTLY in arrival order, duplicates included, because
the response never depends on them and logging wants them verbatim.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..errors import RequestLineMalformed


@dataclass(frozen=True)
class RequestLine:
    """
    The first line of a request: ``METHOD SP PATH SP VERSION``.

    All three parts are guaranteed non-empty by the decoder.
    """

    method: str
    path: str
    version: str


@dataclass(frozen=True)
class HeaderField:
    """A single ``Name: value`` pair, in the case it was sent."""

    name: str
    value: str


@dataclass
class ParsedRequest:
    """
    A decoded request head.

    Attributes:
        request_line: Method, path and version.
        headers: Header fields in arrival order. Duplicates are retained.
    """

    request_line: RequestLine
    headers: List[HeaderField] = field(default_factory=list)

    @property
    def method(self) -> str:
        return self.request_line.method

    @property
    def path(self) -> str:
        return self.request_line.path

    @property
    def version(self) -> str:
        return self.request_line.version

    def get_header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """
        Get the first value of a header (case-insensitive lookup).

        Example:
            request.get_header("user-agent")  # matches "User-Agent"
        """
        wanted = name.lower()
        for header in self.headers:
            if header.name.lower() == wanted:
                return header.value
        return default

    def get_all(self, name: str) -> List[str]:
        """Get every value of a header, in arrival order."""
        wanted = name.lower()
        return [h.value for h in self.headers if h.name.lower() == wanted]


def parse_request_line(line: str) -> RequestLine:
    """
    Parse the request line.

    The line is split on SINGLE spaces, so "GET  / HTTP/1.1" (two spaces)
    yields an empty token and is rejected like a missing one.

    Raises:
        RequestLineMalformed: Unless there are exactly three non-empty tokens.
    """
    tokens = line.split(" ")
    if len(tokens) != 3 or not all(tokens):
        raise RequestLineMalformed(f"Invalid request line: {line!r}")

    method, path, version = tokens
    return RequestLine(method=method, path=path, version=version)


def parse_header_lines(lines: List[str]) -> List[HeaderField]:
    """
    Parse header lines until the first empty line.

    Each line is split on its FIRST colon, so values like
    ``Host: localhost:8080`` keep their own colons.
    Lines without a colon are skipped (lenient parsing).
    """
    headers: List[HeaderField] = []

    for line in lines:
        if not line:
            break  # End of the head; anything after is body

        name, sep, value = line.partition(":")
        if not sep:
            continue

        headers.append(HeaderField(name=name.strip(), value=value.strip()))

    return headers


def _strip_cr(line: str) -> str:
    return line[:-1] if line.endswith("\r") else line


def parse_request(data: bytes) -> ParsedRequest:
    """
    Decode raw request bytes into a ParsedRequest.

    =====================================================================
    DECODING ALGORITHM
    =====================================================================

    1. Decode as UTF-8 (invalid bytes become U+FFFD, never an error)
    2. Split on LF and drop one trailing CR from each line
    3. First line → RequestLine
    4. Following lines up to the first empty one → HeaderFields

    The buffer does not have to be complete. A head cut off mid-header
    simply yields fewer headers; only the request line is mandatory.

    =====================================================================

    Args:
        data: Raw bytes as received from the client.

    Returns:
        The decoded request head.

    Raises:
        RequestLineMalformed: If the first line is not a valid request line.
    """
    text = data.decode("utf-8", errors="replace")
    lines = [_strip_cr(line) for line in text.split("\n")]

    request_line = parse_request_line(lines[0])
    headers = parse_header_lines(lines[1:])

    return ParsedRequest(request_line=request_line, headers=headers)
