"""
=============================================================================
ERROR TAXONOMY
=============================================================================

Every way a single request can fail, as structured exceptions.

=============================================================================
WHO RAISES WHAT
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  Exception              │ Raised by            │ Status to send    │
    ├─────────────────────────────────────────────────────────────────────┤
    │  RequestLineMalformed   │ request decoder      │ 400 Bad Request   │
    │  UnsupportedMethod      │ status selector      │ 400 Bad Request   │
    │  UnknownStatus          │ header builder       │ (none, close)     │
    │  WriteError             │ header/body writers  │ (none, close)     │
    │  ReadError              │ body transmitter     │ (none, close)     │
    │  InternalError          │ body transmitter     │ (none, close)     │
    └─────────────────────────────────────────────────────────────────────┘

None of these are retried. Each one aborts the response for ONE connection.
The caller (FileServer) decides whether a fallback response goes out;
the process keeps serving everybody else.

=============================================================================
"""

from typing import Optional


class ServeError(Exception):
    """
    Base class for all request-scoped failures.

    Carries the HTTP status code the harness may answer with. ``None``
    means the response is already broken (or was never valid) and the
    connection should simply be closed.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RequestLineMalformed(ServeError):
    """The first line did not split into method, path and version."""

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class UnsupportedMethod(ServeError):
    """Anything other than GET."""

    def __init__(self, method: str):
        super().__init__(f"Unsupported method: {method}", status_code=400)
        self.method = method


class UnknownStatus(ServeError):
    """A status code with no reason phrase. Unreachable from the selector."""

    def __init__(self, code: int):
        super().__init__(f"No reason phrase for status {code}")
        self.code = code


class WriteError(ServeError):
    """The output sink failed or accepted fewer bytes than offered."""


class ReadError(ServeError):
    """The resource could not be opened or ended before its probed size."""


class InternalError(ServeError):
    """An invariant inside the pipeline was broken."""
