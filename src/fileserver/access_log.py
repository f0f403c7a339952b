"""
=============================================================================
ACCESS LOG
=============================================================================

One line per connection on the "fileserver.access" logger, in a format
close to Apache's common log:

    127.0.0.1 - - [19/Oct/2026:10:15:02 +0000] "GET /logo.gif" 200 5120 1.84ms

Configure it separately from the rest of the server if needed:

    logging.getLogger("fileserver.access").addHandler(file_handler)

=============================================================================
"""

import logging
import time
from dataclasses import dataclass


logger = logging.getLogger("fileserver.access")


@dataclass
class RequestLog:
    """A finished (or aborted) request, ready to be logged."""

    client_ip: str
    method: str
    path: str
    status_code: int
    bytes_sent: int
    duration_ms: float
    timestamp: str

    def to_text(self) -> str:
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.bytes_sent} {self.duration_ms:.2f}ms'
        )


def log_access(
    client_ip: str,
    method: str,
    path: str,
    status_code: int,
    bytes_sent: int,
    started_at: float,
) -> RequestLog:
    """
    Emit an access log line.

    ``method`` and ``path`` are "-" when the request line was unreadable,
    and ``status_code`` is 0 when no status line went out.
    """
    entry = RequestLog(
        client_ip=client_ip,
        method=method,
        path=path,
        status_code=status_code,
        bytes_sent=bytes_sent,
        duration_ms=(time.time() - started_at) * 1000,
        timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
    )
    logger.info(entry.to_text())
    return entry
