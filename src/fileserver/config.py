"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration management for the file server.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m fileserver --port 3000                          │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── FILESERVER_PORT=3000 python -m fileserver                 │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Everything here is fixed at startup. The request pipeline only ever READS
the config, so one instance is shared by every worker thread.

=============================================================================
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


# Ports below this are "well-known" and need root on Unix.
MIN_UNPRIVILEGED_PORT = 1024
MAX_PORT = 65535


@dataclass
class ServerConfig:
    """
    Configuration for the file server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, buffer_size, timeout, max_request_size

    CONTENT SETTINGS
    - document_root, index_document, not_found_document
    - redirect_root, case_sensitive_extensions

    FRAMING SETTINGS
    - text_chunk_size, binary_chunk_size

    THREADING / LOGGING
    - workers, log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "127.0.0.1"
    """
    The IP address to bind to.
    - "127.0.0.1" - Localhost only (development)
    - "0.0.0.0" - All network interfaces
    """

    port: int = 8080
    """
    The port number to listen on.
    0 lets the OS pick a free port. Well-known ports (1-1023) are refused.
    """

    backlog: int = 5
    """Maximum number of queued connections waiting for accept()."""

    buffer_size: int = 4096
    """Size of each recv() call in bytes."""

    timeout: Optional[float] = None
    """
    Socket timeout in seconds for client connections.
    None = blocking, a slow client stalls only its own worker.
    """

    max_request_size: int = 64 * 1024
    """
    Stop reading a request after this many bytes.
    There is no request body to wait for, only the head.
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    document_root: str = "."
    """Directory every local path is resolved against."""

    index_document: str = "index.html"
    """Served for "/" (or the redirect target when redirect_root is set)."""

    not_found_document: str = "404.html"
    """Served with 404 Not Found when the requested file does not exist."""

    redirect_root: bool = False
    """
    Answer "/" with 301 Moved Permanently to the index document instead of
    serving the index directly with 200.
    """

    case_sensitive_extensions: bool = True
    """
    True: ".HTML" is an unknown extension (served as plain text).
    False: extensions are lower-cased before classification.
    """

    # ─────────────────────────────────────────────────────────────────────
    # FRAMING SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    text_chunk_size: int = 1024
    """Upper bound of a single line read for HTML and unknown files."""

    binary_chunk_size: int = 1024
    """Fixed read size for images, audio and PDF."""

    # ─────────────────────────────────────────────────────────────────────
    # THREADING / LOGGING
    # ─────────────────────────────────────────────────────────────────────

    workers: int = 4
    """
    Number of worker threads handling connections.
    0 handles every connection inline on the accept thread.
    """

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    server_name: str = "fileserver/1.0"
    """Shown in the startup log. Not sent on the wire."""

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        FILESERVER_HOST        Server host (default: 127.0.0.1)
        FILESERVER_PORT        Server port (default: 8080)
        FILESERVER_ROOT        Document root (default: .)
        FILESERVER_INDEX       Index document (default: index.html)
        FILESERVER_NOT_FOUND   Not-found document (default: 404.html)
        FILESERVER_WORKERS     Worker threads (default: 4)
        FILESERVER_LOG_LEVEL   Logging level (default: INFO)

        =====================================================================
        """
        return cls(
            host=os.getenv("FILESERVER_HOST", "127.0.0.1"),
            port=int(os.getenv("FILESERVER_PORT", "8080")),
            document_root=os.getenv("FILESERVER_ROOT", "."),
            index_document=os.getenv("FILESERVER_INDEX", "index.html"),
            not_found_document=os.getenv("FILESERVER_NOT_FOUND", "404.html"),
            workers=int(os.getenv("FILESERVER_WORKERS", "4")),
            log_level=os.getenv("FILESERVER_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called once at startup so a bad port or a missing document root
        fails immediately instead of on the first request.
        """
        if self.port != 0 and not MIN_UNPRIVILEGED_PORT <= self.port <= MAX_PORT:
            if 0 < self.port < MIN_UNPRIVILEGED_PORT:
                raise ValueError(f"Port {self.port} is in the well-known port range")
            raise ValueError(f"Invalid port: {self.port}. Must be 1024-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.workers < 0:
            raise ValueError("workers must be >= 0")

        if self.text_chunk_size < 1 or self.binary_chunk_size < 1:
            raise ValueError("chunk sizes must be >= 1")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if not self.index_document or not self.not_found_document:
            raise ValueError("index_document and not_found_document are required")

        if not Path(self.document_root).is_dir():
            raise ValueError(f"Document root does not exist: {self.document_root}")
