"""
=============================================================================
FILE SERVER
=============================================================================

Ties the socket plumbing to the request pipeline and owns the policy for
what happens when a single request fails.

=============================================================================
REQUEST FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer.accept()                                             │
    │        │                                                             │
    │        ▼                                                             │
    │   WorkerPool.submit(_process_connection, conn)                      │
    │        │                                                             │
    │        ▼   (worker thread)                                           │
    │   conn.read_request()  →  parse_request()  →  respond()             │
    │        │                        │                   │                │
    │        │            RequestLineMalformed    UnsupportedMethod        │
    │        │                        └────► 400 Bad Request ◄┘            │
    │        │                                                             │
    │        ▼                                                             │
    │   conn.close()   (always: closing marks the end of the body)        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
FAILURES STAY INSIDE ONE CONNECTION
=============================================================================

Every error from the pipeline is caught in _process_connection, logged,
and ends with that connection being closed. The accept loop and the
other workers never see it. A broken client cannot stop the server.

=============================================================================
"""

import logging
import time
from typing import Optional, Tuple

from .access_log import log_access
from .config import ServerConfig
from .core import Connection, SocketServer, WorkerPool
from .errors import RequestLineMalformed, ServeError, UnsupportedMethod
from .handlers import FileSystemResources, ResourceStore, StaticFileHandler
from .http import ContentKind, HTTPStatus, parse_request, write_response_header


logger = logging.getLogger(__name__)

# Version used in error responses when the request line was unreadable
FALLBACK_VERSION = "HTTP/1.0"


class FileServer:
    """
    Static file server.

    =========================================================================
    USAGE
    =========================================================================

        server = FileServer(ServerConfig(document_root="./public", port=8080))
        server.run()   # Blocks until Ctrl+C / SIGTERM

    =========================================================================
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        resources: Optional[ResourceStore] = None,
    ):
        """
        Initialize the server.

        Args:
            config: Server configuration. Uses defaults if not provided.
            resources: Resource collaborator. Defaults to the filesystem
                       under config.document_root.
        """
        self.config = config or ServerConfig()
        self.config.validate()  # Fail-fast on invalid config

        self._socket_server = SocketServer(self.config)
        self._pool: Optional[WorkerPool] = (
            WorkerPool(self.config.workers) if self.config.workers > 0 else None
        )

        self.handler = StaticFileHandler(
            self.config,
            resources or FileSystemResources(self.config.document_root),
        )

    @property
    def address(self) -> Tuple[str, int]:
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    def wait_until_ready(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_ready(timeout)

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self):
        """Start serving (blocking) until shutdown() or a signal."""
        self._setup_logging()

        if self._pool is not None:
            self._pool.start()

        logger.info(
            f"{self.config.server_name} serving {self.config.document_root} "
            f"on {self.config.host}:{self.config.port}"
        )

        try:
            self._socket_server.start(self._handle_connection)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def shutdown(self):
        """Ask the accept loop to stop. run() returns shortly after."""
        self._socket_server.shutdown()

    def _setup_logging(self):
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("fileserver").setLevel(level)

    def _shutdown(self):
        logger.info("Shutting down server...")
        if self._pool is not None:
            self._pool.shutdown(wait=True, timeout=30.0)
        logger.info("Server stopped")

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection):
        """Called by SocketServer on the accept thread for each client."""
        if self._pool is None:
            self._process_connection(conn)
            return

        if not self._pool.submit(self._process_connection, conn):
            logger.warning(f"[{conn.id}] Worker pool stopped, dropping connection")
            conn.close()

    def _process_connection(self, conn: Connection):
        """
        Serve exactly one request on a connection (runs in a worker).

        Never raises for request-level failures: each one is logged and the
        connection is closed.
        """
        started_at = time.time()
        method, path, status = "-", "-", 0

        with conn:
            try:
                raw = conn.read_request()
            except OSError as e:
                logger.warning(f"[{conn.id}] Read failed: {e}")
                return

            if not raw:
                logger.debug(f"[{conn.id}] Client sent nothing")
                return

            try:
                request = parse_request(raw)
                method, path = request.method, request.path
                summary = self.handler.respond(request, conn)
                status = summary.code

            except RequestLineMalformed as e:
                logger.warning(f"[{conn.id}] {e}")
                status = self._send_error(conn, FALLBACK_VERSION)

            except UnsupportedMethod as e:
                logger.warning(f"[{conn.id}] {e}")
                status = self._send_error(conn, request.version)

            except ServeError as e:
                logger.error(f"[{conn.id}] Response aborted for {method} {path}: {e}")

            except Exception as e:
                logger.exception(f"[{conn.id}] Connection error: {e}")

            finally:
                log_access(conn.client_ip, method, path, status, conn.bytes_sent, started_at)

    def _send_error(self, conn: Connection, version: str) -> int:
        """
        Send a bare ``400 Bad Request`` head (no body).

        Returns:
            The status code sent, or 0 if the client was already gone.
        """
        try:
            write_response_header(conn, version, HTTPStatus.BAD_REQUEST, ContentKind.NONE, "")
        except ServeError as e:
            logger.debug(f"[{conn.id}] Could not send error response: {e}")
            return 0
        return HTTPStatus.BAD_REQUEST


def create_app(config: Optional[ServerConfig] = None) -> FileServer:
    """Factory function for creating server instances."""
    return FileServer(config)
