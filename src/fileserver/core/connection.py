"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket: read the request head, act as the output
sink for the response, close.

=============================================================================
TCP IS A BYTE STREAM, NOT A MESSAGE PROTOCOL!
=============================================================================

    Client sends:   "GET /index.html HTTP/1.1\r\nHost: x\r\n\r\n"

    Server might receive ANY split of it:
        recv() → "GET /ind"
        recv() → "ex.html HTTP/1.1\r\nHost: x\r\n\r\n"

So we buffer until we see the empty line that ends the head (CRLF CRLF, or
a bare LF LF from lenient clients), the peer closes, or the size limit is
hit. Request bodies are never read.

=============================================================================
ONE REQUEST PER CONNECTION
=============================================================================

Responses carry no Content-Length, so the ONLY way a client knows the body
is complete is the connection closing. Every connection therefore serves
exactly one request:

    ┌─────────────────────────────────────────────────────────────────────┐
    │   accept → read_request() → write()... → close()                   │
    │                                            │                        │
    │                                            └── FIN = end of body   │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import socket
import time
import logging
import uuid
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional


logger = logging.getLogger(__name__)

HEAD_TERMINATORS = (b"\r\n\r\n", b"\n\n")

# close() discards at most this much unread client data, for at most this long
MAX_DRAIN_BYTES = 64 * 1024
DRAIN_TIMEOUT = 2.0


class ConnectionState(Enum):
    """Connection lifecycle states, for logging and debugging."""
    NEW = "new"              # Just accepted, haven't read anything yet
    READING = "reading"      # Reading the request head
    WRITING = "writing"      # Sending response data
    CLOSING = "closing"      # Shutdown sequence in progress
    CLOSED = "closed"        # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Doubles as the output sink of the request pipeline: ``write(data)``
    sends every byte or raises, and returns the number of bytes sent.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short connection identifier (for logging).
        state: Current connection state.
        bytes_sent: Running total of bytes written to the client.
    """

    # Required parameters
    socket: socket.socket
    address: tuple[str, int]

    # Generated/default parameters
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    bytes_sent: int = 0

    # Configuration (passed from ServerConfig)
    buffer_size: int = 4096
    timeout: Optional[float] = None
    max_request_size: int = 64 * 1024

    def __post_init__(self):
        # None = fully blocking, a stalled peer only stalls this worker
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> bytes:
        """
        Read the request head from the socket.

        Stops at the first blank line, at EOF, or once max_request_size
        bytes are buffered, whichever comes first. Whatever was received is
        returned; the decoder decides whether it is usable.

        Returns:
            Raw request bytes (empty if the client sent nothing).

        Raises:
            socket.timeout: If a timeout is configured and the client stalls.
            OSError: If the connection fails.
        """
        self.state = ConnectionState.READING
        buffer = b""

        while not any(t in buffer for t in HEAD_TERMINATORS):
            chunk = self.socket.recv(self.buffer_size)
            if not chunk:
                break  # Peer closed (or half-closed) its side

            buffer += chunk
            if len(buffer) >= self.max_request_size:
                logger.warning(f"[{self.id}] Request head exceeds {self.max_request_size} bytes")
                break

        return buffer

    # =========================================================================
    # WRITING: the output sink interface
    # =========================================================================

    def write(self, data: bytes) -> int:
        """
        Send data to the client.

        Uses sendall(), so it either sends every byte or raises.

        Returns:
            len(data)

        Raises:
            OSError: Client disconnected or the send failed.
        """
        self.state = ConnectionState.WRITING
        self.socket.sendall(data)
        self.bytes_sent += len(data)
        return len(data)

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection gracefully.

        1. shutdown(SHUT_WR): send FIN, which tells the client the body ended
        2. drain what the client still sends, up to MAX_DRAIN_BYTES or
           DRAIN_TIMEOUT, whichever comes first
        3. close(): release the file descriptor
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        drained = 0
        deadline = time.monotonic() + DRAIN_TIMEOUT
        try:
            self.socket.settimeout(0.5)
            while drained < MAX_DRAIN_BYTES and time.monotonic() < deadline:
                chunk = self.socket.recv(1024)
                if not chunk:
                    break
                drained += len(chunk)
        except OSError:
            pass  # socket.timeout is an OSError too

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.bytes_sent} bytes")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
