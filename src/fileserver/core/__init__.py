"""
=============================================================================
CORE MODULE
=============================================================================

Socket-level plumbing around the request pipeline:

- connection.py   - one client socket: read the head, write, close
- socket_server.py - bind/listen/accept loop with graceful shutdown
- worker_pool.py  - fixed worker threads, one connection per task

Nothing in here looks inside a request.

=============================================================================
"""

from .connection import Connection, ConnectionState
from .socket_server import SocketServer
from .worker_pool import WorkerPool

__all__ = [
    "Connection",
    "ConnectionState",
    "SocketServer",
    "WorkerPool",
]
