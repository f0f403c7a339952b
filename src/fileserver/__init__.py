"""
=============================================================================
FILESERVER - A Static File Server Built From Raw Sockets
=============================================================================

Resolves each HTTP request to a file under a document root and streams it
back: status line, a few headers, then the bytes.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    fileserver/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m fileserver)
    ├── server.py            # FileServer: per-connection processing
    ├── config.py            # ServerConfig dataclass
    ├── errors.py            # Structured error taxonomy
    ├── access_log.py        # One log line per request
    ├── core/                # Socket plumbing
    │   ├── connection.py    # Client socket wrapper (the output sink)
    │   ├── socket_server.py # Bind/listen/accept loop
    │   └── worker_pool.py   # Worker threads
    ├── http/                # The request pipeline
    │   ├── request.py       # Request line + header decoding
    │   ├── resolver.py      # Path → local path + content kind
    │   ├── mime_types.py    # ContentKind
    │   ├── status_codes.py  # 200 / 301 / 400 / 404
    │   ├── response.py      # Header block builder
    │   └── body.py          # Text / binary body framing
    └── handlers/
        ├── static.py        # Status selection + full response
        └── resources.py     # Filesystem resource collaborator

=============================================================================
QUICK START
=============================================================================

    from fileserver import FileServer, ServerConfig

    server = FileServer(ServerConfig(document_root="./public", port=8080))
    server.run()

Or drive the pipeline directly with any sink that has write(bytes) -> int:

    import io
    from fileserver.handlers import serve_static

    out = io.BytesIO()
    serve_static("./public").handle(b"GET / HTTP/1.1\\r\\n\\r\\n", out)

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .server import FileServer

__all__ = ["FileServer", "ServerConfig", "__version__"]
