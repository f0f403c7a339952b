"""
=============================================================================
HANDLERS MODULE
=============================================================================

Request handling on top of the HTTP pipeline:

1. StaticFileHandler / serve_static() / handle_request()
   - Status selection (200 / 301 / 404, GET only)
   - Header block and body written straight to the output sink

2. FileSystemResources
   - Existence checks and binary reads under a document root
   - Paths escaping the root are reported as missing

    from fileserver.handlers import serve_static

    handler = serve_static("/var/www")
    handler.handle(raw_request_bytes, connection)

=============================================================================
"""

from .resources import FileSystemResources, ResourceStore
from .static import (
    ResponseSummary,
    StaticFileHandler,
    StatusSelection,
    handle_request,
    respond,
    select_status,
    serve_static,
)

__all__ = [
    "FileSystemResources",
    "ResourceStore",
    "ResponseSummary",
    "StaticFileHandler",
    "StatusSelection",
    "handle_request",
    "respond",
    "select_status",
    "serve_static",
]
