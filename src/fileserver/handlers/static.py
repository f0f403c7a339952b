"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Turns one decoded request into one complete response on the output sink:
status selection, header block, body.

=============================================================================
THE PIPELINE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   ParsedRequest                                                      │
    │        │                                                             │
    │        ▼                                                             │
    │   resolve_path()  ──►  ResolvedResource(local_path, kind, is_root)  │
    │        │                                                             │
    │        ▼                                                             │
    │   select_status() ──►  StatusSelection(code, path, kind)            │
    │        │               non-GET? → UnsupportedMethod (nothing sent)  │
    │        ▼                                                             │
    │   write_response_header()   ──►  sink                               │
    │        │                                                             │
    │        ▼                                                             │
    │   transmit_body()           ──►  sink                               │
    │        │                                                             │
    │        ▼                                                             │
    │   total bytes sent                                                   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
STATUS SELECTION
=============================================================================

    method != GET          → UnsupportedMethod
    path == "/"            → 200, HTML, <index>     (301 if redirect_root)
    file exists            → 200, kind/path unchanged
    otherwise              → 404, HTML, <not-found document>

The handler is stateless: it holds only read-only configuration and the
resource collaborator, so any number of worker threads may call it at once.

=============================================================================
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..config import ServerConfig
from ..errors import UnsupportedMethod
from ..http.body import transmit_body
from ..http.mime_types import ContentKind
from ..http.request import ParsedRequest, parse_request
from ..http.resolver import ResolvedResource, resolve_path
from ..http.response import OutputSink, write_response_header
from ..http.status_codes import HTTPStatus
from .resources import FileSystemResources, ResourceStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusSelection:
    """The final decision for a request: what code, which file, what kind."""

    code: HTTPStatus
    path: str
    kind: ContentKind


def select_status(
    method: str,
    resolved: ResolvedResource,
    resources: ResourceStore,
    index_document: str,
    not_found_document: str,
    redirect_root: bool = False,
) -> StatusSelection:
    """
    Pick the status code and final resource for a request.

    Args:
        method: Request method; only "GET" is served.
        resolved: Output of resolve_path().
        resources: Existence check, keyed by local path.
        index_document: Served for "/".
        not_found_document: Served with 404.
        redirect_root: Answer "/" with 301 to the index instead.

    Raises:
        UnsupportedMethod: For any method other than GET.
    """
    if method != "GET":
        raise UnsupportedMethod(method)

    if resolved.is_root:
        if redirect_root:
            return StatusSelection(HTTPStatus.MOVED_PERMANENTLY, index_document, ContentKind.NONE)
        return StatusSelection(HTTPStatus.OK, index_document, ContentKind.HTML)

    if resources.exists(resolved.local_path):
        return StatusSelection(HTTPStatus.OK, resolved.local_path, resolved.kind)

    logger.debug(f"Not found: {resolved.request_path}")
    return StatusSelection(HTTPStatus.NOT_FOUND, not_found_document, ContentKind.HTML)


@dataclass(frozen=True)
class ResponseSummary:
    """What went out: the status code and the total bytes sent."""

    code: HTTPStatus
    bytes_sent: int


def handle_request(
    request: ParsedRequest,
    sink: OutputSink,
    resources: ResourceStore,
    config: ServerConfig,
) -> int:
    """
    Produce the complete response for one request.

    Args:
        request: Decoded request head.
        sink: Where the response bytes go.
        resources: Existence check and content reader.
        config: Index/not-found documents, framing sizes, root behaviour.

    Returns:
        Total bytes sent (header block plus body).

    Raises:
        UnsupportedMethod: Non-GET request. Nothing has been written.
        UnknownStatus, WriteError, ReadError, InternalError: The response
            was aborted; part of it may already be on the wire.
    """
    return respond(request, sink, resources, config).bytes_sent


def respond(
    request: ParsedRequest,
    sink: OutputSink,
    resources: ResourceStore,
    config: ServerConfig,
) -> ResponseSummary:
    """Like handle_request(), but also reports the status code sent."""
    resolved = resolve_path(
        request.path,
        config.index_document,
        case_sensitive=config.case_sensitive_extensions,
    )

    selection = select_status(
        request.method,
        resolved,
        resources,
        index_document=config.index_document,
        not_found_document=config.not_found_document,
        redirect_root=config.redirect_root,
    )

    sent = write_response_header(
        sink, request.version, selection.code, selection.kind, selection.path
    )

    # A redirect has no body
    if selection.kind is not ContentKind.NONE:
        sent += transmit_body(
            sink,
            resources,
            selection.path,
            selection.kind,
            text_chunk_size=config.text_chunk_size,
            binary_chunk_size=config.binary_chunk_size,
        )

    return ResponseSummary(code=selection.code, bytes_sent=sent)


class StaticFileHandler:
    """
    Handler for serving files from a document root.

    Binds a configuration and a resource collaborator so callers only pass
    the raw request and the sink.

    =========================================================================
    USAGE
    =========================================================================

        handler = StaticFileHandler(ServerConfig(document_root="/var/www"))

        raw = connection.read_request()
        sent = handler.handle(raw, connection)

    =========================================================================
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        resources: Optional[ResourceStore] = None,
    ):
        """
        Initialize the static file handler.

        Args:
            config: Server configuration. Defaults to ServerConfig().
            resources: Resource collaborator. Defaults to the filesystem
                       under config.document_root.
        """
        self.config = config or ServerConfig()
        self.resources = resources or FileSystemResources(self.config.document_root)

    def handle_parsed(self, request: ParsedRequest, sink: OutputSink) -> int:
        """Respond to an already decoded request."""
        return handle_request(request, sink, self.resources, self.config)

    def respond(self, request: ParsedRequest, sink: OutputSink) -> ResponseSummary:
        """Respond to a decoded request and report the status code sent."""
        return respond(request, sink, self.resources, self.config)

    def handle(self, data: bytes, sink: OutputSink) -> int:
        """
        Decode raw request bytes and respond.

        Raises:
            RequestLineMalformed: The request line could not be decoded.
            (plus everything handle_request() raises)
        """
        return self.handle_parsed(parse_request(data), sink)


def serve_static(root_dir: str, **kwargs) -> StaticFileHandler:
    """
    Create a static file handler for a directory.

    Example:
        handler = serve_static("/var/www", index_document="home.html")
    """
    return StaticFileHandler(ServerConfig(document_root=root_dir, **kwargs))
