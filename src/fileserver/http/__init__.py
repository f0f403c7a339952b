"""
=============================================================================
HTTP MODULE
=============================================================================

The request pipeline, one stage per module:

    request.py       raw bytes → RequestLine + HeaderFields
    resolver.py      path → ResolvedResource (local path + ContentKind)
    mime_types.py    ContentKind and the extension table
    status_codes.py  the four status codes and their phrases
    response.py      status line + header fields → sink
    body.py          resource → sink (text or binary framing)

=============================================================================
"""

from .request import RequestLine, HeaderField, ParsedRequest, parse_request
from .mime_types import ContentKind, kind_for_extension
from .resolver import ResolvedResource, resolve_path
from .status_codes import HTTPStatus, reason_phrase
from .response import (
    OutputSink,
    ResponseHeader,
    build_response_header,
    write_response_header,
)
from .body import transmit_body

__all__ = [
    "RequestLine",
    "HeaderField",
    "ParsedRequest",
    "parse_request",
    "ContentKind",
    "kind_for_extension",
    "ResolvedResource",
    "resolve_path",
    "HTTPStatus",
    "reason_phrase",
    "OutputSink",
    "ResponseHeader",
    "build_response_header",
    "write_response_header",
    "transmit_body",
]
