"""
=============================================================================
RESOURCE RESOLVER
=============================================================================

Maps a request path to a local resource path plus a content kind.
Pure string work: the filesystem is never touched here.

=============================================================================
RESOLUTION RULES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │  Request path          │ Kind     │ Local path                     │
    ├─────────────────────────────────────────────────────────────────────┤
    │  /                     │ HTML     │ <index document>               │
    │  /README               │ UNKNOWN  │ README           (no dot)      │
    │  /notes.               │ UNKNOWN  │ notes.           (ends in dot) │
    │  .hidden               │ UNKNOWN  │ .hidden          (starts dot)  │
    │  /a.b.gif              │ GIF      │ a.b.gif          (LAST dot)    │
    │  /song.mp3             │ MP3      │ song.mp3                       │
    │  /page.HTML            │ UNKNOWN  │ page.HTML        (case!)       │
    └─────────────────────────────────────────────────────────────────────┘

The path is never modified in place. Stem and extension are slices, and
the untouched request path is kept on the result for log messages.

=============================================================================
"""

from dataclasses import dataclass
from typing import Tuple

from .mime_types import ContentKind, kind_for_extension


@dataclass(frozen=True)
class ResolvedResource:
    """
    Where a request path points and what kind of content lives there.

    Attributes:
        local_path: Path relative to the document root, no leading slash.
        kind: Content classification.
        is_root: True for "/" (the index document, unconditionally).
        request_path: The original path from the request line.
    """

    local_path: str
    kind: ContentKind
    is_root: bool = False
    request_path: str = ""


def split_extension(path: str) -> Tuple[str, str]:
    """
    Split a path on its LAST dot.

    Example:
        split_extension("/a.b.gif")  # ("/a.b", "gif")
    """
    stem, _, extension = path.rpartition(".")
    return stem, extension


def resolve_path(
    path: str,
    index_document: str,
    case_sensitive: bool = True,
) -> ResolvedResource:
    """
    Resolve a request path.

    Args:
        path: Path token from the request line.
        index_document: Local path served for "/".
        case_sensitive: Match extensions case-sensitively.

    Returns:
        The resolved resource.
    """
    if path == "/":
        return ResolvedResource(
            local_path=index_document,
            kind=ContentKind.HTML,
            is_root=True,
            request_path=path,
        )

    local_path = path[1:] if path.startswith("/") else path

    if "." not in path or path.endswith(".") or path.startswith("."):
        return ResolvedResource(
            local_path=local_path,
            kind=ContentKind.UNKNOWN,
            request_path=path,
        )

    _, extension = split_extension(path)
    return ResolvedResource(
        local_path=local_path,
        kind=kind_for_extension(extension, case_sensitive=case_sensitive),
        request_path=path,
    )
