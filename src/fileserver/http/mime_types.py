"""
=============================================================================
CONTENT KINDS AND MIME TYPES
=============================================================================

Classifies a resource by its file extension. The classification drives
two things downstream:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      WHAT A CONTENT KIND DECIDES                    │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Kind      MIME type          Disposition   Body framing           │
    │   ────      ─────────          ───────────   ────────────           │
    │   HTML      text/html          -             text (line reads)      │
    │   GIF       image/gif          -             binary (fixed chunks)  │
    │   JPEG      image/jpeg         -             binary                 │
    │   MP3       audio/mpeg         inline        binary                 │
    │   PDF       application/pdf    inline        binary                 │
    │   UNKNOWN   (no header)        -             text                   │
    │   NONE      (no header)        -             (no body at all)       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Each enum member CARRIES its own MIME string and flags, so there is no
side table indexed by an ordinal that could drift out of sync.

UNKNOWN sends no Content-Type at all. Browsers then fall back to plain
text, which is exactly what we want for README files and the like.

"inline" disposition asks the browser to render PDFs and audio in the tab
instead of offering a download.

=============================================================================
"""

from enum import Enum
from typing import Dict, Optional


class ContentKind(Enum):
    """
    Tagged classification of a resource.

    Attributes (per member):
        mime_type: Content-Type value, or None if no header is sent.
        inline_disposition: Send ``Content-Disposition: inline``.
        binary: Use fixed-chunk binary framing for the body.
    """

    NONE = ("none", None, False, False)
    UNKNOWN = ("unknown", None, False, False)
    HTML = ("html", "text/html", False, False)
    GIF = ("gif", "image/gif", False, True)
    JPEG = ("jpeg", "image/jpeg", False, True)
    MP3 = ("mp3", "audio/mpeg", True, True)
    PDF = ("pdf", "application/pdf", True, True)

    def __init__(
        self,
        label: str,
        mime_type: Optional[str],
        inline_disposition: bool,
        binary: bool,
    ):
        self.label = label
        self.mime_type = mime_type
        self.inline_disposition = inline_disposition
        self.binary = binary

    @property
    def has_mime_type(self) -> bool:
        return self.mime_type is not None


# Extension (without the dot) → kind. Anything missing is UNKNOWN.
EXTENSION_KINDS: Dict[str, ContentKind] = {
    "html": ContentKind.HTML,
    "gif": ContentKind.GIF,
    "jpeg": ContentKind.JPEG,
    "mp3": ContentKind.MP3,
    "pdf": ContentKind.PDF,
}


def kind_for_extension(extension: str, case_sensitive: bool = True) -> ContentKind:
    """
    Look up the content kind for a file extension.

    Args:
        extension: Extension without the leading dot ("gif", not ".gif").
        case_sensitive: When False, "GIF" matches like "gif".

    Returns:
        The matching kind, or ContentKind.UNKNOWN.

    Examples:
        >>> kind_for_extension("pdf") is ContentKind.PDF
        True

        >>> kind_for_extension("HTML") is ContentKind.UNKNOWN
        True
    """
    if not case_sensitive:
        extension = extension.lower()
    return EXTENSION_KINDS.get(extension, ContentKind.UNKNOWN)
