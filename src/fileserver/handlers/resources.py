"""
=============================================================================
FILESYSTEM RESOURCES
=============================================================================

The resource collaborator: answers "does this local path exist?" and
"give me its bytes" for paths relative to a document root.

=============================================================================
KEEPING PATHS INSIDE THE ROOT
=============================================================================

    GET /../../../etc/passwd HTTP/1.1

    full_path = (root_dir / "../../../etc/passwd").resolve()
    full_path.relative_to(root_dir)   # raises ValueError → "does not exist"

A path that escapes the document root (via "..", or a symlink pointing
elsewhere) is reported as missing, so the request falls through to the
ordinary 404 page. Nobody outside the root is ever opened.

=============================================================================
"""

import logging
from pathlib import Path
from typing import BinaryIO, Optional, Protocol


logger = logging.getLogger(__name__)


class ResourceStore(Protocol):
    """What the request pipeline needs from storage."""

    def exists(self, local_path: str) -> bool:
        ...

    def open(self, local_path: str) -> BinaryIO:
        ...


class FileSystemResources:
    """
    Resources served from a directory on disk.

    Usage:
        resources = FileSystemResources("/var/www")
        resources.exists("index.html")          # True
        with resources.open("index.html") as f:
            f.readline()
    """

    def __init__(self, root_dir: str):
        # Resolve to absolute path (the containment check compares against it)
        self.root_dir = Path(root_dir).resolve()

        if not self.root_dir.is_dir():
            raise ValueError(f"Document root does not exist: {root_dir}")

    def _full_path(self, local_path: str) -> Optional[Path]:
        """
        Absolute path for a local path, or None if it leaves the root or
        cannot name a file at all (embedded NUL, over-long component).
        """
        try:
            full_path = (self.root_dir / local_path.lstrip("/")).resolve()
        except (OSError, ValueError) as e:
            logger.warning(f"Unusable path {local_path!r}: {e}")
            return None

        try:
            full_path.relative_to(self.root_dir)
        except ValueError:
            logger.warning(f"Path outside document root: {local_path}")
            return None
        return full_path

    def exists(self, local_path: str) -> bool:
        """True only for a regular file inside the document root."""
        full_path = self._full_path(local_path)
        if full_path is None:
            return False

        try:
            return full_path.is_file()
        except (OSError, ValueError) as e:
            logger.warning(f"Cannot stat {local_path!r}: {e}")
            return False

    def open(self, local_path: str) -> BinaryIO:
        """
        Open a resource for reading in binary mode.

        Raises:
            FileNotFoundError: If the path leaves the document root or is
                unusable.
            OSError: Whatever open() raises for the file itself.
        """
        full_path = self._full_path(local_path)
        if full_path is None:
            raise FileNotFoundError(f"Not inside document root: {local_path!r}")
        return open(full_path, "rb")
