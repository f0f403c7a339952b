"""
pytest configuration and fixtures.
"""

import io
import socket
import threading
from pathlib import Path
from typing import Dict, Generator, List

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fileserver import FileServer, ServerConfig


INDEX_HTML = b"<html>\n<body>\n<h1>Home</h1>\n</body>\n</html>\n"
NOT_FOUND_HTML = b"<html><body>Not Found</body></html>\n"
README_TEXT = b"plain text\nsecond line\n"
# Deliberately not a multiple of 1024, so the last binary chunk is short
GIF_BYTES = b"GIF89a" + bytes(range(256)) * 12
PDF_BYTES = b"%PDF-1.4\n" + b"\x00\xff" * 700 + b"\n%%EOF\n"


@pytest.fixture
def sample_get_request() -> bytes:
    """Sample HTTP GET request."""
    return (
        b"GET /logo.gif HTTP/1.1\r\n"
        b"Host: localhost:8080\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: image/*\r\n"
        b"\r\n"
    )


@pytest.fixture
def sample_root_request() -> bytes:
    return b"GET / HTTP/1.1\r\nHost: localhost\r\n\r\n"


@pytest.fixture
def document_root(tmp_path: Path) -> Path:
    """A document root with one file of every interesting kind."""
    (tmp_path / "index.html").write_bytes(INDEX_HTML)
    (tmp_path / "404.html").write_bytes(NOT_FOUND_HTML)
    (tmp_path / "README").write_bytes(README_TEXT)
    (tmp_path / "logo.gif").write_bytes(GIF_BYTES)
    (tmp_path / "guide.pdf").write_bytes(PDF_BYTES)
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "page.html").write_bytes(b"<p>nested</p>\n")
    return tmp_path


@pytest.fixture
def config(document_root: Path) -> ServerConfig:
    """Test server configuration rooted at the fixture directory."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        workers=2,
        timeout=5.0,
        document_root=str(document_root),
        log_level="WARNING",
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


# =============================================================================
# OUTPUT SINKS AND RESOURCE STORES
# =============================================================================

class RecordingSink:
    """Output sink that keeps every write as a separate chunk."""

    def __init__(self):
        self.chunks: List[bytes] = []

    def write(self, data: bytes) -> int:
        self.chunks.append(bytes(data))
        return len(data)

    @property
    def data(self) -> bytes:
        return b"".join(self.chunks)


class ShortWriteSink(RecordingSink):
    """Accepts the first ``good_writes`` writes, then drops a byte."""

    def __init__(self, good_writes: int = 0):
        super().__init__()
        self.good_writes = good_writes

    def write(self, data: bytes) -> int:
        if len(self.chunks) >= self.good_writes:
            return len(data) - 1
        return super().write(data)


class BrokenPipeSink:
    """Output sink whose peer has gone away."""

    def write(self, data: bytes) -> int:
        raise BrokenPipeError("peer closed")


class MemoryResources:
    """Resource store backed by a dict, counting open and closed handles."""

    def __init__(self, files: Dict[str, bytes]):
        self.files = files
        self.opened: List[io.BytesIO] = []

    def exists(self, local_path: str) -> bool:
        return local_path in self.files

    def open(self, local_path: str) -> io.BytesIO:
        if local_path not in self.files:
            raise FileNotFoundError(local_path)
        handle = io.BytesIO(self.files[local_path])
        self.opened.append(handle)
        return handle


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def memory_resources() -> MemoryResources:
    return MemoryResources({
        "index.html": INDEX_HTML,
        "404.html": NOT_FOUND_HTML,
        "README": README_TEXT,
        "logo.gif": GIF_BYTES,
        "guide.pdf": PDF_BYTES,
    })


# =============================================================================
# LIVE SERVER
# =============================================================================

class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False  # Not a test class, despite the name

    def __init__(self, server: FileServer):
        self.server = server
        self.port: int = 0
        self._thread: threading.Thread = None

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()

        if not self.server.wait_until_ready(timeout=5.0):
            raise RuntimeError("Server failed to start")

        self.port = self.server.address[1]

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)

    def request(self, raw: bytes) -> bytes:
        """Send raw bytes and read the response until the server closes."""
        with socket.create_connection(("127.0.0.1", self.port), timeout=5.0) as s:
            s.sendall(raw)
            response = b""
            while True:
                chunk = s.recv(4096)
                if not chunk:
                    break
                response += chunk
        return response


@pytest.fixture
def test_server(config: ServerConfig) -> Generator[TestServer, None, None]:
    """Create a test server serving the fixture document root."""
    test_srv = TestServer(FileServer(config))
    test_srv.start()

    yield test_srv

    test_srv.stop()
