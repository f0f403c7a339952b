"""
Unit tests for status selection and full responses.
"""

import pytest

from conftest import GIF_BYTES, INDEX_HTML, NOT_FOUND_HTML, PDF_BYTES, README_TEXT, RecordingSink, ShortWriteSink

from fileserver.config import ServerConfig
from fileserver.errors import RequestLineMalformed, UnsupportedMethod, WriteError
from fileserver.handlers import StaticFileHandler, handle_request, select_status, serve_static
from fileserver.http import ContentKind, HTTPStatus, parse_request, resolve_path


class TestSelectStatus:
    """Tests for the status selector."""

    def select(self, resources, method, path, **kwargs):
        return select_status(
            method,
            resolve_path(path, "index.html"),
            resources,
            index_document="index.html",
            not_found_document="404.html",
            **kwargs,
        )

    def test_root(self, memory_resources):
        selection = self.select(memory_resources, "GET", "/")

        assert selection.code == HTTPStatus.OK
        assert selection.path == "index.html"
        assert selection.kind is ContentKind.HTML

    def test_root_redirect(self, memory_resources):
        selection = self.select(memory_resources, "GET", "/", redirect_root=True)

        assert selection.code == HTTPStatus.MOVED_PERMANENTLY
        assert selection.path == "index.html"
        assert selection.kind is ContentKind.NONE

    def test_existing_file(self, memory_resources):
        selection = self.select(memory_resources, "GET", "/logo.gif")

        assert selection.code == HTTPStatus.OK
        assert selection.path == "logo.gif"
        assert selection.kind is ContentKind.GIF

    def test_missing_file(self, memory_resources):
        """Missing files become the not-found document, as HTML."""
        selection = self.select(memory_resources, "GET", "/missing.pdf")

        assert selection.code == HTTPStatus.NOT_FOUND
        assert selection.path == "404.html"
        assert selection.kind is ContentKind.HTML

    @pytest.mark.parametrize("method", ["POST", "DELETE", "HEAD", "get"])
    def test_only_get(self, memory_resources, method):
        with pytest.raises(UnsupportedMethod) as exc_info:
            self.select(memory_resources, method, "/")

        assert exc_info.value.method == method
        assert exc_info.value.status_code == 400


class TestHandleRequest:
    """Tests for the complete response."""

    def handle(self, raw, sink, resources, **config):
        return handle_request(parse_request(raw), sink, resources, ServerConfig(**config))

    def test_root(self, sink, memory_resources, sample_root_request):
        """Test the exact bytes for GET /."""
        sent = self.handle(sample_root_request, sink, memory_resources)

        expected = b"HTTP/1.1 200 OK\nContent-Type: text/html\nAccept-Ranges: bytes\n\n" + INDEX_HTML
        assert sink.data == expected
        assert sent == len(expected)

    def test_gif(self, sink, memory_resources, sample_get_request):
        self.handle(sample_get_request, sink, memory_resources)

        head, body = sink.data.split(b"\n\n", 1)
        assert head.startswith(b"HTTP/1.1 200 OK")
        assert b"Content-Type: image/gif" in head
        assert body == GIF_BYTES

    def test_pdf(self, sink, memory_resources):
        self.handle(b"GET /guide.pdf HTTP/1.1\r\n\r\n", sink, memory_resources)

        assert b'Content-Disposition: inline; filename="guide.pdf"\n' in sink.data
        assert sink.data.endswith(PDF_BYTES)

    def test_unknown_kind(self, sink, memory_resources):
        self.handle(b"GET /README HTTP/1.0\r\n\r\n", sink, memory_resources)

        assert sink.data == b"HTTP/1.0 200 OK\n\n" + README_TEXT

    def test_not_found(self, sink, memory_resources):
        self.handle(b"GET /nope.gif HTTP/1.1\r\n\r\n", sink, memory_resources)

        assert sink.data == (
            b"HTTP/1.1 404 Not Found\nContent-Type: text/html\nAccept-Ranges: bytes\n\n"
            + NOT_FOUND_HTML
        )

    def test_redirect_has_no_body(self, sink, memory_resources, sample_root_request):
        self.handle(sample_root_request, sink, memory_resources, redirect_root=True)

        assert sink.data == b"HTTP/1.1 301 Moved Permanently\nLocation: /index.html\n\n"

    def test_unsupported_method_writes_nothing(self, sink, memory_resources):
        with pytest.raises(UnsupportedMethod):
            self.handle(b"POST / HTTP/1.1\r\n\r\n", sink, memory_resources)

        assert sink.chunks == []

    def test_custom_documents(self, sink, memory_resources):
        memory_resources.files["home.html"] = b"home\n"
        self.handle(b"GET / HTTP/1.1\r\n\r\n", sink, memory_resources, index_document="home.html")

        assert sink.data.endswith(b"\n\nhome\n")

    def test_write_failure_propagates(self, memory_resources, sample_root_request):
        with pytest.raises(WriteError):
            self.handle(sample_root_request, ShortWriteSink(good_writes=2), memory_resources)

    def test_stateless(self, memory_resources, sample_get_request):
        """Two identical requests give identical bytes."""
        first, second = RecordingSink(), RecordingSink()
        self.handle(sample_get_request, first, memory_resources)
        self.handle(sample_get_request, second, memory_resources)

        assert first.chunks == second.chunks


class TestStaticFileHandler:
    """Tests for the bound handler."""

    def test_handle_raw_bytes(self, sink, memory_resources, sample_get_request):
        handler = StaticFileHandler(ServerConfig(), memory_resources)
        sent = handler.handle(sample_get_request, sink)

        assert sent == len(sink.data)
        assert sink.data.endswith(GIF_BYTES)

    def test_respond_reports_status(self, sink, memory_resources):
        handler = StaticFileHandler(ServerConfig(), memory_resources)
        summary = handler.respond(parse_request(b"GET /x.html HTTP/1.1\r\n\r\n"), sink)

        assert summary.code == HTTPStatus.NOT_FOUND
        assert summary.bytes_sent == len(sink.data)

    def test_handle_malformed(self, sink, memory_resources):
        handler = StaticFileHandler(ServerConfig(), memory_resources)

        with pytest.raises(RequestLineMalformed):
            handler.handle(b"GET\r\n\r\n", sink)

        assert sink.chunks == []

    def test_serve_static_filesystem(self, sink, document_root):
        handler = serve_static(str(document_root))
        handler.handle(b"GET /docs/page.html HTTP/1.1\r\n\r\n", sink)

        assert sink.data.startswith(b"HTTP/1.1 200 OK\n")
        assert sink.data.endswith(b"<p>nested</p>\n")

    def test_path_traversal_is_not_found(self, sink, document_root):
        (document_root / "docs" / "404.html").write_bytes(b"missing\n")
        handler = serve_static(str(document_root / "docs"))
        handler.handle(b"GET /../index.html HTTP/1.1\r\n\r\n", sink)

        assert sink.data.startswith(b"HTTP/1.1 404 Not Found\n")

    @pytest.mark.parametrize("raw", [
        b"GET /a\x00b.html HTTP/1.1\r\n\r\n",
        b"GET /" + b"a" * 300 + b".html HTTP/1.1\r\n\r\n",
    ])
    def test_unusable_path_is_not_found(self, sink, document_root, raw):
        handler = serve_static(str(document_root))
        handler.handle(raw, sink)

        assert sink.data.startswith(b"HTTP/1.1 404 Not Found\n")
        assert sink.data.endswith(NOT_FOUND_HTML)
