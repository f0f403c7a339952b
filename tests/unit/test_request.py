"""
Unit tests for HTTP request decoding.
"""

import pytest

from fileserver.errors import RequestLineMalformed, ServeError
from fileserver.http.request import (
    HeaderField,
    RequestLine,
    parse_header_lines,
    parse_request,
    parse_request_line,
)


class TestRequestLine:
    """Tests for request line parsing."""

    def test_three_tokens(self):
        """Test a well-formed request line."""
        line = parse_request_line("GET /index.html HTTP/1.1")

        assert line == RequestLine("GET", "/index.html", "HTTP/1.1")

    def test_method_not_validated(self):
        """Any method token is accepted at this stage."""
        line = parse_request_line("BREW /pot HTTP/1.0")
        assert line.method == "BREW"

    @pytest.mark.parametrize("line", [
        "",
        "GET",
        "GET /",
        "GET / HTTP/1.1 extra",
        "GET  / HTTP/1.1",
        " GET / HTTP/1.1",
        "GET / HTTP/1.1 ",
    ])
    def test_malformed(self, line):
        """Anything but exactly three non-empty tokens is rejected."""
        with pytest.raises(RequestLineMalformed):
            parse_request_line(line)

    def test_malformed_maps_to_400(self):
        with pytest.raises(ServeError) as exc_info:
            parse_request_line("nonsense")

        assert exc_info.value.status_code == 400


class TestHeaderLines:
    """Tests for header field parsing."""

    def test_split_on_first_colon(self):
        """Test that values keep their own colons."""
        headers = parse_header_lines(["Host: localhost:8080"])

        assert headers == [HeaderField("Host", "localhost:8080")]

    def test_stops_at_empty_line(self):
        headers = parse_header_lines(["A: 1", "", "B: 2"])

        assert [h.name for h in headers] == ["A"]

    def test_line_without_colon_skipped(self):
        headers = parse_header_lines(["garbage", "A: 1"])

        assert headers == [HeaderField("A", "1")]

    def test_order_and_duplicates_retained(self):
        headers = parse_header_lines(["X: 1", "Y: 2", "X: 3"])

        assert [(h.name, h.value) for h in headers] == [("X", "1"), ("Y", "2"), ("X", "3")]


class TestParseRequest:
    """Tests for full request head decoding."""

    def test_parse_get_request(self, sample_get_request):
        """Test parsing a simple GET request."""
        request = parse_request(sample_get_request)

        assert request.method == "GET"
        assert request.path == "/logo.gif"
        assert request.version == "HTTP/1.1"
        assert len(request.headers) == 3

    def test_header_lookup_case_insensitive(self, sample_get_request):
        request = parse_request(sample_get_request)

        assert request.get_header("user-agent") == "pytest"
        assert request.get_header("HOST") == "localhost:8080"
        assert request.get_header("X-Missing") is None
        assert request.get_header("X-Missing", "default") == "default"

    def test_get_all(self):
        request = parse_request(b"GET / HTTP/1.1\r\nAccept: a\r\nAccept: b\r\n\r\n")

        assert request.get_all("accept") == ["a", "b"]
        assert request.get_header("accept") == "a"

    def test_bare_lf_line_endings(self):
        """Lines ending in a lone LF are accepted."""
        request = parse_request(b"GET /a.gif HTTP/1.0\nHost: x\n\n")

        assert request.path == "/a.gif"
        assert request.version == "HTTP/1.0"
        assert request.get_header("Host") == "x"

    def test_no_headers(self):
        request = parse_request(b"GET / HTTP/1.1\r\n\r\n")

        assert request.headers == []

    def test_incomplete_head(self):
        """A head cut off mid-header still yields the request line."""
        request = parse_request(b"GET / HTTP/1.1\r\nHost: local")

        assert request.path == "/"
        assert request.get_header("Host") == "local"

    def test_body_ignored(self):
        request = parse_request(b"GET / HTTP/1.1\r\n\r\nNot: a header\r\n")

        assert request.headers == []

    def test_invalid_utf8_does_not_raise(self):
        request = parse_request(b"GET /caf\xe9.html HTTP/1.1\r\n\r\n")

        assert request.path.startswith("/caf")
        assert request.path.endswith(".html")

    def test_empty_request_malformed(self):
        with pytest.raises(RequestLineMalformed):
            parse_request(b"")

    def test_malformed_request_line(self):
        with pytest.raises(RequestLineMalformed):
            parse_request(b"GET\r\nHost: x\r\n\r\n")
