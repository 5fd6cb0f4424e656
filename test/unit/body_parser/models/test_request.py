"""Tests for request header parsing."""

import pytest

from body_parser.models.request import (
    BufferedRequest,
    ContentEncoding,
    ContentType,
    parse_content_encoding,
    parse_content_type,
)


class TestParseContentType:
    """Tests for parse_content_type function."""

    def test_plain_type(self) -> None:
        """Verify a bare media type is parsed."""
        assert parse_content_type("text/plain") == ContentType("text/plain", {})

    def test_type_is_lowercased_and_params_parsed(self) -> None:
        """Verify the type token is normalized and parameters are kept."""
        content_type = parse_content_type('Application/JSON ; Charset="UTF-8"; boundary=x')

        assert content_type.type == "application/json"
        assert content_type.params == {"charset": "UTF-8", "boundary": "x"}

    @pytest.mark.parametrize("value", [None, "", "   ", "; charset=utf-8"])
    def test_missing_type(self, value: str | None) -> None:
        """Verify empty headers give no content type."""
        assert parse_content_type(value) is None


class TestParseContentEncoding:
    """Tests for parse_content_encoding function."""

    def test_header_order_is_kept(self) -> None:
        """Verify codings are split, trimmed and kept in order."""
        assert parse_content_encoding("br, x-gzip,gzip ,  deflate") == [
            ContentEncoding("br"),
            ContentEncoding("x-gzip"),
            ContentEncoding("gzip"),
            ContentEncoding("deflate"),
        ]

    def test_tokens_are_lowercased(self) -> None:
        """Verify coding tokens are case-insensitive."""
        assert parse_content_encoding("GZip") == [ContentEncoding("gzip")]

    @pytest.mark.parametrize("value", [None, "", " , ,"])
    def test_empty(self, value: str | None) -> None:
        """Verify empty headers give no codings."""
        assert parse_content_encoding(value) == []


class TestBufferedRequest:
    """Tests for BufferedRequest."""

    def test_from_headers_defaults_method(self) -> None:
        """Verify a missing method defaults to GET."""
        request = BufferedRequest.from_headers(None, {}, "body")

        assert request.method == "GET"
        assert request.raw_body == b"body"
        assert request.body is None

    async def test_empty_body_yields_nothing(self) -> None:
        """Verify an empty body produces no chunks."""
        assert [chunk async for chunk in BufferedRequest().stream()] == []
