"""Test fixtures for robyn-body-parser unit tests."""

import gzip
import zlib
from collections.abc import AsyncGenerator, Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

import brotli
import pytest

from body_parser.decoder.body_decoder import RequestBodyDecoder
from body_parser.models.request import ContentEncoding, ContentType, parse_content_encoding, parse_content_type

# -----------------------------------------------------------------------------
# Mock classes for Robyn Request
# -----------------------------------------------------------------------------


@dataclass
class MockHeaders:
    """Mock Headers object for Robyn Request."""

    _data: dict = field(default_factory=dict)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self._data.get(key.lower(), default)

    def set(self, key: str, value: str) -> None:
        self._data[key.lower()] = value

    def __getitem__(self, key: str) -> str:
        return self._data[key.lower()]

    def __setitem__(self, key: str, value: str) -> None:
        self._data[key.lower()] = value


@dataclass
class MockRequest:
    """Mock Request object for Robyn."""

    body: bytes | str = b""
    headers: MockHeaders = field(default_factory=MockHeaders)
    method: str = "POST"
    path: str = "/"


# -----------------------------------------------------------------------------
# Streaming request for the decoder core
# -----------------------------------------------------------------------------


@dataclass
class StreamingRequest:
    """IncomingRequest backed by an explicit list of chunks.

    ``fail_after`` raises ``error`` once that many chunks have been delivered,
    simulating a connection dropped mid-body. ``close_after`` marks the request
    closed and ends the stream quietly instead, as a host transport does when
    the peer goes away. ``reads`` counts delivered chunks.
    """

    method: str = "POST"
    content_type: ContentType | None = None
    content_encoding: list[ContentEncoding] = field(default_factory=list)
    chunks: list[bytes] = field(default_factory=list)
    closed: bool = False
    fail_after: int | None = None
    close_after: int | None = None
    error: BaseException = field(default_factory=lambda: ConnectionResetError("peer reset"))
    body: Any = None
    reads: int = 0
    finalized: bool = False

    async def stream(self) -> AsyncGenerator[bytes, None]:
        try:
            for chunk in self.chunks:
                if self.fail_after is not None and self.reads >= self.fail_after:
                    raise self.error
                if self.close_after is not None and self.reads >= self.close_after:
                    self.closed = True
                    return
                self.reads += 1
                yield chunk
        finally:
            self.finalized = True


def split(data: bytes, size: int) -> list[bytes]:
    return [data[i : i + size] for i in range(0, len(data), size)] or [b""]


def compress_chain(data: bytes, encodings: Iterable[str]) -> bytes:
    """Compress so the leftmost coding is the outermost layer."""
    for encoding in reversed(list(encodings)):
        data = COMPRESSORS[encoding](data)
    return data


COMPRESSORS: dict[str, Callable[[bytes], bytes]] = {
    "gzip": gzip.compress,
    "x-gzip": gzip.compress,
    "deflate": zlib.compress,
    "br": brotli.compress,
}


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def decoder() -> RequestBodyDecoder:
    return RequestBodyDecoder()


@pytest.fixture
def make_request() -> Callable[..., StreamingRequest]:
    """Factory fixture to create streaming requests from header strings."""

    def _make(
        body: bytes | str = b"",
        content_type: str | None = None,
        content_encoding: str | None = None,
        method: str = "POST",
        chunk_size: int = 7,
        **kwargs,
    ) -> StreamingRequest:
        if isinstance(body, str):
            body = body.encode()
        return StreamingRequest(
            method=method,
            content_type=parse_content_type(content_type),
            content_encoding=parse_content_encoding(content_encoding),
            chunks=split(body, chunk_size),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_mock_request() -> Callable[..., MockRequest]:
    """Factory fixture to create mock Robyn requests."""

    def _make(body: bytes | str = b"", method: str = "POST", **headers: str) -> MockRequest:
        mock_headers = MockHeaders()
        for name, value in headers.items():
            mock_headers[name.replace("_", "-")] = value
        return MockRequest(body=body, headers=mock_headers, method=method)

    return _make


@pytest.fixture
def compress() -> Callable[[bytes, Iterable[str]], bytes]:
    """Compress a payload for a `Content-Encoding` list, leftmost coding outermost."""
    return compress_chain
