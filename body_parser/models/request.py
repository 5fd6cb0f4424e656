"""Request-side models: parsed headers and the request protocol the decoder reads from."""

from collections.abc import AsyncGenerator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, NamedTuple, Protocol

DEFAULT_METHOD = "GET"


class ContentType(NamedTuple):
    """Parsed `Content-Type` header."""

    type: str
    params: dict[str, str]


class ContentEncoding(NamedTuple):
    """One coding of the `Content-Encoding` header."""

    encoding: str


def parse_content_type(value: str | None) -> ContentType | None:
    """Parse a `Content-Type` header into its media type token and parameters."""
    if not value:
        return None

    media_type, *raw_params = value.split(";")
    media_type = media_type.strip().lower()
    if not media_type:
        return None

    params: dict[str, str] = {}
    for raw in raw_params:
        name, sep, param_value = raw.partition("=")
        name = name.strip().lower()
        if name and sep:
            params[name] = param_value.strip().strip('"')

    return ContentType(type=media_type, params=params)


def parse_content_encoding(value: str | None) -> list[ContentEncoding]:
    """Split a `Content-Encoding` header into codings, in header order."""
    if not value:
        return []
    return [ContentEncoding(token.strip().lower()) for token in value.split(",") if token.strip()]


class IncomingRequest(Protocol):
    """What the decoder needs from a host request.

    The decoder never owns the request: it reads the fields below and, on
    success, writes ``body`` exactly once.
    """

    method: str
    content_type: ContentType | None
    content_encoding: Sequence[ContentEncoding]
    body: Any

    @property
    def closed(self) -> bool: ...

    def stream(self) -> AsyncGenerator[bytes, None]:
        """Fresh async generator over the raw body chunks."""
        ...


@dataclass
class BufferedRequest:
    """Request whose body has already been received in full by the host."""

    method: str = DEFAULT_METHOD
    content_type: ContentType | None = None
    content_encoding: list[ContentEncoding] = field(default_factory=list)
    raw_body: bytes = b""
    chunk_size: int = 64 * 1024
    closed: bool = False
    body: Any = None

    @classmethod
    def from_headers(
        cls,
        method: str | None,
        headers: Mapping[str, str | None],
        raw_body: bytes | str,
        chunk_size: int = 64 * 1024,
    ) -> "BufferedRequest":
        """Build from a header mapping with lowercase names."""
        if isinstance(raw_body, str):
            raw_body = raw_body.encode()
        return cls(
            method=method or DEFAULT_METHOD,
            content_type=parse_content_type(headers.get("content-type")),
            content_encoding=parse_content_encoding(headers.get("content-encoding")),
            raw_body=bytes(raw_body),
            chunk_size=chunk_size,
        )

    async def stream(self) -> AsyncGenerator[bytes, None]:
        for i in range(0, len(self.raw_body), self.chunk_size):
            yield self.raw_body[i : i + self.chunk_size]
