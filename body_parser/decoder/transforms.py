"""Incremental decompression stages used by the transform chain.

Each stage is fed compressed chunks in arrival order and returns whatever
output is ready. ``flush()`` is called once at end-of-stream and raises when
the compressed stream is incomplete, so a truncated body never decodes to a
silently shorter one.
"""

import zlib
from typing import Protocol

import brotli


class Transform(Protocol):
    label: str

    def feed(self, data: bytes) -> bytes:
        """Decompress the next chunk."""
        ...

    def flush(self) -> bytes:
        """Finish the stream, raising if it ended prematurely."""
        ...

    def close(self) -> None:
        """Release the codec state."""
        ...


class GzipTransform:
    """Gzip decompression, accepting concatenated gzip members."""

    __slots__ = ("label", "_decompressor")

    def __init__(self, label: str = "gzip") -> None:
        self.label = label
        self._decompressor = zlib.decompressobj(zlib.MAX_WBITS | 16)

    def feed(self, data: bytes) -> bytes:
        chunks: list[bytes] = []
        while data:
            chunks.append(self._decompressor.decompress(data))
            if not self._decompressor.eof:
                break
            # next gzip member
            data = self._decompressor.unused_data
            if data:
                self._decompressor = zlib.decompressobj(zlib.MAX_WBITS | 16)
        return b"".join(chunks)

    def flush(self) -> bytes:
        tail = self._decompressor.flush()
        if not self._decompressor.eof:
            raise ValueError("Gzip stream is truncated")
        return tail

    def close(self) -> None:
        self._decompressor = None


class InflateTransform:
    """Zlib (RFC 1950) decompression for the `deflate` coding."""

    __slots__ = ("label", "_decompressor")

    def __init__(self, label: str = "deflate") -> None:
        self.label = label
        self._decompressor = zlib.decompressobj()

    def feed(self, data: bytes) -> bytes:
        if self._decompressor.eof:
            raise ValueError("Unexpected data after end of deflate stream")
        result = self._decompressor.decompress(data)
        if self._decompressor.unused_data:
            raise ValueError("Unexpected data after end of deflate stream")
        return result

    def flush(self) -> bytes:
        tail = self._decompressor.flush()
        if not self._decompressor.eof:
            raise ValueError("Deflate stream is truncated")
        return tail

    def close(self) -> None:
        self._decompressor = None


class BrotliTransform:
    __slots__ = ("label", "_decompressor")

    def __init__(self, label: str = "br") -> None:
        self.label = label
        self._decompressor = brotli.Decompressor()

    def feed(self, data: bytes) -> bytes:
        if self._decompressor.is_finished():
            raise ValueError("Unexpected data after end of brotli stream")
        return self._decompressor.process(data)

    def flush(self) -> bytes:
        if not self._decompressor.is_finished():
            raise ValueError("Brotli stream is truncated")
        return b""

    def close(self) -> None:
        self._decompressor = None


TRANSFORMS: dict[str, type[Transform]] = {
    "gzip": GzipTransform,
    "x-gzip": GzipTransform,
    "deflate": InflateTransform,
    "br": BrotliTransform,
}


def supported_encodings() -> list[str]:
    return sorted(TRANSFORMS.keys())
