"""Error taxonomy for request body decoding."""

from http import HTTPStatus


class BodyParserError(Exception):
    """A request body could not be decoded.

    Every per-request failure is terminal for the body and is rendered by the
    host as ``415 Unsupported Media Type`` with an empty response body. The
    underlying codec or parser error, if any, is chained as ``__cause__``.
    """

    status_code: int = HTTPStatus.UNSUPPORTED_MEDIA_TYPE

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class UnsupportedEncodingError(BodyParserError):
    """A `Content-Encoding` token is not one of the supported codings."""

    def __init__(self, encoding: str) -> None:
        super().__init__(f"Unsupported content encoding: {encoding!r}")
        self.encoding = encoding


class DecompressionError(BodyParserError):
    """A transform stage rejected its compressed input."""

    def __init__(self, stage: str, reason: str = "", index: int | None = None) -> None:
        where = f"{stage!r} stage" if index is None else f"{stage!r} stage #{index}"
        super().__init__(f"Failed to decode {where}" + (f": {reason}" if reason else ""))
        self.stage = stage
        self.index = index


class BodyMismatchError(BodyParserError):
    """The decoded body does not match the declared `Content-Type`."""

    def __init__(self, content_type: str, reason: str = "") -> None:
        super().__init__(f"Request body does not match {content_type!r}" + (f": {reason}" if reason else ""))
        self.content_type = content_type


class ConfigurationError(TypeError):
    """Invalid decoder configuration, raised once at construction time."""


class DrainAborted(Exception):
    """The connection went away while the body was being drained."""
