"""Content negotiation: target representation and decompression chain."""

from collections.abc import Iterable

from body_parser.core.errors import UnsupportedEncodingError
from body_parser.decoder.transforms import TRANSFORMS, Transform
from body_parser.models.core import TargetKind
from body_parser.models.request import ContentEncoding, ContentType

type TransformChain = tuple[Transform, ...]


def negotiate_target(content_type: ContentType | None) -> TargetKind | None:
    """Map the negotiated media type to a target kind, None when not ours to decode."""
    match content_type.type if content_type else None:
        case "application/json":
            return TargetKind.JSON
        case "text/plain":
            return TargetKind.TEXT
        case "application/x-www-form-urlencoded":
            return TargetKind.FORM
        case _:
            return None


def build_chain(encodings: Iterable[ContentEncoding]) -> TransformChain:
    """Build one decompression stage per coding, in header order.

    Every token is validated before the chain is returned, so an unknown
    coding fails the request before a single byte of the body is read.
    """
    factories = []
    for entry in encodings:
        factory = TRANSFORMS.get(entry.encoding)
        if factory is None:
            raise UnsupportedEncodingError(entry.encoding)
        factories.append((entry.encoding, factory))
    return tuple(factory(label) for label, factory in factories)


def negotiate(
    content_type: ContentType | None,
    encodings: Iterable[ContentEncoding],
) -> tuple[TargetKind, TransformChain] | None:
    """Return the target kind and its chain, or None to leave the body unset.

    Raises:
        UnsupportedEncodingError: A coding is not gzip, x-gzip, deflate or br.
    """
    target = negotiate_target(content_type)
    if target is None:
        return None
    return target, build_chain(encodings)
