"""Parse step: decoded bytes into the negotiated representation."""

from collections.abc import Callable
from typing import Any
from urllib.parse import parse_qsl

import orjson
from multidict import MultiDict

from body_parser.core.errors import BodyMismatchError
from body_parser.models.core import FormBody, JsonBody, ParsedBody, TargetKind, TextBody

type JsonParser = Callable[[str], Any]


def decode_text(buffer: bytes) -> str:
    """Interpret the buffer as UTF-8, replacing invalid sequences."""
    return buffer.decode("utf-8", errors="replace")


def parse_json(text: str, parse: JsonParser = orjson.loads) -> JsonBody:
    try:
        return JsonBody(parse(text))
    except Exception as ex:
        raise BodyMismatchError(TargetKind.JSON.mime_type, str(ex)) from ex


def parse_form(text: str) -> FormBody:
    """Parse `application/x-www-form-urlencoded`.

    Permissive: a segment without ``=`` is a key with an empty value, empty
    segments are dropped, and duplicate keys keep their order.
    """
    return FormBody(MultiDict(parse_qsl(text, keep_blank_values=True, errors="replace")))


def parse_text(text: str) -> TextBody:
    return TextBody(text)


def parse_body(target: TargetKind, buffer: bytes, parse: JsonParser = orjson.loads) -> ParsedBody:
    """Convert a fully drained buffer into the target representation.

    Raises:
        BodyMismatchError: The buffer is not valid for ``target`` (JSON only).
    """
    text = decode_text(buffer)
    match target:
        case TargetKind.JSON:
            return parse_json(text, parse)
        case TargetKind.FORM:
            return parse_form(text)
        case TargetKind.TEXT:
            return parse_text(text)
