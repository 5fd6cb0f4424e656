"""Core models for request body decoding."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, ClassVar

from multidict import MultiDict

from body_parser.core.errors import BodyParserError

CT_JSON = "application/json"
CT_TEXT = "text/plain"
CT_FORM = "application/x-www-form-urlencoded"


class TargetKind(StrEnum):
    """Representation a request body is decoded into."""

    JSON = "json"
    TEXT = "text"
    FORM = "form"

    @property
    def mime_type(self) -> str:
        match self:
            case TargetKind.JSON:
                return CT_JSON
            case TargetKind.TEXT:
                return CT_TEXT
            case TargetKind.FORM:
                return CT_FORM


class BodyParam(StrEnum):
    """How a handler parameter receives the decoded request body."""

    PYDANTIC = "pydantic"
    PARSED = "parsed"
    VALUE = "value"


class SkipReason(StrEnum):
    """Why a request body was left unset."""

    METHOD = "method"
    CLOSED = "closed"
    CONTENT_TYPE = "content_type"
    ABORTED = "aborted"


@dataclass(frozen=True, slots=True)
class JsonBody:
    kind: ClassVar[TargetKind] = TargetKind.JSON
    value: Any


@dataclass(frozen=True, slots=True)
class FormBody:
    kind: ClassVar[TargetKind] = TargetKind.FORM
    value: MultiDict[str]


@dataclass(frozen=True, slots=True)
class TextBody:
    kind: ClassVar[TargetKind] = TargetKind.TEXT
    value: str


type ParsedBody = JsonBody | FormBody | TextBody

PARSED_BODY_TYPES: tuple[type, ...] = (JsonBody, FormBody, TextBody)


@dataclass(frozen=True, slots=True)
class Skipped:
    """No body was produced; the request continues with the body unset."""

    reason: SkipReason


@dataclass(frozen=True, slots=True)
class Parsed:
    body: ParsedBody


@dataclass(frozen=True, slots=True)
class Failed:
    """Decoding failed; the host answers with ``error.status_code``."""

    error: BodyParserError


type Outcome = Skipped | Parsed | Failed
