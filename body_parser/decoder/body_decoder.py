"""Request body decoder: gate, negotiation, then drain-and-parse."""

from dataclasses import dataclass, field

import orjson

from body_parser.core.errors import BodyParserError, ConfigurationError, DrainAborted
from body_parser.core.logger import LogIcon, logger
from body_parser.decoder.drain import drain
from body_parser.decoder.gate import NO_BODY_METHODS, has_body_method, is_eligible
from body_parser.decoder.negotiation import negotiate
from body_parser.decoder.parsers import JsonParser, parse_body
from body_parser.models.core import Failed, Outcome, Parsed, ParsedBody, Skipped, SkipReason, TargetKind
from body_parser.models.request import DEFAULT_METHOD, IncomingRequest

KIND_ICONS: dict[TargetKind, LogIcon] = {
    TargetKind.JSON: LogIcon.JSON,
    TargetKind.FORM: LogIcon.FORM,
    TargetKind.TEXT: LogIcon.TEXT,
}


@dataclass(frozen=True)
class DecoderConfig:
    """Decoder configuration, validated once when created."""

    parse: JsonParser = orjson.loads
    no_body_methods: frozenset[str] = field(default=NO_BODY_METHODS)

    def __post_init__(self) -> None:
        if not callable(self.parse):
            raise ConfigurationError("`parse` is not a function")


class RequestBodyDecoder:
    """Decodes one request body per call.

    Holds no per-request state, so a single instance can serve concurrent
    requests.
    """

    __slots__ = ("config",)

    def __init__(self, config: DecoderConfig | None = None) -> None:
        self.config = config or DecoderConfig()

    async def decode(self, request: IncomingRequest) -> Outcome:
        """Run every phase and return the outcome; per-request failures are returned, not raised."""
        log = logger.bind(middleware=self.__class__.__name__)
        method = getattr(request, "method", None) or DEFAULT_METHOD

        closed = request.closed
        if not is_eligible(method, closed, self.config.no_body_methods):
            if not has_body_method(method, self.config.no_body_methods):
                log.debug("Unsupported method", icon=LogIcon.SKIP, method=method)
                return Skipped(SkipReason.METHOD)
            log.debug("Skip parsing", icon=LogIcon.SKIP, closed=closed)
            return Skipped(SkipReason.CLOSED)

        content_type = request.content_type.type if request.content_type else None
        try:
            negotiated = negotiate(request.content_type, request.content_encoding)
        except BodyParserError as ex:
            log.debug("Unsupported encoding", icon=LogIcon.FORBIDDEN, error=ex.message)
            return Failed(ex)

        if negotiated is None:
            log.debug("Unsupported Content-Type", icon=LogIcon.SKIP, content_type=content_type)
            return Skipped(SkipReason.CONTENT_TYPE)

        target, chain = negotiated
        log.debug(
            "Draining request body",
            icon=LogIcon.STREAMING,
            content_type=content_type,
            encodings=[stage.label for stage in chain],
        )

        try:
            buffer = await drain(request, chain)
        except DrainAborted:
            log.debug("Connection closed while draining", icon=LogIcon.NETWORK)
            return Skipped(SkipReason.ABORTED)
        except BodyParserError as ex:
            log.debug("Decoding failed", icon=LogIcon.DECOMPRESS, error=ex.message, cause=repr(ex.cause))
            return Failed(ex)

        log.debug("Request body drained", icon=LogIcon.SUCCESS, size=len(buffer))

        try:
            body = parse_body(target, buffer, self.config.parse)
        except BodyParserError as ex:
            log.debug(
                "Request body does not match provided Content-Type",
                icon=LogIcon.VALIDATION,
                content_type=content_type,
                error=repr(ex.cause),
            )
            return Failed(ex)

        log.debug("Request body parsed", icon=KIND_ICONS[target], kind=target)
        return Parsed(body)

    async def apply(self, request: IncomingRequest) -> ParsedBody | None:
        """Decode and write the value into ``request.body``.

        Returns the parsed body, or None when the request was skipped.

        Raises:
            BodyParserError: The body cannot be decoded; ``status_code`` is 415.
        """
        match await self.decode(request):
            case Parsed(body=body):
                request.body = body.value
                return body
            case Failed(error=error):
                raise error
            case Skipped():
                return None
