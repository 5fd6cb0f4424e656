"""Router with automatic request body decoding, validation and response handling."""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any

import orjson
from pydantic import BaseModel, ValidationError
from robyn import Request, Response, SubRouter, status_codes
from robyn.robyn import HttpMethod

from body_parser.core.errors import BodyParserError
from body_parser.core.logger import LogIcon, logger
from body_parser.core.settings import settings as st
from body_parser.decoder.body_decoder import RequestBodyDecoder
from body_parser.models.core import PARSED_BODY_TYPES, BodyParam, JsonBody, ParsedBody
from body_parser.models.request import BufferedRequest


def from_robyn(request: Request, chunk_size: int = st.BODY_CHUNK_SIZE) -> BufferedRequest:
    """Adapt a Robyn request; Robyn hands over the body fully received."""
    headers = {name: request.headers.get(name) for name in ("content-type", "content-encoding")}
    return BufferedRequest.from_headers(request.method, headers, request.body or b"", chunk_size)


def parse_endpoint_signature(sig: inspect.Signature) -> dict[str, tuple[BodyParam, type | None]]:
    """Find the handler parameters that receive the decoded request body."""
    parsed: dict[str, tuple[BodyParam, type | None]] = {}

    for name, param in sig.parameters.items():
        annotation = param.annotation

        match annotation:
            case _ if annotation is ParsedBody:
                parsed[name] = (BodyParam.PARSED, None)
            case _ if annotation in PARSED_BODY_TYPES:
                parsed[name] = (BodyParam.PARSED, annotation)
            case type() if issubclass(annotation, BaseModel):
                parsed[name] = (BodyParam.PYDANTIC, annotation)
            case type() if annotation is dict:
                parsed[name] = (BodyParam.VALUE, None)
            case _ if name == "body":
                parsed[name] = (BodyParam.VALUE, None)

    return parsed


async def decode_request_body(
    decoder: RequestBodyDecoder,
    body_config: dict[str, tuple[BodyParam, type | None]],
    request: Request,
    kwargs: dict[str, Any],
) -> Response | None:
    """Decode the request body into the handler kwargs, or return an error response."""
    if not body_config:
        return None

    incoming = from_robyn(request)
    try:
        parsed = await decoder.apply(incoming)
    except BodyParserError as ex:
        logger.warning("Request body rejected", icon=LogIcon.ERROR, status=int(ex.status_code), error=ex.message)
        return Response(status_code=int(ex.status_code), headers={}, description="")

    for param_name, (body_param, model_cls) in body_config.items():
        match body_param:
            case BodyParam.PYDANTIC if model_cls:
                if not isinstance(parsed, JsonBody):
                    return Response(
                        status_code=status_codes.HTTP_422_UNPROCESSABLE_ENTITY,
                        headers={"content-type": "application/json"},
                        description=orjson.dumps({"error": "missing_json_body"}).decode(),
                    )
                try:
                    kwargs[param_name] = model_cls.model_validate(parsed.value)  # type: ignore[union-attr]
                except ValidationError as ex:
                    return Response(status_code=422, headers={}, description=ex.json())
            case BodyParam.PARSED if model_cls and not isinstance(parsed, model_cls):
                logger.warning("Unexpected body kind", icon=LogIcon.WARNING, expected=model_cls.kind, param=param_name)
                return Response(
                    status_code=status_codes.HTTP_422_UNPROCESSABLE_ENTITY,
                    headers={"content-type": "application/json"},
                    description=orjson.dumps({"error": f"missing_{model_cls.kind}_body"}).decode(),
                )
            case BodyParam.PARSED:
                kwargs[param_name] = parsed
            case BodyParam.VALUE:
                kwargs[param_name] = incoming.body
    return None


def parse_response(result: Any) -> Response:
    """Convert handler result to Response."""
    match result:
        case Response():
            return result
        case BaseModel():
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={"content-type": "application/json"},
                description=result.model_dump_json(indent=4),
            )
        case dict():
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={"content-type": "application/json"},
                description=orjson.dumps(result).decode(),
            )
        case _:
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={},
                description=str(result),
            )


HTTP_METHODS = (
    HttpMethod.GET,
    HttpMethod.POST,
    HttpMethod.PUT,
    HttpMethod.DELETE,
    HttpMethod.PATCH,
    HttpMethod.HEAD,
    HttpMethod.OPTIONS,
    HttpMethod.TRACE,
    HttpMethod.CONNECT,
)


def _create_method_wrapper(original_method: Callable, decoder: RequestBodyDecoder) -> Callable:
    @wraps(original_method)
    def method_wrapper(*args, **kwargs) -> Callable:
        decorator = original_method(*args, **kwargs)

        def handler_decorator(handler: Callable) -> Callable:
            sig = inspect.signature(handler)
            body_config = parse_endpoint_signature(sig)
            has_request_param = "request" in sig.parameters

            @wraps(handler)
            async def wrapped_handler(request: Request, **h_kwargs):
                if error := await decode_request_body(decoder, body_config, request, h_kwargs):
                    return error

                # Pass request to handler only if it declared it
                if has_request_param:
                    h_kwargs["request"] = request

                result = await handler(**h_kwargs)
                return parse_response(result)

            # Build signature: always include request for Robyn injection, body params are ours
            new_params = [inspect.Parameter("request", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=Request)]
            for name, param in sig.parameters.items():
                if name == "request" or name in body_config:
                    continue
                new_params.append(param)

            wrapped_handler.__signature__ = sig.replace(parameters=new_params)  # type: ignore[attr-defined]
            return decorator(wrapped_handler)

        return handler_decorator

    return method_wrapper


class Router(SubRouter):
    """Enhanced SubRouter with automatic body decoding and response handling."""

    def __init__(self, *args, decoder: RequestBodyDecoder | None = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._decoder = decoder or RequestBodyDecoder()
        self._wrap_methods()

    @property
    def decoder(self) -> RequestBodyDecoder:
        return self._decoder

    def _wrap_methods(self) -> None:
        """Wrap HTTP methods with decoding logic."""
        for method in HTTP_METHODS:
            method_name = str(method).split(".")[-1].lower()
            if hasattr(self, method_name):
                original_method = getattr(self, method_name)
                wrapped_method = _create_method_wrapper(original_method, self._decoder)
                setattr(self, method_name, wrapped_method)
