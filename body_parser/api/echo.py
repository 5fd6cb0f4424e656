"""Echo endpoints returning the decoded request body."""

from body_parser.core.logger import LogIcon, logger
from body_parser.core.router import Router
from body_parser.models.core import FormBody, JsonBody, ParsedBody, TextBody

router = Router(__file__, prefix="/")


def describe_body(body: ParsedBody | None) -> dict:
    """JSON-friendly view of a decoded body; form pairs keep duplicates and order."""
    match body:
        case None:
            return {"kind": None, "body": None}
        case FormBody(value=form):
            return {"kind": body.kind, "body": [[key, value] for key, value in form.items()]}
        case JsonBody(value=value) | TextBody(value=value):
            return {"kind": body.kind, "body": value}


@router.post("/echo")
async def echo_post(body: ParsedBody) -> dict:
    logger.info("Echo requested", icon=LogIcon.PROCESSING, kind=body.kind if body else None)
    return describe_body(body)


@router.put("/echo")
async def echo_put(body: ParsedBody) -> dict:
    return describe_body(body)


@router.patch("/echo")
async def echo_patch(body: ParsedBody) -> dict:
    return describe_body(body)


@router.delete("/echo")
async def echo_delete(body: ParsedBody) -> dict:
    return describe_body(body)
