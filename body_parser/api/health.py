"""Health check endpoint."""

from pydantic import BaseModel

from body_parser.core.logger import LogIcon, logger
from body_parser.core.router import Router
from body_parser.core.settings import settings as st
from body_parser.decoder.transforms import supported_encodings

router = Router(__file__, prefix="/")


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    service: str
    version: str
    encodings: list[str]


@router.get("/health")
async def health_check() -> HealthResponse:
    logger.info("Health check requested", icon=LogIcon.HEALTHCHECK)
    return HealthResponse(
        status="healthy",
        service=st.API_NAME,
        version=st.API_VERSION,
        encodings=supported_encodings(),
    )
