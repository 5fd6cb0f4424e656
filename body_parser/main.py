"""robyn-body-parser - request body decoding for Robyn."""

from robyn import Robyn

from body_parser.api.echo import router as echo_router
from body_parser.api.health import router as health_router
from body_parser.core.logger import LogIcon, logger
from body_parser.core.settings import settings as st

app = Robyn(__file__)

# Routers
app.include_router(health_router)
app.include_router(echo_router)


def main() -> None:
    logger.info("Starting %s | HOST=%s | PORT=%s", st.API_NAME, st.API_HOST, st.API_PORT, icon=LogIcon.START)
    app.start(host=st.API_HOST, port=st.API_PORT)


if __name__ == "__main__":
    main()
