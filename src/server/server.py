"""Server bootstrap for the upload relay.

Creates the FastAPI instance, wires the GitHub gateway factory into the
relay routes, mounts the browser page and starts uvicorn.
"""

import logging
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config import HOST, LOG_LEVEL, PORT, STAGING_DIR

from routes.common import GatewayFactory, default_gateway_factory
from routes.check_repo import register as register_check_repo
from routes.create_repo import register as register_create_repo
from routes.health import register as register_health
from routes.ui import register as register_ui
from routes.upload import register as register_upload

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


async def _unhandled(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"success": False, "error": "Internal server error"})


def create_app(
    *,
    gateway_factory: Optional[GatewayFactory] = None,
    staging_dir: Optional[Path] = None,
) -> FastAPI:
    app = FastAPI(
        title="GitHub Uploader Relay",
        description="Relays browser uploads to the GitHub contents API",
        version="1.0.0",
    )
    factory = gateway_factory or default_gateway_factory

    register_health(app)
    register_check_repo(app, gateway_factory=factory)
    register_create_repo(app, gateway_factory=factory)
    register_upload(app, gateway_factory=factory, staging_dir=Path(staging_dir or STAGING_DIR))
    register_ui(app, static_dir=STATIC_DIR)

    app.add_exception_handler(Exception, _unhandled)
    return app


app = create_app()


def main(host: str = HOST, port: int = PORT) -> None:
    # replaces any handler the CLI group installed before `serve` ran
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        force=True,
    )
    logger.info("Starting upload relay on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_level=LOG_LEVEL.lower(), access_log=True)


if __name__ == "__main__":
    main()
