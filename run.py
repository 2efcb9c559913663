"""Unified entry point for the HTTP API and the TCP microservice.

This script launches the FastAPI application (served by Uvicorn) and
the message-pattern TCP server concurrently.  Both share one
``UserService`` so they operate on the same database.

Configuration is read from environment variables (see
``user_service_api/app/core/config.py``); a ``.env`` file in the
working directory is loaded first if present.

Usage:
    python run.py
"""
import asyncio
import logging
from typing import Optional

from dotenv import load_dotenv

# Settings are read at import time, so the .env file must be loaded first.
load_dotenv()

from uvicorn import Config, Server  # noqa: E402

from user_service_api.app.core.config import Settings, settings as default_settings  # noqa: E402
from user_service_api.app.core.db import init_db  # noqa: E402
from user_service_api.app.core.logging_config import setup_logging  # noqa: E402
from user_service_api.app.main import create_app  # noqa: E402
from user_service_api.app.microservice import create_microservice  # noqa: E402
from user_service_api.app.services.user_service import build_user_service  # noqa: E402


logger = logging.getLogger(__name__)


def build_http_server(app, settings: Settings) -> Server:
    """Wrap the FastAPI app in a Uvicorn server."""
    config = Config(
        app=app,
        host=settings.http_host,
        port=settings.http_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    return Server(config)


async def main(settings: Optional[Settings] = None) -> None:
    """Run both transports; stop the other one as soon as either exits.

    Cancelling ``main`` shuts both down as well: Uvicorn is asked to exit
    and the TCP server task is cancelled.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file or None)
    if settings.database_create_schema:
        init_db(settings.database_url)
    service = build_user_service(settings)
    http_server = build_http_server(create_app(settings, service=service), settings)
    rpc_server = create_microservice(settings, service=service)

    http_task = asyncio.create_task(http_server.serve())
    rpc_task = asyncio.create_task(rpc_server.serve_forever())
    try:
        done, _ = await asyncio.wait([http_task, rpc_task], return_when=asyncio.FIRST_COMPLETED)
        for task in done:
            if exception := task.exception():
                logger.error("Exception in service", exc_info=exception)
    finally:
        http_server.should_exit = True
        rpc_task.cancel()
        await asyncio.gather(http_task, rpc_task, return_exceptions=True)
        await rpc_server.close()
        logger.info("Both transports stopped")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
