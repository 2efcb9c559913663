"""
Entrypoint for the TCP message-pattern microservice.

``create_microservice`` wires the repository, service and message
handlers together and returns a ``MessagePatternServer`` that is ready
to ``start``.  Run it standalone with::

    python -m user_service_api.app.microservice
"""

import asyncio
import logging
from typing import Optional

from .api.rpc.users import register_user_handlers
from .core.config import Settings, settings as default_settings
from .core.db import init_db
from .core.logging_config import setup_logging
from .services.user_service import UserService, build_user_service
from .transport.router import MessageRouter
from .transport.server import MessagePatternServer


logger = logging.getLogger(__name__)


def create_microservice(
    settings: Optional[Settings] = None,
    service: Optional[UserService] = None,
) -> MessagePatternServer:
    """Build the message-pattern server.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use; defaults to the module-level settings.
    service : Optional[UserService]
        Pre-built service to share with the HTTP application.  When
        omitted a new one is built from ``settings``.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file or None)
    if service is None:
        if settings.database_create_schema:
            init_db(settings.database_url)
        service = build_user_service(settings)

    router = MessageRouter()
    register_user_handlers(router, service)
    logger.debug("Registered message patterns: %s", ", ".join(router.patterns))
    return MessagePatternServer(router, host=settings.rpc_host, port=settings.rpc_port)


async def main() -> None:
    server = create_microservice()
    await server.serve_forever()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Interrupted")
