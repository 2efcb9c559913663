"""
Main entrypoint for the User Service HTTP API.

This module assembles the FastAPI application, sets up logging, wires
the ``UserService`` and includes the versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``, e.g.::

    uvicorn user_service_api.app.main:app --reload

The message-pattern side of the service lives in ``microservice``;
``run.py`` at the project root starts both.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.db import init_db
from .core.errors import InvalidArgumentError, PersistenceError
from .core.logging_config import setup_logging
from .services.user_service import UserService, build_user_service


logger = logging.getLogger(__name__)


def register_exception_handlers(app: FastAPI) -> None:
    """Map service errors that routes do not handle onto HTTP responses."""

    @app.exception_handler(InvalidArgumentError)
    async def invalid_argument_handler(request: Request, exc: InvalidArgumentError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": exc.message, "code": exc.code},
        )

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        if exc.constraint_violation:
            return JSONResponse(
                status_code=status.HTTP_409_CONFLICT,
                content={"detail": "User violates a storage constraint", "code": exc.code},
            )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "User storage is unavailable", "code": exc.code},
        )


def create_app(settings: Optional[Settings] = None, service: Optional[UserService] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use; defaults to the module-level settings.
    service : Optional[UserService]
        Pre-built service, e.g. one shared with the TCP microservice.
        When omitted a new one is built from ``settings``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    # Initialise logging before anything else so that the setup below
    # can log.
    setup_logging(settings.log_level, settings.log_file or None)

    if service is None:
        if settings.database_create_schema:
            init_db(settings.database_url)
        service = build_user_service(settings)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)
    app.state.settings = settings
    app.state.user_service = service

    register_exception_handlers(app)
    app.include_router(v1_router, prefix=settings.api_prefix)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can find it.
app = create_app()
