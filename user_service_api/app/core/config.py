"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts without any configuration for local development.
``run.py`` loads a ``.env`` file (python-dotenv) before this module is
imported, so values placed there are picked up as well.
"""

import os
from dataclasses import dataclass


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "User Service")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _env_bool("DEBUG")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Prefix under which the HTTP routes are mounted.  Empty by default so
    # users live at ``/`` and ``/{id}``.
    api_prefix: str = os.getenv("API_PREFIX", "")

    http_host: str = os.getenv("HTTP_HOST", "0.0.0.0")
    http_port: int = int(os.getenv("HTTP_PORT", "3000"))

    # Address of the TCP message-pattern listener.
    rpc_host: str = os.getenv("RPC_HOST", "localhost")
    rpc_port: int = int(os.getenv("RPC_PORT", "3001"))

    # Path to the SQLite database file.  A relative path is resolved
    # against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "users.db")

    # The ``users`` table is expected to exist already.  Set
    # DATABASE_CREATE_SCHEMA=true to have ``init_db`` create it on startup.
    database_create_schema: bool = _env_bool("DATABASE_CREATE_SCHEMA")


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Environment variables must
# be set before importing this module; tests build their own ``Settings``.
settings = Settings()
