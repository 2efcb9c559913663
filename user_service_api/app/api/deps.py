"""
Shared FastAPI dependencies.

``get_user_service`` hands routes the ``UserService`` instance wired
up in ``create_app``.  ``path_user_id`` converts the textual path
identifier into an integer before anything touches storage.
"""

import re

from fastapi import Path, Request

from user_service_api.app.core.errors import InvalidArgumentError
from user_service_api.app.services.user_service import UserService


_DECIMAL_RE = re.compile(r"[0-9]+")

# Largest value SQLite can store in an INTEGER column.
MAX_USER_ID = 2**63 - 1


def parse_user_id(raw: str) -> int:
    """Convert a decimal string into a user id.

    Raises ``InvalidArgumentError`` for anything that is not a plain
    run of ASCII digits or that does not fit a 64-bit signed integer.
    """
    if not isinstance(raw, str) or not _DECIMAL_RE.fullmatch(raw):
        raise InvalidArgumentError(f"Invalid user id: {raw!r}")
    value = int(raw)
    if value > MAX_USER_ID:
        raise InvalidArgumentError(f"User id out of range: {raw}")
    return value


def path_user_id(user_id: str = Path(..., description="Numeric user id")) -> int:
    return parse_user_id(user_id)


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service
