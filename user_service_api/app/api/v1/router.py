"""
Top-level router for version 1 of the HTTP API.

This router aggregates domain-specific routers.  The users router is
included without a prefix so its routes sit directly under the mount
point chosen in ``create_app`` (``API_PREFIX``, empty by default).
"""

from fastapi import APIRouter

from .endpoints import users

router = APIRouter()

router.include_router(users.router, tags=["users"])
