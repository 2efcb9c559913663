"""
Top-level package for the User Service.

All functionality lives in submodules under ``app``: the HTTP API is
``user_service_api.app.main:app`` and the TCP message-pattern server
is built by ``user_service_api.app.microservice.create_microservice``.
"""

__all__ = []
