"""
Registration table for message patterns.

A pattern is either a plain string (``"get_users"``) or a JSON object
(``{"cmd": "get_users"}``).  Patterns are normalized to a canonical
string before they are stored or looked up, so key order in incoming
objects does not matter.

``MessageRouter.dispatch`` turns one decoded request into one reply
dict (or ``None`` for events, which carry no ``id``).
"""

import json
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi.encoders import jsonable_encoder

from user_service_api.app.core.errors import UserServiceError


logger = logging.getLogger(__name__)

MessageHandler = Callable[[Any], Awaitable[Any]]

NO_HANDLER_ERROR = "There is no matching message handler defined in the remote service."


def normalize_pattern(pattern: Any) -> str:
    """Return the canonical routing key for ``pattern``."""
    if isinstance(pattern, str):
        return pattern
    if isinstance(pattern, (dict, list)):
        return json.dumps(pattern, sort_keys=True, separators=(",", ":"))
    return str(pattern)


class MessageRouter:
    """Maps normalized patterns to coroutine handlers."""

    def __init__(self) -> None:
        self._handlers: Dict[str, MessageHandler] = {}

    def add(self, pattern: Any, handler: MessageHandler) -> None:
        key = normalize_pattern(pattern)
        if key in self._handlers:
            raise ValueError(f"Handler already registered for pattern {key}")
        self._handlers[key] = handler

    def get(self, pattern: Any) -> Optional[MessageHandler]:
        return self._handlers.get(normalize_pattern(pattern))

    @property
    def patterns(self) -> list:
        return sorted(self._handlers)

    async def dispatch(self, message: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Run the handler for ``message`` and build the reply.

        Replies carry either ``response`` or ``err``.  Messages without
        an ``id`` are events: the handler runs but no reply is built.
        """
        request_id = message.get("id")
        pattern = message.get("pattern")
        handler = self.get(pattern)
        if handler is None:
            logger.warning("No handler for pattern %s", normalize_pattern(pattern))
            return self._reply(request_id, err=NO_HANDLER_ERROR)

        try:
            result = await handler(message.get("data"))
        except UserServiceError as e:
            if e.code == "persistence_error":
                logger.error("Pattern %s failed: %s", normalize_pattern(pattern), e.message)
            else:
                logger.info("Pattern %s rejected: %s", normalize_pattern(pattern), e.message)
            return self._reply(request_id, err=e.to_payload())
        except Exception:
            logger.exception("Unhandled error in handler for %s", normalize_pattern(pattern))
            return self._reply(
                request_id,
                err={"status": "error", "code": "internal_error", "message": "Internal server error"},
            )
        return self._reply(request_id, response=jsonable_encoder(result))

    @staticmethod
    def _reply(request_id: Any, response: Any = None, err: Any = None) -> Optional[Dict[str, Any]]:
        if request_id is None:
            return None
        reply: Dict[str, Any] = {"id": request_id, "isDisposed": True}
        if err is not None:
            reply["err"] = err
        else:
            reply["response"] = response
        return reply
