"""
Asyncio client for the message-pattern transport.

Usage::

    async with MessageClient("localhost", 3001) as client:
        users = await client.send({"cmd": "get_users"})

Requests are correlated with replies by a random ``id`` so several
``send`` calls may be in flight on one connection.
"""

import asyncio
import logging
import uuid
from typing import Any, Dict, Optional

from user_service_api.app.core.errors import InvalidArgumentError

from .codec import FrameDecoder, encode_frame


logger = logging.getLogger(__name__)


class RpcError(Exception):
    """Raised when the remote handler replied with ``err``."""

    def __init__(self, error: Any) -> None:
        message = error.get("message") if isinstance(error, dict) else str(error)
        super().__init__(message)
        self.error = error

    @property
    def code(self) -> Optional[str]:
        return self.error.get("code") if isinstance(self.error, dict) else None


class MessageClient:
    def __init__(self, host: str = "localhost", port: int = 3001) -> None:
        self.host = host
        self.port = port
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._pending: Dict[str, asyncio.Future] = {}
        self._read_task: Optional[asyncio.Task] = None

    async def connect(self) -> None:
        self._reader, self._writer = await asyncio.open_connection(self.host, self.port)
        self._read_task = asyncio.create_task(self._read_replies())

    async def close(self) -> None:
        if self._writer is not None:
            self._writer.close()
            try:
                await self._writer.wait_closed()
            except ConnectionError as e:
                logger.debug("Connection reset while closing: %s", e)
        if self._read_task is not None:
            self._read_task.cancel()
            await asyncio.gather(self._read_task, return_exceptions=True)
        self._fail_pending(ConnectionError("Client closed"))
        self._reader = self._writer = self._read_task = None

    async def __aenter__(self) -> "MessageClient":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def send(self, pattern: Any, data: Any = None, timeout: Optional[float] = None) -> Any:
        """Send a request and wait for its ``response``.

        Raises ``RpcError`` if the remote side replied with ``err``.
        """
        if self._writer is None:
            raise ConnectionError("Client is not connected")
        request_id = uuid.uuid4().hex
        future = asyncio.get_running_loop().create_future()
        self._pending[request_id] = future
        try:
            self._writer.write(encode_frame({"pattern": pattern, "data": data, "id": request_id}))
            await self._writer.drain()
            reply = await asyncio.wait_for(future, timeout)
        finally:
            self._pending.pop(request_id, None)
        if reply.get("err") is not None:
            raise RpcError(reply["err"])
        return reply.get("response")

    async def emit(self, pattern: Any, data: Any = None) -> None:
        """Send an event; no reply is expected."""
        if self._writer is None:
            raise ConnectionError("Client is not connected")
        self._writer.write(encode_frame({"pattern": pattern, "data": data}))
        await self._writer.drain()

    async def _read_replies(self) -> None:
        decoder = FrameDecoder()
        try:
            while True:
                data = await self._reader.read(64 * 1024)
                if not data:
                    break
                for reply in decoder.feed(data):
                    future = self._pending.get(reply.get("id"))
                    if future is not None and not future.done():
                        future.set_result(reply)
        except (ConnectionError, InvalidArgumentError) as e:
            logger.warning("Reply stream from %s:%s failed: %s", self.host, self.port, e)
            self._fail_pending(e)
            return
        self._fail_pending(ConnectionError("Connection closed by server"))

    def _fail_pending(self, exc: BaseException) -> None:
        for future in self._pending.values():
            if not future.done():
                future.set_exception(exc)
