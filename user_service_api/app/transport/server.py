"""
TCP server for message-pattern requests.

``MessagePatternServer`` accepts connections with ``asyncio``, decodes
length-prefixed frames and hands each message to a ``MessageRouter``.
Messages are processed concurrently; replies are written back on the
same connection as soon as their handler finishes, so reply order is
not guaranteed to match request order (clients correlate by ``id``).
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Set

from user_service_api.app.core.errors import InvalidArgumentError

from .codec import FrameDecoder, encode_frame
from .router import MessageRouter


logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 64 * 1024


class MessagePatternServer:
    """Serve a ``MessageRouter`` over TCP."""

    def __init__(self, router: MessageRouter, host: str = "localhost", port: int = 3001) -> None:
        self.router = router
        self.host = host
        self.port = port
        self._server: Optional[asyncio.AbstractServer] = None

    @property
    def bound_port(self) -> int:
        """Port actually bound; differs from ``port`` when ``port`` is 0."""
        if self._server is None or not self._server.sockets:
            raise RuntimeError("Server is not running")
        return self._server.sockets[0].getsockname()[1]

    async def start(self) -> None:
        self._server = await asyncio.start_server(self._handle_connection, self.host, self.port)
        logger.info("Message-pattern server listening on %s:%s", self.host, self.bound_port)

    async def serve_forever(self) -> None:
        if self._server is None:
            await self.start()
        async with self._server:
            await self._server.serve_forever()

    async def close(self) -> None:
        if self._server is None:
            return
        self._server.close()
        await self._server.wait_closed()
        self._server = None
        logger.info("Message-pattern server stopped")

    async def __aenter__(self) -> "MessagePatternServer":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _handle_connection(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        peer = writer.get_extra_info("peername")
        logger.debug("Connection from %s", peer)
        decoder = FrameDecoder()
        tasks: Set[asyncio.Task] = set()
        try:
            while True:
                data = await reader.read(READ_CHUNK_SIZE)
                if not data:
                    break
                try:
                    messages = decoder.feed(data)
                except InvalidArgumentError as e:
                    logger.warning("Dropping connection from %s: %s", peer, e.message)
                    break
                for message in messages:
                    task = asyncio.create_task(self._process(message, writer))
                    tasks.add(task)
                    task.add_done_callback(tasks.discard)
            if tasks:
                await asyncio.gather(*tasks)
        except ConnectionError as e:
            logger.debug("Connection from %s lost: %s", peer, e)
        finally:
            for task in tasks:
                task.cancel()
            writer.close()
            try:
                await writer.wait_closed()
            except ConnectionError as e:
                logger.debug("Connection from %s reset while closing: %s", peer, e)
            logger.debug("Connection from %s closed", peer)

    async def _process(self, message: Dict[str, Any], writer: asyncio.StreamWriter) -> None:
        reply = await self.router.dispatch(message)
        if reply is None or writer.is_closing():
            return
        writer.write(encode_frame(reply))
        await writer.drain()
