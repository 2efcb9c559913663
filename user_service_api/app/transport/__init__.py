"""
Message-pattern transport over TCP.

``codec`` frames JSON messages, ``router`` maps patterns to handlers,
``server`` and ``client`` move frames over asyncio streams.
"""

from .client import MessageClient, RpcError
from .router import MessageRouter, normalize_pattern
from .server import MessagePatternServer

__all__ = ["MessageClient", "MessagePatternServer", "MessageRouter", "RpcError", "normalize_pattern"]
