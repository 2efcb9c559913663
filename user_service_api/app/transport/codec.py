"""
Framing for the message-pattern TCP transport.

Every message is a JSON object preceded by its length and a ``#``
separator, e.g. ``31#{"pattern":{"cmd":"get_users"}}``.  The length
counts characters of the JSON text.  Outgoing JSON is ASCII-only, so
for frames written by this module the character count equals the
byte count.
"""

import codecs
import json
from typing import Any, Dict, List

from user_service_api.app.core.errors import InvalidArgumentError


DELIMITER = "#"

# Frames longer than this are rejected before any body is buffered.
MAX_FRAME_LENGTH = 16 * 1024 * 1024
_MAX_LENGTH_DIGITS = len(str(MAX_FRAME_LENGTH))


def _is_length(text: str) -> bool:
    return text.isascii() and text.isdigit()


def encode_frame(message: Dict[str, Any]) -> bytes:
    """Serialize ``message`` into a length-prefixed frame."""
    text = json.dumps(message, separators=(",", ":"))
    return f"{len(text)}{DELIMITER}{text}".encode("ascii")


class FrameDecoder:
    """Incremental decoder for length-prefixed JSON frames.

    Feed it raw bytes as they arrive from the socket; it returns every
    complete message and keeps partial data buffered for the next call.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")()
        self._buffer = ""
        self._expected_length: int = -1

    def feed(self, data: bytes) -> List[Dict[str, Any]]:
        try:
            self._buffer += self._decoder.decode(data)
        except UnicodeDecodeError as e:
            raise InvalidArgumentError(f"Frame is not valid UTF-8: {e}") from e

        messages: List[Dict[str, Any]] = []
        while True:
            if self._expected_length < 0:
                head, sep, rest = self._buffer.partition(DELIMITER)
                if not sep:
                    if self._buffer and not _is_length(self._buffer):
                        raise InvalidArgumentError(f"Corrupted length value: {self._buffer[:32]!r}")
                    if len(self._buffer) > _MAX_LENGTH_DIGITS:
                        raise InvalidArgumentError(f"Frame length exceeds {MAX_FRAME_LENGTH}")
                    break
                if not _is_length(head):
                    raise InvalidArgumentError(f"Corrupted length value: {head[:32]!r}")
                length = int(head)
                if length > MAX_FRAME_LENGTH:
                    raise InvalidArgumentError(f"Frame length {length} exceeds {MAX_FRAME_LENGTH}")
                self._expected_length = length
                self._buffer = rest
            if len(self._buffer) < self._expected_length:
                break
            body = self._buffer[: self._expected_length]
            self._buffer = self._buffer[self._expected_length :]
            self._expected_length = -1
            messages.append(self._parse(body))
        return messages

    @staticmethod
    def _parse(body: str) -> Dict[str, Any]:
        try:
            message = json.loads(body)
        except json.JSONDecodeError as e:
            raise InvalidArgumentError(f"Frame is not valid JSON: {e.msg}") from e
        if not isinstance(message, dict):
            raise InvalidArgumentError("Frame must contain a JSON object")
        return message
