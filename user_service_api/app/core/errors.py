"""
Error taxonomy shared by the repository, service and transports.

The repository raises ``NotFoundError`` and ``PersistenceError``; the
service lets them through untouched; the HTTP and RPC dispatchers map
them onto transport responses.  ``InvalidArgumentError`` is raised by
the dispatchers themselves before any storage call is made.
"""

from typing import Any, Dict


class UserServiceError(Exception):
    """Base class for all errors surfaced to callers."""

    code = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> Dict[str, Any]:
        """Error body sent back over the message channel."""
        return {"status": "error", "code": self.code, "message": self.message}


class InvalidArgumentError(UserServiceError):
    """Malformed input or a non-numeric identifier."""

    code = "invalid_argument"


class NotFoundError(UserServiceError):
    """The addressed user does not exist."""

    code = "not_found"

    def __init__(self, user_id: int) -> None:
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class PersistenceError(UserServiceError):
    """The store was unreachable or rejected the statement."""

    code = "persistence_error"

    def __init__(self, message: str, constraint_violation: bool = False) -> None:
        super().__init__(message)
        self.constraint_violation = constraint_violation
