"""
User message handlers.

Only one command is served over the message channel: ``get_users``
returns every stored user.  The handler ignores its payload.
"""

from typing import Any, List

from user_service_api.app.schemas.user import UserRead
from user_service_api.app.services.user_service import UserService
from user_service_api.app.transport.router import MessageRouter


GET_USERS = {"cmd": "get_users"}


def register_user_handlers(router: MessageRouter, service: UserService) -> None:
    async def get_users(data: Any = None) -> List[UserRead]:
        return await service.find_all()

    router.add(GET_USERS, get_users)
