"""
Business logic for users.

``UserService`` currently forwards every call to ``UserRepository``
unchanged.  Rules such as uniqueness checks or derived fields belong
here so the transport layers never need to change when they are added.
Repository errors are not caught; they propagate to the dispatchers.
"""

from typing import List

from ..core.config import Settings
from ..repositories.user_repository import UserRepository
from ..schemas.user import UserCreate, UserRead, UserUpdate


class UserService:
    """Service for working with users."""

    def __init__(self, repository: UserRepository) -> None:
        self.repository = repository

    async def create(self, data: UserCreate) -> UserRead:
        return await self.repository.create(data)

    async def find_all(self) -> List[UserRead]:
        return await self.repository.find_all()

    async def find_one(self, user_id: int) -> UserRead:
        return await self.repository.find_one(user_id)

    async def update(self, user_id: int, data: UserUpdate) -> UserRead:
        return await self.repository.update(user_id, data)

    async def remove(self, user_id: int) -> None:
        await self.repository.remove(user_id)


def build_user_service(settings: Settings) -> UserService:
    """Wire a ``UserService`` to a repository for the configured database."""
    return UserService(UserRepository(settings.database_url))
