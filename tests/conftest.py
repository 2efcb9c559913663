import pytest
from fastapi.testclient import TestClient

from user_service_api.app.core.config import Settings
from user_service_api.app.core.db import init_db
from user_service_api.app.main import create_app
from user_service_api.app.repositories.user_repository import UserRepository
from user_service_api.app.services.user_service import UserService


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=str(tmp_path / "users.db"),
        database_create_schema=True,
        log_level="WARNING",
        api_prefix="",
        rpc_host="127.0.0.1",
        rpc_port=0,
    )


@pytest.fixture
def repository(settings):
    init_db(settings.database_url)
    return UserRepository(settings.database_url)


@pytest.fixture
def service(repository):
    return UserService(repository)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


class StubService:
    """Service double that records calls and returns or raises on demand."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def _respond(self, name, *args):
        self.calls.append((name, args))
        if self.error is not None:
            raise self.error
        return self.result

    async def create(self, data):
        return self._respond("create", data)

    async def find_all(self):
        return self._respond("find_all")

    async def find_one(self, user_id):
        return self._respond("find_one", user_id)

    async def update(self, user_id, data):
        return self._respond("update", user_id, data)

    async def remove(self, user_id):
        return self._respond("remove", user_id)


@pytest.fixture
def stub_service():
    return StubService()
