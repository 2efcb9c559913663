import asyncio
import sqlite3

import pytest

from user_service_api.app.core.errors import NotFoundError, PersistenceError
from user_service_api.app.repositories.user_repository import UserRepository
from user_service_api.app.schemas.user import UserCreate, UserUpdate


def run(coro):
    return asyncio.run(coro)


def test_create_assigns_id_and_round_trips(repository):
    data = UserCreate(name="Alice", email="alice@example.com")
    created = run(repository.create(data))

    assert created.id == 1
    assert created.model_dump(exclude={"id"}) == data.model_dump()
    assert run(repository.find_one(created.id)) == created


def test_find_all_empty(repository):
    assert run(repository.find_all()) == []


def test_find_all_counts_creates_minus_removes(repository):
    ids = [run(repository.create(UserCreate(name=f"user{i}"))).id for i in range(5)]
    run(repository.remove(ids[1]))
    run(repository.remove(ids[3]))

    users = run(repository.find_all())
    assert [u.id for u in users] == [ids[0], ids[2], ids[4]]
    assert [u.name for u in users] == ["user0", "user2", "user4"]


@pytest.mark.parametrize("operation", ["find_one", "update", "remove"])
def test_missing_id_raises_not_found(repository, operation):
    method = getattr(repository, operation)
    args = (42, UserUpdate(name="x")) if operation == "update" else (42,)
    with pytest.raises(NotFoundError) as exc_info:
        run(method(*args))
    assert exc_info.value.user_id == 42
    assert exc_info.value.message == "User 42 not found"


def test_update_changes_only_present_fields(repository):
    user = run(repository.create(UserCreate(name="Alice", email="a@example.com", phone="123")))

    updated = run(repository.update(user.id, UserUpdate(name="Bob")))

    assert updated.name == "Bob"
    assert updated.email == "a@example.com"
    assert updated.phone == "123"
    assert run(repository.find_one(user.id)) == updated


def test_update_explicit_null_clears_optional_field(repository):
    user = run(repository.create(UserCreate(name="Alice", email="a@example.com", phone="123")))

    updated = run(repository.update(user.id, UserUpdate(email=None)))

    assert updated.email is None
    assert updated.name == "Alice"
    assert updated.phone == "123"


def test_empty_update_returns_current_row(repository):
    user = run(repository.create(UserCreate(name="Alice")))
    assert run(repository.update(user.id, UserUpdate())) == user


def test_empty_update_on_missing_row_raises_not_found(repository):
    with pytest.raises(NotFoundError):
        run(repository.update(7, UserUpdate()))


def test_removed_ids_are_not_reused(repository):
    first = run(repository.create(UserCreate(name="Alice")))
    run(repository.remove(first.id))
    second = run(repository.create(UserCreate(name="Bob")))

    assert second.id > first.id
    with pytest.raises(NotFoundError):
        run(repository.find_one(first.id))


def test_missing_table_raises_persistence_error(tmp_path):
    repository = UserRepository(str(tmp_path / "empty.db"))
    with pytest.raises(PersistenceError) as exc_info:
        run(repository.find_all())
    assert exc_info.value.constraint_violation is False


def test_unreachable_database_raises_persistence_error(tmp_path):
    repository = UserRepository(str(tmp_path / "missing" / "dir" / "users.db"))
    with pytest.raises(PersistenceError):
        run(repository.create(UserCreate(name="Alice")))


def test_constraint_violation_is_flagged(tmp_path):
    db_path = str(tmp_path / "unique.db")
    conn = sqlite3.connect(db_path)
    conn.execute(
        "CREATE TABLE users (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL, "
        "email TEXT UNIQUE, phone TEXT)"
    )
    conn.commit()
    conn.close()
    repository = UserRepository(db_path)
    run(repository.create(UserCreate(name="Alice", email="same@example.com")))

    with pytest.raises(PersistenceError) as exc_info:
        run(repository.create(UserCreate(name="Bob", email="same@example.com")))

    assert exc_info.value.constraint_violation is True
    assert len(run(repository.find_all())) == 1


def test_rows_outside_input_rules_are_still_readable(repository, settings):
    conn = sqlite3.connect(settings.database_url)
    conn.execute("INSERT INTO users (name) VALUES (?)", ("Alice",))
    conn.execute("INSERT INTO users (name) VALUES (?)", ("",))
    conn.execute("INSERT INTO users (name, phone) VALUES (?, ?)", ("x" * 300, "9" * 40))
    conn.commit()
    conn.close()

    users = run(repository.find_all())

    assert [u.name for u in users] == ["Alice", "", "x" * 300]
    assert run(repository.find_one(2)).name == ""
    assert run(repository.find_one(3)).phone == "9" * 40
