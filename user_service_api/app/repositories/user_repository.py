"""
Data access layer for users.

``UserRepository`` is the only component that reads or writes the
``users`` table.  Every call opens its own connection, runs a single
statement (plus a read-back where a row must be returned) and closes
the connection again; no state is kept between calls.

All queries use parameterized statements.  Driver errors are wrapped
in ``PersistenceError`` so callers never see ``sqlite3`` exceptions;
missing rows are reported with ``NotFoundError``.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator, List, Optional

from user_service_api.app.core.db import get_connection
from user_service_api.app.core.errors import NotFoundError, PersistenceError
from user_service_api.app.schemas.user import UserCreate, UserRead, UserUpdate


logger = logging.getLogger(__name__)

USER_COLUMNS = ("name", "email", "phone")


class UserRepository:
    """Repository for user rows stored in SQLite."""

    def __init__(self, database_url: Optional[str] = None) -> None:
        self.database_url = database_url

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection, translating driver errors on the way out."""
        try:
            conn = get_connection(self.database_url)
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot connect to database: {e}") from e
        try:
            yield conn
        except sqlite3.IntegrityError as e:
            conn.rollback()
            raise PersistenceError(f"Constraint violation: {e}", constraint_violation=True) from e
        except sqlite3.Error as e:
            conn.rollback()
            raise PersistenceError(f"Database error: {e}") from e
        finally:
            conn.close()

    async def create(self, data: UserCreate) -> UserRead:
        """Insert a new user and return it with its assigned id."""
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO users (name, email, phone) VALUES (?, ?, ?)",
                (data.name, data.email, data.phone),
            )
            user_id = cursor.lastrowid
            conn.commit()
            logger.info("Created user %s", user_id)
            row = cursor.execute(
                "SELECT id, name, email, phone FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        if row is None:
            # Deleted by a concurrent caller between insert and read-back.
            raise NotFoundError(user_id)
        return self._row_to_user(row)

    async def find_all(self) -> List[UserRead]:
        """Return every stored user in insertion order."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, name, email, phone FROM users ORDER BY id ASC"
            ).fetchall()
        return [self._row_to_user(row) for row in rows]

    async def find_one(self, user_id: int) -> UserRead:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, name, email, phone FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        if row is None:
            raise NotFoundError(user_id)
        return self._row_to_user(row)

    async def update(self, user_id: int, data: UserUpdate) -> UserRead:
        """Merge the fields present in ``data`` into the stored row.

        Fields the client did not send are left untouched.  An empty
        update just returns the current row.
        """
        updates = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if key in USER_COLUMNS
        }
        with self._connect() as conn:
            cursor = conn.cursor()
            if updates:
                assignments = ", ".join(f"{key} = ?" for key in updates)
                cursor.execute(
                    f"UPDATE users SET {assignments} WHERE id = ?",
                    (*updates.values(), user_id),
                )
                if cursor.rowcount == 0:
                    raise NotFoundError(user_id)
                conn.commit()
                logger.info("Updated user %s (%s)", user_id, ", ".join(updates))
            row = cursor.execute(
                "SELECT id, name, email, phone FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        if row is None:
            raise NotFoundError(user_id)
        return self._row_to_user(row)

    async def remove(self, user_id: int) -> None:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
            affected = cursor.rowcount
            conn.commit()
        if not affected:
            raise NotFoundError(user_id)
        logger.info("Deleted user %s", user_id)

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> UserRead:
        """Convert a database row to a ``UserRead`` instance."""
        return UserRead(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            phone=row["phone"],
        )
