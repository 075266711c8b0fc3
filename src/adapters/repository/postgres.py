"""
PostgreSQL repository adapter - Implements UserRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Storage mapping
---------------
Rows hold the primitives of User.to_dict(): identifier, normalized email
and trimmed name as TEXT, timestamps as TIMESTAMPTZ. The identifier is
TEXT rather than UUID so it round-trips exactly as wrapped (no case
folding). Reading a row goes back through each value object's normal
construction path before User.reconstitute(), so a corrupted row
surfaces as a Failure instead of an invalid User.

Every database exception is converted into a Failure carrying a domain
error; nothing from psycopg crosses the port boundary.
"""

import logging
from collections.abc import Sequence
from datetime import timezone
from pathlib import Path
from typing import Any

import psycopg
from psycopg import errors
from psycopg_pool import ConnectionPool

from src.domain.exceptions import (
    EmailAlreadyRegistered,
    InvalidFormat,
    RepositoryError,
    UserNotFound,
)
from src.domain.ports import Failure, Result, Success
from src.domain.user import User
from src.domain.value_objects import Email, UserId, UserName

logger = logging.getLogger(__name__)

_COLUMNS = "id, email, name, created_at, updated_at"


class PostgresUserRepository:
    """
    Implements UserRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def save(self, user: User) -> Result[User]:
        """
        Insert the user, or overwrite the row with the same identifier.

        created_at is never overwritten by an update. The UNIQUE
        constraint on email turns a clash with another user into
        Failure(EmailAlreadyRegistered).
        """
        sql = f"""
            INSERT INTO users ({_COLUMNS})
            VALUES (%s, %s, %s, %s, %s)
            ON CONFLICT (id) DO UPDATE
            SET email = EXCLUDED.email,
                name = EXCLUDED.name,
                updated_at = EXCLUDED.updated_at
        """
        params = (
            user.id.value,
            user.email.value,
            user.name.value,
            user.created_at,
            user.updated_at,
        )

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, params)
                conn.commit()
        except errors.UniqueViolation:
            return Failure(EmailAlreadyRegistered(user.email.value))
        except psycopg.Error as e:
            return self._failure("save", e)

        return Success(user)

    def find_by_id(self, user_id: UserId) -> Result[User | None]:
        return self._fetch_one(
            f"SELECT {_COLUMNS} FROM users WHERE id = %s", (user_id.value,)
        )

    def find_by_email(self, email: Email) -> Result[User | None]:
        return self._fetch_one(
            f"SELECT {_COLUMNS} FROM users WHERE email = %s", (email.value,)
        )

    def find_all(self) -> Result[list[User]]:
        sql = f"SELECT {_COLUMNS} FROM users ORDER BY created_at, id"
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql)
                rows = cursor.fetchall()
            return Success([_row_to_user(row) for row in rows])
        except (psycopg.Error, InvalidFormat) as e:
            return self._failure("find_all", e)

    def delete(self, user_id: UserId) -> Result[None]:
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute("DELETE FROM users WHERE id = %s", (user_id.value,))
                conn.commit()
                deleted = cursor.rowcount
        except psycopg.Error as e:
            return self._failure("delete", e)

        if deleted == 0:
            return Failure(UserNotFound(user_id.value))
        return Success(None)

    def exists(self, user_id: UserId) -> Result[bool]:
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute("SELECT 1 FROM users WHERE id = %s", (user_id.value,))
                return Success(cursor.fetchone() is not None)
        except psycopg.Error as e:
            return self._failure("exists", e)

    def _fetch_one(self, sql: str, params: tuple[Any, ...]) -> Result[User | None]:
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, params)
                row = cursor.fetchone()
            return Success(_row_to_user(row) if row is not None else None)
        except (psycopg.Error, InvalidFormat) as e:
            return self._failure("lookup", e)

    def _failure(self, operation: str, error: Exception) -> Failure:
        logger.error("User repository %s failed: %s", operation, error)
        return Failure(RepositoryError(f"User repository {operation} failed"))


def _row_to_user(row: Sequence[Any]) -> User:
    return User.reconstitute(
        id=UserId(row[0]),
        email=Email(row[1]),
        name=UserName(row[2]),
        created_at=row[3].astimezone(timezone.utc),
        updated_at=row[4].astimezone(timezone.utc),
    )


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            with pool.connection() as conn:
                conn.execute(sql_file.read_text())

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
