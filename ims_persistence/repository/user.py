"""Postgres-backed persistence for ``User`` records."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from psycopg.rows import tuple_row
from psycopg_pool import ConnectionPool

from ..domain.user import Role, User
from ..errors import CRUDError, UserNotFoundError, not_found, translate_errors
from ..security.passwords import hash_password, is_password_hash
from .mappers import USER_COLUMNS, map_user_row

logger = logging.getLogger(__name__)

ENTITY = "user"


class UserDao:
    """CRUD access to the ``users`` table."""

    def __init__(self, pool: ConnectionPool) -> None:
        """Store the connection pool used for all database interactions."""
        self._pool = pool

    def create(self, user: User) -> User:
        """Insert ``user`` and return it with id, email token, hash and timestamps filled in."""
        now = datetime.now(timezone.utc)
        email_uuid = str(uuid.uuid4())
        encrypted_password = hash_password(user.password)
        role = Role(user.role)

        with translate_errors(ENTITY, "create", f"email = {user.email}"):
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute(
                        """
                        INSERT INTO users (first_name, last_name, email, password, role,
                                           created_date, updated_date, active, email_uuid, account_id)
                        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                        RETURNING id
                        """,
                        (
                            user.first_name,
                            user.last_name,
                            user.email,
                            encrypted_password,
                            role.value,
                            now,
                            now,
                            True,
                            email_uuid,
                            user.account_id,
                        ),
                    )
                    row = cur.fetchone()
                    if row is None or row[0] is None:
                        logger.error("user create returned no generated key (email = %s)", user.email)
                        raise CRUDError(ENTITY, "create", f"email = {user.email}", "autogenerated key is null")
                    conn.commit()

        user.id = row[0]
        user.password = encrypted_password
        user.role = role
        user.created_date = now
        user.updated_date = now
        user.active = True
        user.email_uuid = email_uuid
        logger.debug("user created (id = %s)", user.id)
        return user

    def find_by_id(self, user_id: int) -> User:
        """Return the user with ``user_id``."""
        return self._find_one("get", "id = %s", user_id, f"id = {user_id}")

    def find_by_email(self, email: str) -> User:
        """Return the user registered under ``email``."""
        return self._find_one("get", "email = %s", email, f"email = {email}")

    def find_by_email_uuid(self, email_uuid: str) -> User:
        """Return the user owning the correlation token ``email_uuid``."""
        return self._find_one("get", "email_uuid = %s", email_uuid, f"emailUUID = {email_uuid}")

    def find_admin_by_account_id(self, account_id: int) -> User:
        """Return the administrator of the account."""
        with translate_errors(ENTITY, "get admin", f"accountId = {account_id}"):
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute(
                        f"SELECT {USER_COLUMNS} FROM users WHERE account_id = %s AND role = %s",
                        (account_id, Role.admin.value),
                    )
                    row = cur.fetchone()
        if row is None:
            raise not_found(UserNotFoundError("get admin", f"accountId = {account_id}"))
        with translate_errors(ENTITY, "get admin", f"accountId = {account_id}"):
            return map_user_row(row)

    def find_users_by_account_id(self, account_id: int) -> list[User]:
        """Return every user of the account; an empty list is a valid answer."""
        with translate_errors(ENTITY, "get", f"accountId = {account_id}"):
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute(
                        f"SELECT {USER_COLUMNS} FROM users WHERE account_id = %s ORDER BY id",
                        (account_id,),
                    )
                    rows = cur.fetchall()
            return [map_user_row(row) for row in rows]

    def find_all(self) -> list[User]:
        """Return every user row without filtering."""
        with translate_errors(ENTITY, "get", "*"):
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute(f"SELECT {USER_COLUMNS} FROM users ORDER BY id")
                    rows = cur.fetchall()
            return [map_user_row(row) for row in rows]

    def update(self, user: User) -> User:
        """Overwrite names, email, password and active flag of ``user`` by id.

        A password that is not already a hash is hashed before it is written.
        """
        updated_date = datetime.now(timezone.utc)
        password = user.password
        if not is_password_hash(password):
            password = hash_password(password)

        with translate_errors(ENTITY, "update", f"id = {user.id}"):
            status = self._execute_update(
                """
                UPDATE users
                SET first_name = %s, last_name = %s, email = %s, password = %s,
                    active = %s, updated_date = %s
                WHERE id = %s
                """,
                (
                    user.first_name,
                    user.last_name,
                    user.email,
                    password,
                    user.active,
                    updated_date,
                    user.id,
                ),
            )
        if status == 0:
            raise not_found(UserNotFoundError("update", f"id = {user.id}"))

        user.password = password
        user.updated_date = updated_date
        return user

    def update_password(self, user_id: int, new_password: str) -> bool:
        """Hash ``new_password`` and store it as the user's credential."""
        encrypted_password = hash_password(new_password)
        with translate_errors(ENTITY, "update password", f"id = {user_id}"):
            status = self._execute_update(
                "UPDATE users SET password = %s, updated_date = %s WHERE id = %s",
                (encrypted_password, datetime.now(timezone.utc), user_id),
            )
        if status == 0:
            raise not_found(UserNotFoundError("update password", f"id = {user_id}"))
        return True

    def soft_delete(self, user_id: int) -> bool:
        """Mark the user inactive while keeping the row."""
        with translate_errors(ENTITY, "soft delete", f"id = {user_id}"):
            status = self._execute_update(
                "UPDATE users SET active = %s WHERE id = %s", (False, user_id)
            )
        if status == 0:
            raise not_found(UserNotFoundError("soft delete", f"id = {user_id}"))
        return True

    def hard_delete(self, user_id: int) -> bool:
        """Remove the user row permanently."""
        with translate_errors(ENTITY, "hard delete", f"id = {user_id}"):
            status = self._execute_update("DELETE FROM users WHERE id = %s", (user_id,))
        if status == 0:
            raise not_found(UserNotFoundError("hard delete", f"id = {user_id}"))
        return True

    def count_of_users(self, account_id: int) -> int:
        """Return how many users belong to the account."""
        with translate_errors(ENTITY, "count", f"accountId = {account_id}"):
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute("SELECT COUNT(*) FROM users WHERE account_id = %s", (account_id,))
                    row = cur.fetchone()
        return int(row[0]) if row else 0

    def _find_one(self, operation: str, condition: str, value: object, attribute: str) -> User:
        with translate_errors(ENTITY, operation, attribute):
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute(f"SELECT {USER_COLUMNS} FROM users WHERE {condition}", (value,))
                    row = cur.fetchone()
        if row is None:
            raise not_found(UserNotFoundError(operation, attribute))
        with translate_errors(ENTITY, operation, attribute):
            return map_user_row(row)

    def _execute_update(self, query: str, params: tuple) -> int:
        """Run a keyed write, commit it and return the affected row count."""
        with self._pool.connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                status = cur.rowcount
                conn.commit()
        return status
