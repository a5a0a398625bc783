"""Pool doubles backing the DAO tests.

``SQLitePool`` mimics the slice of ``psycopg_pool.ConnectionPool`` the DAOs use on top of an
in-memory SQLite database: ``%s`` placeholders are rewritten and SQLite failures are re-raised
as the matching psycopg errors. ``StubPool`` replays a canned result or error for every statement.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from typing import Any, Iterator

import psycopg
import pytest

from ims_persistence.domain import AccountType, Role, User
from ims_persistence.repository import AccountTypeDao, UserDao

SCHEMA = """
CREATE TABLE account_types (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    price NUMERIC NOT NULL,
    level INTEGER NOT NULL,
    max_warehouses INTEGER NOT NULL,
    max_warehouse_depth INTEGER NOT NULL,
    max_users INTEGER NOT NULL,
    max_suppliers INTEGER NOT NULL,
    max_clients INTEGER NOT NULL,
    active BOOLEAN NOT NULL DEFAULT 1
);

CREATE TABLE users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    first_name TEXT NOT NULL,
    last_name TEXT NOT NULL,
    email TEXT NOT NULL UNIQUE,
    password TEXT NOT NULL,
    role TEXT NOT NULL,
    created_date TIMESTAMPTZ NOT NULL,
    updated_date TIMESTAMPTZ NOT NULL,
    active BOOLEAN NOT NULL DEFAULT 1,
    email_uuid TEXT NOT NULL UNIQUE,
    account_id INTEGER
);
"""

sqlite3.register_adapter(datetime, lambda value: value.isoformat())
sqlite3.register_adapter(Decimal, str)
sqlite3.register_converter("TIMESTAMPTZ", lambda raw: datetime.fromisoformat(raw.decode()))
sqlite3.register_converter("NUMERIC", lambda raw: Decimal(raw.decode()))


class SQLiteCursor:
    def __init__(self, cursor: sqlite3.Cursor) -> None:
        self._cursor = cursor
        self._rows: list[tuple] = []

    def __enter__(self) -> "SQLiteCursor":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._cursor.close()

    @property
    def rowcount(self) -> int:
        return self._cursor.rowcount

    def execute(self, query: str, params: tuple = ()) -> None:
        try:
            self._cursor.execute(query.replace("%s", "?"), tuple(params))
            # RETURNING statements stay open until stepped to the end and would block COMMIT
            self._rows = self._cursor.fetchall()
        except sqlite3.IntegrityError as exc:
            raise psycopg.IntegrityError(str(exc)) from exc
        except sqlite3.Error as exc:
            raise psycopg.DatabaseError(str(exc)) from exc

    def fetchone(self) -> tuple | None:
        return self._rows.pop(0) if self._rows else None

    def fetchall(self) -> list[tuple]:
        rows, self._rows = self._rows, []
        return rows


class SQLiteConnection:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def cursor(self, row_factory: Any = None) -> SQLiteCursor:
        return SQLiteCursor(self._conn.cursor())

    def commit(self) -> None:
        self._conn.commit()


class SQLitePool:
    """In-memory stand-in for ``ConnectionPool`` that tracks borrowed connections."""

    def __init__(self) -> None:
        self._conn = sqlite3.connect(
            ":memory:", detect_types=sqlite3.PARSE_DECLTYPES, check_same_thread=False
        )
        self._conn.executescript(SCHEMA)
        self.in_use = 0
        self.checkouts = 0

    @contextmanager
    def connection(self) -> Iterator[SQLiteConnection]:
        self.in_use += 1
        self.checkouts += 1
        try:
            yield SQLiteConnection(self._conn)
        except BaseException:
            self._conn.rollback()
            raise
        finally:
            self.in_use -= 1

    def execute(self, query: str, params: tuple = ()) -> list[tuple]:
        """Run raw SQL outside the DAOs, for seeding and inspecting fixtures."""
        rows = self._conn.execute(query, params).fetchall()
        self._conn.commit()
        return rows

    def close(self) -> None:
        self._conn.close()


class StubCursor:
    def __init__(self, pool: "StubPool") -> None:
        self._pool = pool
        self.rowcount = pool.rowcount

    def __enter__(self) -> "StubCursor":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        return None

    def execute(self, query: str, params: tuple = ()) -> None:
        self._pool.statements.append((query, tuple(params)))
        if self._pool.error is not None:
            raise self._pool.error

    def fetchone(self) -> tuple | None:
        return self._pool.rows[0] if self._pool.rows else None

    def fetchall(self) -> list[tuple]:
        return list(self._pool.rows)


class StubConnection:
    def __init__(self, pool: "StubPool") -> None:
        self._pool = pool

    def cursor(self, row_factory: Any = None) -> StubCursor:
        return StubCursor(self._pool)

    def commit(self) -> None:
        self._pool.commits += 1


class StubPool:
    """Pool double whose every statement fails with ``error`` or returns ``rows``."""

    def __init__(
        self,
        *,
        error: Exception | None = None,
        rows: list[tuple] | None = None,
        rowcount: int = 0,
    ) -> None:
        self.error = error
        self.rows = rows or []
        self.rowcount = rowcount
        self.statements: list[tuple[str, tuple]] = []
        self.commits = 0
        self.in_use = 0

    @contextmanager
    def connection(self) -> Iterator[StubConnection]:
        self.in_use += 1
        try:
            yield StubConnection(self)
        finally:
            self.in_use -= 1


@pytest.fixture
def pool() -> Iterator[SQLitePool]:
    sqlite_pool = SQLitePool()
    yield sqlite_pool
    sqlite_pool.close()


@pytest.fixture
def broken_pool() -> StubPool:
    return StubPool(error=psycopg.OperationalError("server closed the connection unexpectedly"))


@pytest.fixture
def keyless_pool() -> StubPool:
    return StubPool(rows=[])


@pytest.fixture
def user_dao(pool: SQLitePool) -> UserDao:
    return UserDao(pool)  # type: ignore[arg-type]


@pytest.fixture
def account_type_dao(pool: SQLitePool) -> AccountTypeDao:
    return AccountTypeDao(pool)  # type: ignore[arg-type]


@pytest.fixture
def make_user():
    """Factory for unsaved users with a plaintext password."""

    def _make(
        email: str = "a@x.com",
        *,
        account_id: int = 1,
        role: Role = Role.worker,
        password: str = "s3cret-Pass",
    ) -> User:
        return User(
            first_name="Ada",
            last_name="Lovelace",
            email=email,
            password=password,
            account_id=account_id,
            role=role,
        )

    return _make


@pytest.fixture
def make_account_type():
    """Factory for unsaved account tiers."""

    def _make(name: str, level: int, price: str = "0") -> AccountType:
        return AccountType(
            name=name,
            price=Decimal(price),
            level=level,
            max_warehouses=level * 2,
            max_warehouse_depth=level + 1,
            max_users=level * 5,
            max_suppliers=level * 10,
            max_clients=level * 10,
        )

    return _make
