"""Postgres-backed persistence for ``AccountType`` tiers."""

from __future__ import annotations

import logging

from psycopg.rows import tuple_row
from psycopg_pool import ConnectionPool

from ..domain.account_type import AccountType
from ..errors import AccountTypeNotFoundError, CRUDError, not_found, translate_errors
from .mappers import ACCOUNT_TYPE_COLUMNS, map_account_type_row

logger = logging.getLogger(__name__)

ENTITY = "account type"


class AccountTypeDao:
    """CRUD access to the ``account_types`` table."""

    def __init__(self, pool: ConnectionPool) -> None:
        """Store the connection pool used for all database interactions."""
        self._pool = pool

    def create(self, account_type: AccountType) -> AccountType:
        """Insert an active tier and return it with its generated id."""
        with translate_errors(ENTITY, "create", f"name = {account_type.name}"):
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute(
                        """
                        INSERT INTO account_types (name, price, level, max_warehouses, max_warehouse_depth,
                                                   max_users, max_suppliers, max_clients, active)
                        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                        RETURNING id
                        """,
                        (
                            account_type.name,
                            account_type.price,
                            account_type.level,
                            account_type.max_warehouses,
                            account_type.max_warehouse_depth,
                            account_type.max_users,
                            account_type.max_suppliers,
                            account_type.max_clients,
                            True,
                        ),
                    )
                    row = cur.fetchone()
                    if row is None or row[0] is None:
                        logger.error("account type create returned no generated key (name = %s)", account_type.name)
                        raise CRUDError(
                            ENTITY, "create", f"name = {account_type.name}", "autogenerated key is null"
                        )
                    conn.commit()

        account_type.id = row[0]
        account_type.active = True
        logger.debug("account type created (id = %s)", account_type.id)
        return account_type

    def find_by_id(self, type_id: int) -> AccountType:
        """Return the tier with ``type_id``."""
        return self._find_one("id = %s", type_id, f"id = {type_id}")

    def find_by_name(self, name: str) -> AccountType:
        """Return the tier called ``name``."""
        return self._find_one("name = %s", name, f"name = {name}")

    def select_all_active(self) -> list[AccountType]:
        """Return every active tier, cheapest level first."""
        return self._select(
            f"SELECT {ACCOUNT_TYPE_COLUMNS} FROM account_types WHERE active = true ORDER BY level, id",
            (),
            "*",
        )

    def select_all_possible_to_upgrade(self, type_id: int) -> list[AccountType]:
        """Return active tiers ranked strictly above the tier ``type_id``.

        An unknown ``type_id`` matches nothing and yields an empty list.
        """
        return self._select(
            f"""
            SELECT {ACCOUNT_TYPE_COLUMNS}
            FROM account_types
            WHERE active = true
              AND level > (SELECT level FROM account_types WHERE id = %s)
            ORDER BY level, id
            """,
            (type_id,),
            f"upgrades for id = {type_id}",
        )

    def update(self, account_type: AccountType) -> AccountType:
        """Overwrite every mutable column of the tier by id."""
        with translate_errors(ENTITY, "update", f"id = {account_type.id}"):
            with self._pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        UPDATE account_types
                        SET name = %s, price = %s, level = %s, max_warehouses = %s,
                            max_warehouse_depth = %s, max_users = %s,
                            max_suppliers = %s, max_clients = %s, active = %s
                        WHERE id = %s
                        """,
                        (
                            account_type.name,
                            account_type.price,
                            account_type.level,
                            account_type.max_warehouses,
                            account_type.max_warehouse_depth,
                            account_type.max_users,
                            account_type.max_suppliers,
                            account_type.max_clients,
                            account_type.active,
                            account_type.id,
                        ),
                    )
                    status = cur.rowcount
                    conn.commit()
        if status == 0:
            raise not_found(AccountTypeNotFoundError("update", f"id = {account_type.id}"))
        return account_type

    def min_lvl_type(self) -> int:
        """Return the id of the tier with the lowest level (the baseline tier)."""
        with translate_errors(ENTITY, "find min lvl type", "*"):
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute("SELECT id FROM account_types ORDER BY level, id LIMIT 1")
                    row = cur.fetchone()
        if row is None:
            raise not_found(AccountTypeNotFoundError("find min lvl type", "*"))
        return row[0]

    def delete(self, type_id: int) -> bool:
        """Deactivate the tier; the row is kept."""
        with translate_errors(ENTITY, "delete", f"id = {type_id}"):
            with self._pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute("UPDATE account_types SET active = %s WHERE id = %s", (False, type_id))
                    status = cur.rowcount
                    conn.commit()
        if status == 0:
            raise not_found(AccountTypeNotFoundError("delete", f"id = {type_id}"))
        return True

    def _find_one(self, condition: str, value: object, attribute: str) -> AccountType:
        with translate_errors(ENTITY, "get", attribute):
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute(
                        f"SELECT {ACCOUNT_TYPE_COLUMNS} FROM account_types WHERE {condition}", (value,)
                    )
                    row = cur.fetchone()
        if row is None:
            raise not_found(AccountTypeNotFoundError("get", attribute))
        with translate_errors(ENTITY, "get", attribute):
            return map_account_type_row(row)

    def _select(self, query: str, params: tuple, attribute: str) -> list[AccountType]:
        with translate_errors(ENTITY, "get", attribute):
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute(query, params)
                    rows = cur.fetchall()
            return [map_account_type_row(row) for row in rows]
