"""Tuple-row to entity mapping for the ``users`` and ``account_types`` tables.

Each ``*_COLUMNS`` string is the select list the matching mapper expects, in order.
"""

from __future__ import annotations

from decimal import Decimal

from ..domain.account_type import AccountType
from ..domain.user import Role, User

USER_COLUMNS = (
    "id, account_id, first_name, last_name, email, password, role, "
    "created_date, updated_date, active, email_uuid"
)

ACCOUNT_TYPE_COLUMNS = (
    "id, name, price, level, max_warehouses, max_warehouse_depth, "
    "max_users, max_suppliers, max_clients, active"
)


def map_user_row(row: tuple) -> User:
    """Convert a ``USER_COLUMNS`` tuple into a ``User``."""
    return User(
        id=row[0],
        account_id=row[1],
        first_name=row[2],
        last_name=row[3],
        email=row[4],
        password=row[5],
        role=Role(row[6]),
        created_date=row[7],
        updated_date=row[8],
        active=bool(row[9]),
        email_uuid=row[10],
    )


def map_account_type_row(row: tuple) -> AccountType:
    """Convert an ``ACCOUNT_TYPE_COLUMNS`` tuple into an ``AccountType``."""
    return AccountType(
        id=row[0],
        name=row[1],
        price=Decimal(str(row[2])),
        level=row[3],
        max_warehouses=row[4],
        max_warehouse_depth=row[5],
        max_users=row[6],
        max_suppliers=row[7],
        max_clients=row[8],
        active=bool(row[9]),
    )
