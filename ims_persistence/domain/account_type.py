from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(slots=True)
class AccountType:
    """Subscription tier; ``level`` orders tiers for upgrade eligibility."""

    name: str
    price: Decimal
    level: int
    max_warehouses: int
    max_warehouse_depth: int
    max_users: int
    max_suppliers: int
    max_clients: int
    id: int | None = None
    active: bool = True
