from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    admin = "ROLE_ADMIN"
    worker = "ROLE_WORKER"


@dataclass(slots=True)
class User:
    """Member of an inventory account; ``password`` holds a hash once persisted."""

    first_name: str
    last_name: str
    email: str
    password: str
    account_id: int | None = None
    role: Role = Role.worker
    id: int | None = None
    created_date: datetime | None = None
    updated_date: datetime | None = None
    active: bool = True
    email_uuid: str | None = None
