"""Data-access layer for the inventory management system's users and account tiers."""

from .domain import AccountType, Role, User
from .errors import (
    AccountTypeNotFoundError,
    CRUDError,
    DataAccessError,
    EntityNotFoundError,
    UserNotFoundError,
)
from .repository import AccountTypeDao, UserDao

__all__ = [
    "AccountType",
    "AccountTypeDao",
    "AccountTypeNotFoundError",
    "CRUDError",
    "DataAccessError",
    "EntityNotFoundError",
    "Role",
    "User",
    "UserDao",
    "UserNotFoundError",
]
