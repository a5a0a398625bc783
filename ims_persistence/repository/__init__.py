"""Data-access objects for the inventory schema."""

from .account_type import AccountTypeDao
from .user import UserDao

__all__ = ["AccountTypeDao", "UserDao"]
