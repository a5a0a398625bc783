"""Entity records persisted by the DAOs."""

from .account_type import AccountType
from .user import Role, User

__all__ = ["AccountType", "Role", "User"]
