"""Domain error taxonomy raised by the DAOs.

Two kinds of failure reach callers:

* :class:`EntityNotFoundError` when a keyed lookup or keyed mutation matched no rows;
* :class:`CRUDError` for any other fault reported by the database client.

Both carry the entity name, the operation and the key attribute that was used,
and chain the originating psycopg error as ``__cause__`` when there is one.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

import psycopg

logger = logging.getLogger(__name__)


class DataAccessError(Exception):
    """Base class for errors surfaced by the persistence layer."""

    def __init__(self, entity: str, operation: str, attribute: str, detail: str | None = None) -> None:
        self.entity = entity
        self.operation = operation
        self.attribute = attribute
        self.detail = detail
        message = f"{entity} {operation} failed ({attribute})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class EntityNotFoundError(DataAccessError):
    """Raised when no row matches the key of a lookup, update or delete."""

    def __init__(self, entity: str, operation: str, attribute: str) -> None:
        super().__init__(entity, operation, attribute, detail="not found")


class UserNotFoundError(EntityNotFoundError):
    def __init__(self, operation: str, attribute: str) -> None:
        super().__init__("user", operation, attribute)


class AccountTypeNotFoundError(EntityNotFoundError):
    def __init__(self, operation: str, attribute: str) -> None:
        super().__init__("account type", operation, attribute)


class CRUDError(DataAccessError):
    """Generic data-access failure (connectivity, constraint violation, bad statement)."""


def not_found(error: EntityNotFoundError) -> EntityNotFoundError:
    """Log a not-found error and hand it back for raising."""
    logger.error(
        "%s not found. Operation: %s (%s)", error.entity, error.operation, error.attribute
    )
    return error


@contextmanager
def translate_errors(entity: str, operation: str, attribute: str) -> Iterator[None]:
    """Reclassify psycopg failures raised inside the block as :class:`CRUDError`.

    A ``ValueError`` from mapping a stored value the entity model rejects (an unknown
    role, say) is reclassified the same way. Domain errors propagate unchanged.
    """
    try:
        yield
    except (psycopg.Error, ValueError) as exc:
        logger.error(
            "CRUD failure. Operation: %s %s (%s). Message: %s", operation, entity, attribute, exc
        )
        raise CRUDError(entity, operation, attribute, detail=str(exc)) from exc
