"""
Error taxonomy for store operations

Every write the schema rejects surfaces as a ConstraintViolation subclass that
names the violated constraint and, where one exists, the offending column.
The message keeps the database's own wording so substring checks behave the
same against PostgreSQL and the in-memory store.
"""

import logging
from enum import Enum
from typing import Optional, Type

import asyncpg

from library_integrity.database.schema import find_constraint

logger = logging.getLogger(__name__)


class ViolationKind(str, Enum):
    FOREIGN_KEY = "foreign-key"
    CHECK = "check"
    UNIQUE = "unique"
    NOT_NULL = "not-null"


class StoreError(RuntimeError):
    """Any failure raised by a store"""


class RecordNotFoundError(StoreError, LookupError):
    """The addressed row does not exist"""

    def __init__(self, table: str, record_id):
        super().__init__(f"No row in {table} with id {record_id}")
        self.table = table
        self.record_id = record_id


class ConstraintViolation(StoreError):
    """A write rejected by a schema constraint"""

    kind: ViolationKind

    def __init__(
        self,
        message: str,
        *,
        table: Optional[str] = None,
        column: Optional[str] = None,
        constraint: Optional[str] = None,
        detail: Optional[str] = None,
    ):
        self.message = message
        self.table = table
        self.column = column
        self.constraint = constraint
        self.detail = detail
        super().__init__(str(self))

    def __str__(self) -> str:
        text = self.message
        if self.detail:
            text += f" DETAIL: {self.detail}"
        return text

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(kind={self.kind.value!r}, table={self.table!r}, "
            f"column={self.column!r}, constraint={self.constraint!r})"
        )


class ForeignKeyViolation(ConstraintViolation):
    kind = ViolationKind.FOREIGN_KEY


class CheckViolation(ConstraintViolation):
    kind = ViolationKind.CHECK


class UniqueViolation(ConstraintViolation):
    kind = ViolationKind.UNIQUE


class NotNullViolation(ConstraintViolation):
    kind = ViolationKind.NOT_NULL


_ASYNCPG_VIOLATIONS = {
    asyncpg.ForeignKeyViolationError: ForeignKeyViolation,
    asyncpg.CheckViolationError: CheckViolation,
    asyncpg.UniqueViolationError: UniqueViolation,
    asyncpg.NotNullViolationError: NotNullViolation,
}


def violation_class_for(exc: asyncpg.PostgresError) -> Optional[Type[ConstraintViolation]]:
    for pg_class, violation_class in _ASYNCPG_VIOLATIONS.items():
        if isinstance(exc, pg_class):
            return violation_class
    return None


def translate_postgres_error(exc: asyncpg.PostgresError) -> StoreError:
    """
    Convert an asyncpg error into the store taxonomy

    Table and column are taken from the schema catalog when the error names a
    known constraint, otherwise from the fields PostgreSQL reported.
    """
    violation_class = violation_class_for(exc)
    if violation_class is None:
        logger.error(f"Database error: {exc}")
        return StoreError(f"Database operation failed: {exc}")

    constraint = getattr(exc, "constraint_name", None)
    table = getattr(exc, "table_name", None)
    column = getattr(exc, "column_name", None)

    owner = find_constraint(constraint) if constraint else None
    if owner is not None:
        table, column = owner

    message = getattr(exc, "message", None) or str(exc)
    violation = violation_class(
        message,
        table=table,
        column=column,
        constraint=constraint,
        detail=getattr(exc, "detail", None),
    )
    logger.warning(f"Constraint violation ({violation.kind.value}): {violation}")
    return violation
