from library_integrity.database.clock import Clock, ManualClock, SystemClock
from library_integrity.database.connection import close_store, create_store, open_store
from library_integrity.database.errors import (
    CheckViolation,
    ConstraintViolation,
    ForeignKeyViolation,
    NotNullViolation,
    RecordNotFoundError,
    StoreError,
    UniqueViolation,
    ViolationKind,
)
from library_integrity.database.memory import MemoryStore
from library_integrity.database.postgres import PostgresStore
from library_integrity.database.store import Store

__all__ = [
    "CheckViolation",
    "Clock",
    "ConstraintViolation",
    "ForeignKeyViolation",
    "ManualClock",
    "MemoryStore",
    "NotNullViolation",
    "PostgresStore",
    "RecordNotFoundError",
    "Store",
    "StoreError",
    "SystemClock",
    "UniqueViolation",
    "ViolationKind",
    "close_store",
    "create_store",
    "open_store",
]
