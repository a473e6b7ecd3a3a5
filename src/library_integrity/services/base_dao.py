"""
Base data-access object for unified store operations
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel

from library_integrity.database.errors import ConstraintViolation, RecordNotFoundError
from library_integrity.database.schema import get_table
from library_integrity.database.store import Store

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class WriteResult:
    """Result of a write captured as a value instead of an exception"""
    success: bool
    data: Any = None
    violation: Optional[ConstraintViolation] = None

    @property
    def error_type(self) -> Optional[str]:
        return self.violation.kind.value if self.violation else None

    @property
    def error(self) -> Optional[str]:
        return str(self.violation) if self.violation else None

    @property
    def column(self) -> Optional[str]:
        return self.violation.column if self.violation else None


async def capture(operation: Awaitable[Any]) -> WriteResult:
    """
    Await a DAO call and report its outcome as a WriteResult

    Only constraint violations are captured; any other error propagates.
    """
    try:
        data = await operation
    except ConstraintViolation as e:
        return WriteResult(success=False, violation=e)
    return WriteResult(success=True, data=data)


class BaseDAO(Generic[ModelT]):
    """Base DAO mapping one table to one pydantic record type"""

    table_name: str = ""
    model: Type[ModelT]

    def __init__(self, store: Store):
        self.store = store
        self.table = get_table(self.table_name)
        logger.debug(f"{type(self).__name__} initialized for table: {self.table_name}")

    @property
    def primary_key(self) -> str:
        return self.table.primary_key

    def _to_model(self, row: Optional[Dict[str, Any]]) -> Optional[ModelT]:
        return self.model.model_validate(row) if row is not None else None

    def _insert_values(self, record: ModelT) -> Dict[str, Any]:
        """
        Writable columns of ``record``

        Unset (None) values are left out for columns that have a store
        default, so the default applies; for every other column None is sent
        as an explicit NULL.
        """
        data = record.model_dump(include=set(self.table.writable_columns))
        return {
            name: value
            for name, value in data.items()
            if value is not None or not self.table.column(name).has_default
        }

    def _update_values(self, record: ModelT) -> Dict[str, Any]:
        return record.model_dump(include=set(self.table.writable_columns))

    async def create(self, record: ModelT) -> ModelT:
        """
        Insert a record

        Args:
            record: Record to persist; generated id and timestamps are ignored

        Returns:
            The persisted record with its generated id
        """
        row = await self.store.insert(self.table_name, self._insert_values(record))
        logger.info(f"Created {self.table_name} {row[self.primary_key]}")
        return self._to_model(row)

    async def find_by_id(self, record_id: Any) -> Optional[ModelT]:
        return self._to_model(await self.store.fetch(self.table_name, record_id))

    async def find_by(self, **filters: Any) -> List[ModelT]:
        rows = await self.store.select(self.table_name, filters)
        return [self._to_model(row) for row in rows]

    async def update(self, record: ModelT) -> ModelT:
        """
        Write every writable column of ``record`` back to its row

        Raises:
            ValueError: the record has no id
            RecordNotFoundError: no row has that id
        """
        record_id = getattr(record, self.primary_key)
        if record_id is None:
            raise ValueError(f"Cannot update {self.table_name} record without {self.primary_key}")

        row = await self.store.update(self.table_name, record_id, self._update_values(record))
        if row is None:
            raise RecordNotFoundError(self.table_name, record_id)

        logger.info(f"Updated {self.table_name} {record_id}")
        return self._to_model(row)

    async def delete(self, record_id: Any) -> bool:
        deleted = await self.store.delete(self.table_name, record_id)
        if deleted:
            logger.info(f"Deleted {self.table_name} {record_id}")
        return deleted
