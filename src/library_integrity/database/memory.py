"""
In-memory reference store

Enforces the schema catalog in Python with the same evaluation order and
error wording as PostgreSQL: not-null, then check constraints by name, then
unique, then foreign keys. Transactions snapshot the tables and restore them
on error. Time comes from the injected clock.
"""

import copy
import itertools
import logging
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any, AsyncIterator, Dict, List, Optional

from library_integrity.database.clock import Clock, ManualClock
from library_integrity.database.errors import (
    CheckViolation,
    ForeignKeyViolation,
    NotNullViolation,
    StoreError,
    UniqueViolation,
)
from library_integrity.database.schema import TABLES, Table, get_table, referencing_keys
from library_integrity.database.store import Store

logger = logging.getLogger(__name__)


class MemoryStore(Store):
    backend = "memory"

    def __init__(self, clock: Optional[Clock] = None):
        super().__init__(clock or ManualClock())
        self._rows: Dict[str, Dict[Any, Dict[str, Any]]] = {name: {} for name in TABLES}
        self._sequences = {name: itertools.count(1) for name in TABLES}

    # Reads

    async def fetch(self, table: str, row_id: Any) -> Optional[Dict[str, Any]]:
        get_table(table)
        row = self._rows[table].get(row_id)
        return copy.deepcopy(row) if row is not None else None

    async def select(self, table: str, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        spec = get_table(table)
        filters = filters or {}
        for column in filters:
            spec.column(column)
        return [
            copy.deepcopy(row)
            for _, row in sorted(self._rows[table].items())
            if all(row.get(column) == value for column, value in filters.items())
        ]

    # Writes

    async def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        spec = get_table(table)
        self._reject_unknown_columns(spec, values)

        now = self.clock.now()
        row = {}
        for col in spec.columns:
            if col.name in values:
                row[col.name] = values[col.name]
            elif col.generated:
                # Sequences advance even when the insert later fails
                row[col.name] = next(self._sequences[table])
            elif col.default is not None:
                row[col.name] = col.default(now)
            else:
                row[col.name] = None

        if row[spec.primary_key] in self._rows[table]:
            self._raise_duplicate(spec, spec.primary_key, row[spec.primary_key], f"{table}_pkey")

        self._validate(spec, row, now)
        self._rows[table][row[spec.primary_key]] = row
        logger.debug(f"Inserted {table} {row[spec.primary_key]}")
        return copy.deepcopy(row)

    async def update(self, table: str, row_id: Any, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        spec = get_table(table)
        self._reject_unknown_columns(spec, values)
        if spec.primary_key in values and values[spec.primary_key] != row_id:
            raise StoreError(f"Changing the primary key of {table} is not supported")

        current = self._rows[table].get(row_id)
        if current is None:
            return None

        updated = self._apply_update(spec, current, values)
        return copy.deepcopy(updated)

    async def increment(self, table: str, row_id: Any, column: str, delta: int) -> Optional[Dict[str, Any]]:
        spec = get_table(table)
        spec.column(column)
        current = self._rows[table].get(row_id)
        if current is None:
            return None
        base = current[column]
        updated = self._apply_update(spec, current, {column: None if base is None else base + delta})
        return copy.deepcopy(updated)

    async def raw_update(self, table: str, row_id: Any, values: Dict[str, Any]) -> int:
        logger.info(f"Raw update on {table} {row_id}: {values}")
        updated = await self.update(table, row_id, values)
        return 0 if updated is None else 1

    async def delete(self, table: str, row_id: Any) -> bool:
        get_table(table)
        if row_id not in self._rows[table]:
            return False
        async with self.transaction():
            self._delete_row(table, row_id)
        return True

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["MemoryStore"]:
        snapshot = copy.deepcopy(self._rows)
        try:
            yield self
        except BaseException:
            self._rows = snapshot
            logger.debug("Memory transaction rolled back")
            raise

    # Internals

    def _apply_update(self, spec: Table, current: Dict[str, Any], values: Dict[str, Any]) -> Dict[str, Any]:
        now = self.clock.now()
        candidate = dict(current)
        candidate.update(values)
        if spec.touch_column:
            previous = current.get(spec.touch_column)
            # Strictly later than the previous stamp even when the clock has not moved
            if previous is not None and now <= previous:
                now = previous + timedelta(microseconds=1)
            candidate[spec.touch_column] = now
        self._validate(spec, candidate, now)
        self._rows[spec.name][candidate[spec.primary_key]] = candidate
        return candidate

    def _delete_row(self, table: str, row_id: Any) -> None:
        spec = get_table(table)
        for child, fk in referencing_keys(table):
            dependents = [
                child_id for child_id, child_row in sorted(self._rows[child.name].items())
                if child_row.get(fk.column) == row_id
            ]
            if not dependents:
                continue
            if fk.on_delete == "CASCADE":
                for child_id in dependents:
                    if child_id in self._rows[child.name]:
                        self._delete_row(child.name, child_id)
            elif fk.on_delete == "SET NULL":
                for child_id in dependents:
                    self._apply_update(child, self._rows[child.name][child_id], {fk.column: None})
            else:
                raise ForeignKeyViolation(
                    f'update or delete on table "{table}" violates foreign key constraint '
                    f'"{fk.name}" on table "{child.name}"',
                    table=child.name,
                    column=fk.column,
                    constraint=fk.name,
                    detail=f'Key ({spec.primary_key})=({row_id}) is still referenced from table "{child.name}".',
                )
        del self._rows[table][row_id]
        logger.debug(f"Deleted {table} {row_id}")

    def _validate(self, spec: Table, row: Dict[str, Any], now) -> None:
        for col in spec.columns:
            if not col.nullable and row.get(col.name) is None:
                raise NotNullViolation(
                    f'null value in column "{col.name}" of relation "{spec.name}" violates not-null constraint',
                    table=spec.name,
                    column=col.name,
                )

        for check in sorted(spec.checks, key=lambda c: c.name):
            if not check.predicate(row, now):
                raise CheckViolation(
                    f'new row for relation "{spec.name}" violates check constraint "{check.name}"',
                    table=spec.name,
                    column=check.column,
                    constraint=check.name,
                )

        for column in spec.unique:
            value = row.get(column)
            if value is None:
                continue
            for other_id, other in self._rows[spec.name].items():
                if other_id != row[spec.primary_key] and other.get(column) == value:
                    self._raise_duplicate(spec, column, value, spec.unique_constraint_name(column))

        for fk in spec.foreign_keys:
            value = row.get(fk.column)
            if value is not None and value not in self._rows[fk.ref_table]:
                raise ForeignKeyViolation(
                    f'insert or update on table "{spec.name}" violates foreign key constraint "{fk.name}"',
                    table=spec.name,
                    column=fk.column,
                    constraint=fk.name,
                    detail=f'Key ({fk.column})=({value}) is not present in table "{fk.ref_table}".',
                )

    @staticmethod
    def _raise_duplicate(spec: Table, column: str, value: Any, constraint: str) -> None:
        raise UniqueViolation(
            f'duplicate key value violates unique constraint "{constraint}"',
            table=spec.name,
            column=column,
            constraint=constraint,
            detail=f"Key ({column})=({value}) already exists.",
        )

    @staticmethod
    def _reject_unknown_columns(spec: Table, values: Dict[str, Any]) -> None:
        for column in values:
            if not spec.has_column(column):
                raise StoreError(f'column "{column}" of relation "{spec.name}" does not exist')
