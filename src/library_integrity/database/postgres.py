"""
PostgreSQL store backed by an asyncpg connection pool
"""

import logging
from contextlib import asynccontextmanager
from contextvars import ContextVar
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

import asyncpg

from library_integrity.database.clock import Clock, SystemClock
from library_integrity.database.errors import StoreError, translate_postgres_error
from library_integrity.database.schema import Table, generate_ddl_statements, get_table
from library_integrity.database.store import Store

logger = logging.getLogger(__name__)


class PostgresStore(Store):
    """
    Store that lets PostgreSQL enforce the schema.

    Calls made inside ``transaction()`` share one connection, tracked in a
    context variable; calls outside a transaction each borrow a connection
    from the pool and run in autocommit.
    """

    backend = "postgres"

    def __init__(
        self,
        database_url: str,
        clock: Optional[Clock] = None,
        min_size: int = 1,
        max_size: int = 5,
        command_timeout: float = 60,
    ):
        super().__init__(clock or SystemClock())
        self.database_url = database_url
        self.min_size = min_size
        self.max_size = max_size
        self.command_timeout = command_timeout
        self.pool: Optional[asyncpg.Pool] = None
        self._tx_conn: ContextVar[Optional[asyncpg.Connection]] = ContextVar(
            f"library_tx_conn_{id(self)}", default=None
        )

    async def connect(self) -> None:
        """Initialize database connection pool"""
        if self.pool is not None:
            return
        self.pool = await asyncpg.create_pool(
            self.database_url,
            min_size=self.min_size,
            max_size=self.max_size,
            command_timeout=self.command_timeout,
            statement_cache_size=0  # pgbouncer compatibility
        )

        # Test connection
        async with self.pool.acquire() as conn:
            await conn.fetchval("SELECT 1")

        logger.info("PostgreSQL store connected")

    async def close(self) -> None:
        """Close database connection pool"""
        if self.pool:
            await self.pool.close()
            self.pool = None
        logger.info("PostgreSQL store closed")

    async def current_time(self) -> datetime:
        """Server time, so stamps written by DAOs agree with column defaults"""
        async with self._connection() as conn:
            return await conn.fetchval("SELECT clock_timestamp()")

    async def ensure_schema(self) -> None:
        """Create tables, constraints and triggers if they are missing"""
        statements = generate_ddl_statements()
        async with self._connection() as conn:
            for statement in statements:
                await conn.execute(statement)
        logger.info(f"Schema ensured ({len(statements)} DDL statements)")

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[asyncpg.Connection]:
        current = self._tx_conn.get()
        if current is not None:
            yield current
            return
        if self.pool is None:
            raise StoreError("Database pool not initialized")
        async with self.pool.acquire() as conn:
            yield conn

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["PostgresStore"]:
        current = self._tx_conn.get()
        if current is not None:
            # Nested: savepoint on the same connection
            async with current.transaction():
                yield self
            return

        if self.pool is None:
            raise StoreError("Database pool not initialized")
        async with self.pool.acquire() as conn:
            token = self._tx_conn.set(conn)
            try:
                async with conn.transaction():
                    yield self
            finally:
                self._tx_conn.reset(token)

    async def execute(self, statement: str, *args: Any) -> str:
        """Run a raw SQL statement and return the command status (e.g. ``UPDATE 1``)"""
        logger.info(f"Executing raw statement: {statement}")
        logger.info(f"Parameters: {list(args)}")
        async with self._connection() as conn:
            try:
                return await conn.execute(statement, *args)
            except asyncpg.PostgresError as e:
                raise translate_postgres_error(e) from e

    async def _fetchrow(self, query: str, params: List[Any]) -> Optional[Dict[str, Any]]:
        logger.debug(f"Executing: {query}")
        logger.debug(f"Parameters: {params}")
        async with self._connection() as conn:
            try:
                row = await conn.fetchrow(query, *params)
            except asyncpg.PostgresError as e:
                raise translate_postgres_error(e) from e
        return dict(row) if row is not None else None

    # Reads

    async def fetch(self, table: str, row_id: Any) -> Optional[Dict[str, Any]]:
        spec = get_table(table)
        query = f"SELECT * FROM {spec.name} WHERE {spec.primary_key} = $1"
        return await self._fetchrow(query, [row_id])

    async def select(self, table: str, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        spec = get_table(table)
        where_sql, params = self._build_where(spec, filters or {})
        query = f"SELECT * FROM {spec.name}{where_sql} ORDER BY {spec.primary_key}"
        async with self._connection() as conn:
            try:
                rows = await conn.fetch(query, *params)
            except asyncpg.PostgresError as e:
                raise translate_postgres_error(e) from e
        return [dict(row) for row in rows]

    # Writes

    async def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        spec = get_table(table)
        query, params = self._build_insert_query(spec, values)
        row = await self._fetchrow(query, params)
        if row is None:
            raise StoreError(f"Insert into {table} returned no row")
        return row

    async def update(self, table: str, row_id: Any, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        spec = get_table(table)
        if not values:
            return await self.fetch(table, row_id)
        query, params = self._build_update_query(spec, row_id, values)
        return await self._fetchrow(query, params)

    async def increment(self, table: str, row_id: Any, column: str, delta: int) -> Optional[Dict[str, Any]]:
        spec = get_table(table)
        self._check_columns(spec, [column])
        query = (
            f"UPDATE {spec.name} SET {column} = {column} + $1 "
            f"WHERE {spec.primary_key} = $2 RETURNING *"
        )
        return await self._fetchrow(query, [delta, row_id])

    async def delete(self, table: str, row_id: Any) -> bool:
        spec = get_table(table)
        status = await self.execute(f"DELETE FROM {spec.name} WHERE {spec.primary_key} = $1", row_id)
        # asyncpg returns "DELETE N" where N is the number of rows
        deleted_count = int(status.split()[-1]) if status else 0
        return deleted_count > 0

    async def raw_update(self, table: str, row_id: Any, values: Dict[str, Any]) -> int:
        spec = get_table(table)
        query, params = self._build_update_query(spec, row_id, values, returning=False)
        status = await self.execute(query, *params)
        return int(status.split()[-1]) if status else 0

    # Query building

    @staticmethod
    def _check_columns(spec: Table, columns) -> None:
        for column in columns:
            if not spec.has_column(column):
                raise StoreError(f'column "{column}" of relation "{spec.name}" does not exist')

    def _build_insert_query(self, spec: Table, values: Dict[str, Any]) -> Tuple[str, List[Any]]:
        self._check_columns(spec, values)
        if not values:
            return f"INSERT INTO {spec.name} DEFAULT VALUES RETURNING *", []

        field_names = list(values.keys())
        placeholders = [f"${i}" for i in range(1, len(field_names) + 1)]
        query = (
            f"INSERT INTO {spec.name} ({', '.join(field_names)}) "
            f"VALUES ({', '.join(placeholders)}) RETURNING *"
        )
        return query, list(values.values())

    def _build_update_query(
        self, spec: Table, row_id: Any, values: Dict[str, Any], returning: bool = True
    ) -> Tuple[str, List[Any]]:
        self._check_columns(spec, values)
        params = []
        set_parts = []
        for field_name, value in values.items():
            params.append(value)
            set_parts.append(f"{field_name} = ${len(params)}")
        params.append(row_id)

        query = f"UPDATE {spec.name} SET {', '.join(set_parts)} WHERE {spec.primary_key} = ${len(params)}"
        if returning:
            query += " RETURNING *"
        return query, params

    def _build_where(self, spec: Table, filters: Dict[str, Any]) -> Tuple[str, List[Any]]:
        self._check_columns(spec, filters)
        if not filters:
            return "", []
        params = []
        where_parts = []
        for field_name, value in filters.items():
            if value is None:
                where_parts.append(f"{field_name} IS NULL")
                continue
            params.append(value)
            where_parts.append(f"{field_name} = ${len(params)}")
        return f" WHERE {' AND '.join(where_parts)}", params
