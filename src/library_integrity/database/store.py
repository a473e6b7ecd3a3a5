"""
Store interface shared by the PostgreSQL and in-memory implementations
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, AsyncContextManager, Dict, List, Optional

from library_integrity.database.clock import Clock


class Store(ABC):
    """
    Row-level access to the library schema.

    Rows are plain dicts keyed by column name. Every write is checked against
    the schema catalog; a rejected write raises a ConstraintViolation and
    leaves the store unchanged.
    """

    backend: str = "abstract"

    def __init__(self, clock: Clock):
        self.clock = clock

    async def connect(self) -> None:
        """Acquire resources; a no-op for stores that hold none"""

    async def close(self) -> None:
        """Release resources"""

    async def current_time(self) -> datetime:
        """Time the store stamps into timestamp columns"""
        return self.clock.now()

    @abstractmethod
    async def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a row and return it with generated and defaulted columns filled in"""

    @abstractmethod
    async def fetch(self, table: str, row_id: Any) -> Optional[Dict[str, Any]]:
        """Return the row with the given primary key, or None"""

    @abstractmethod
    async def select(self, table: str, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Return rows whose columns equal every value in ``filters``, ordered by primary key"""

    @abstractmethod
    async def update(self, table: str, row_id: Any, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Update a row and return its post-image, or None if it does not exist"""

    @abstractmethod
    async def increment(self, table: str, row_id: Any, column: str, delta: int) -> Optional[Dict[str, Any]]:
        """Add ``delta`` to a numeric column in place"""

    @abstractmethod
    async def delete(self, table: str, row_id: Any) -> bool:
        """Delete a row, applying referential actions; True if a row was removed"""

    @abstractmethod
    async def raw_update(self, table: str, row_id: Any, values: Dict[str, Any]) -> int:
        """
        Update a row without going through any DAO.

        Returns the number of rows affected. Only the store's own constraints
        apply.
        """

    @abstractmethod
    def transaction(self) -> AsyncContextManager["Store"]:
        """Group calls so they commit or roll back together"""
