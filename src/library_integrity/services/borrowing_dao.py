"""
Borrowings DAO

Creating a borrowing takes one copy off the shelf and returning it puts the
copy back; each pair of writes runs in a single store transaction.
"""

import logging
from datetime import datetime
from typing import List, Optional

from library_integrity.database.errors import RecordNotFoundError
from library_integrity.models.borrowing import Borrowing
from library_integrity.models.enums import BorrowingStatus
from library_integrity.services.base_dao import BaseDAO

logger = logging.getLogger(__name__)


class BorrowingDAO(BaseDAO[Borrowing]):
    table_name = "borrowings"
    model = Borrowing

    async def create(self, record: Borrowing) -> Borrowing:
        """
        Insert a borrowing and decrement the book's available copies

        Both writes commit together. A book with no copies left fails the
        books check constraint and the borrowing row is rolled back with it.
        """
        async with self.store.transaction():
            created = await super().create(record)
            await self.store.increment("books", created.book_id, "available_copies", -1)
        logger.info(f"Book {created.book_id} lent to user {created.user_id}")
        return created

    async def return_borrowing(self, borrowing_id: int, returned_at: Optional[datetime] = None) -> Borrowing:
        """
        Mark a borrowing returned and put the copy back on the shelf

        Args:
            borrowing_id: Borrowing to close
            returned_at: Return timestamp (default: the store's current time)

        Raises:
            RecordNotFoundError: no such borrowing
            ValueError: the borrowing was already returned
        """
        async with self.store.transaction():
            current = await self.find_by_id(borrowing_id)
            if current is None:
                raise RecordNotFoundError(self.table_name, borrowing_id)
            if current.is_returned:
                raise ValueError(f"Borrowing {borrowing_id} was already returned")

            row = await self.store.update(
                self.table_name,
                borrowing_id,
                {
                    "status": BorrowingStatus.RETURNED.value,
                    "return_date": returned_at or await self.store.current_time(),
                },
            )
            await self.store.increment("books", current.book_id, "available_copies", 1)

        logger.info(f"Borrowing {borrowing_id} returned")
        return self._to_model(row)

    async def find_by_user(self, user_id: int) -> List[Borrowing]:
        return await self.find_by(user_id=user_id)

    async def find_active_by_book(self, book_id: int) -> List[Borrowing]:
        return [b for b in await self.find_by(book_id=book_id) if not b.is_returned]
