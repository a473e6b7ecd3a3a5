"""
Books DAO
"""

import logging
from typing import Optional

from library_integrity.models.book import Book
from library_integrity.services.base_dao import BaseDAO

logger = logging.getLogger(__name__)


class BookDAO(BaseDAO[Book]):
    table_name = "books"
    model = Book

    async def find_by_isbn(self, isbn: str) -> Optional[Book]:
        matches = await self.find_by(isbn=isbn)
        return matches[0] if matches else None

    async def update_available_copies(self, book_id: int, available_copies: int) -> bool:
        """
        Set the available copy count of a book

        Returns:
            True if the book exists and was updated
        """
        logger.info(f"Updating book {book_id} available_copies to: {available_copies}")
        row = await self.store.update(self.table_name, book_id, {"available_copies": available_copies})
        return row is not None
