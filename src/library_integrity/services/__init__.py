from library_integrity.services.base_dao import BaseDAO, WriteResult, capture
from library_integrity.services.book_dao import BookDAO
from library_integrity.services.borrowing_dao import BorrowingDAO
from library_integrity.services.catalog_dao import AuthorDAO, CategoryDAO, PublisherDAO
from library_integrity.services.user_dao import UserDAO

__all__ = [
    "AuthorDAO",
    "BaseDAO",
    "BookDAO",
    "BorrowingDAO",
    "CategoryDAO",
    "PublisherDAO",
    "UserDAO",
    "WriteResult",
    "capture",
]
