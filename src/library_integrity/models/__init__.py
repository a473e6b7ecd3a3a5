from library_integrity.models.book import Book
from library_integrity.models.borrowing import Borrowing
from library_integrity.models.catalog import Author, Category, Publisher
from library_integrity.models.enums import BookStatus, BorrowingStatus, UserRole, UserStatus
from library_integrity.models.user import User

__all__ = [
    "Author",
    "Book",
    "BookStatus",
    "Borrowing",
    "BorrowingStatus",
    "Category",
    "Publisher",
    "User",
    "UserRole",
    "UserStatus",
]
