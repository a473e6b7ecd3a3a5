"""
Enum definitions for the library schema
"""

from enum import Enum
from typing import List


class _ValuesMixin:
    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]


class UserRole(_ValuesMixin, str, Enum):
    MEMBER = "member"
    LIBRARIAN = "librarian"
    ADMIN = "admin"


class UserStatus(_ValuesMixin, str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class BookStatus(_ValuesMixin, str, Enum):
    """
    Book status enum matching the books.status check constraint.

    - AVAILABLE: on the shelf
    - BORROWED: every copy is out
    - RESERVED: held for a member
    - MAINTENANCE: being repaired or catalogued
    - LOST: written off
    """
    AVAILABLE = "available"
    BORROWED = "borrowed"
    RESERVED = "reserved"
    MAINTENANCE = "maintenance"
    LOST = "lost"


class BorrowingStatus(_ValuesMixin, str, Enum):
    BORROWED = "borrowed"
    RETURNED = "returned"
    OVERDUE = "overdue"
