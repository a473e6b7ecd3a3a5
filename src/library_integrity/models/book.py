"""
Book record
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from library_integrity.models.enums import BookStatus


class Book(BaseModel):
    isbn: Optional[str]
    title: Optional[str]
    author_id: Optional[int] = None
    publisher_id: Optional[int] = None
    category_id: Optional[int] = None
    publication_year: Optional[int] = None
    pages: Optional[int] = None
    language: Optional[str] = None
    description: Optional[str] = None
    total_copies: Optional[int] = 1
    available_copies: Optional[int] = 1
    price: Optional[Decimal] = None
    location: Optional[str] = None
    status: Optional[str] = BookStatus.AVAILABLE.value
    book_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
