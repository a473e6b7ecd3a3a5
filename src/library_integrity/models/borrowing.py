"""
Borrowing record
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class Borrowing(BaseModel):
    """
    A loan of one book to one user.

    ``borrow_date`` and ``status`` default in the store (now / borrowed) when
    left unset.
    """
    user_id: Optional[int]
    book_id: Optional[int]
    due_date: Optional[datetime]
    borrow_date: Optional[datetime] = None
    return_date: Optional[datetime] = None
    status: Optional[str] = None
    fine_amount: Optional[Decimal] = None
    notes: Optional[str] = None
    borrowing_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_returned(self) -> bool:
        return self.return_date is not None
