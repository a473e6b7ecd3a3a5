"""
Test data factory
Generates realistic but clearly-marked records that satisfy every constraint
unless a test overrides a field on purpose
"""

import uuid
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from faker import Faker

from library_integrity.models import Author, Book, BookStatus, Borrowing, Category, Publisher, User, UserRole, UserStatus


class DataFactory:
    """Builds unsaved records; persisting them is the caller's job"""

    def __init__(self, locale: str = "id_ID", prefix: str = "itest"):
        self.fake = Faker(locale)
        self.prefix = prefix

    def _token(self) -> str:
        return uuid.uuid4().hex[:12]

    def user(self, **overrides) -> User:
        token = self._token()
        data = {
            "username": f"{self.prefix}_user_{token}_{self.fake.random_int(min=0, max=9999)}",
            "email": f"{self.prefix}.{token}@{self.fake.free_email_domain()}",
            "full_name": self.fake.name(),
            "phone": self.fake.phone_number()[:30],  # Respect DB constraint
            "role": UserRole.MEMBER.value,
            "status": UserStatus.ACTIVE.value,
        }
        data.update(overrides)
        return User(**data)

    def book(self, **overrides) -> Book:
        digits = str(uuid.uuid4().int)[:10]
        data = {
            "isbn": f"978{digits}",
            "title": f"Buku Integrity Test - {self.fake.sentence(nb_words=4).rstrip('.')}",
            "publication_year": 2023,
            "pages": 300,
            "language": "Indonesia",
            "description": f"Buku untuk testing integrity - {self.fake.sentence()}",
            "total_copies": 5,
            "available_copies": 3,
            "price": Decimal("75000.00"),
            "location": "Rak Integrity-Test",
            "status": BookStatus.AVAILABLE.value,
        }
        data.update(overrides)
        return Book(**data)

    def borrowing(
        self,
        user_id: Optional[int],
        book_id: Optional[int],
        now: datetime,
        period_days: int = 14,
        **overrides,
    ) -> Borrowing:
        data = {
            "user_id": user_id,
            "book_id": book_id,
            "due_date": now + timedelta(days=period_days),
        }
        data.update(overrides)
        return Borrowing(**data)

    def author(self, **overrides) -> Author:
        data = {"name": f"{self.fake.name()} ({self._token()})"}
        data.update(overrides)
        return Author(**data)

    def publisher(self, **overrides) -> Publisher:
        data = {"name": f"{self.fake.company()} ({self._token()})"}
        data.update(overrides)
        return Publisher(**data)

    def category(self, **overrides) -> Category:
        data = {"name": f"{self.prefix} {self.fake.word()} {self._token()}"}
        data.update(overrides)
        return Category(**data)
