"""
Users DAO
"""

from typing import Optional

from library_integrity.models.user import User
from library_integrity.services.base_dao import BaseDAO


class UserDAO(BaseDAO[User]):
    table_name = "users"
    model = User

    async def find_by_username(self, username: str) -> Optional[User]:
        matches = await self.find_by(username=username)
        return matches[0] if matches else None

    async def find_by_email(self, email: str) -> Optional[User]:
        matches = await self.find_by(email=email)
        return matches[0] if matches else None
