"""
User record
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from library_integrity.models.enums import UserRole, UserStatus


class User(BaseModel):
    """
    Library user.

    ``username`` and ``email`` must be passed explicitly; ``None`` is accepted
    so the store's not-null constraint can be exercised. ``role`` and
    ``status`` are plain strings so values outside the enumeration reach the
    store's check constraint.
    """
    username: Optional[str]
    email: Optional[str]
    full_name: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = UserRole.MEMBER.value
    status: Optional[str] = UserStatus.ACTIVE.value
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
