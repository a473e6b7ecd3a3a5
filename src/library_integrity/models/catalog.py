"""
Reference rows that books point at
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class Author(BaseModel):
    name: Optional[str]
    author_id: Optional[int] = None
    created_at: Optional[datetime] = None


class Publisher(BaseModel):
    name: Optional[str]
    publisher_id: Optional[int] = None
    created_at: Optional[datetime] = None


class Category(BaseModel):
    name: Optional[str]
    category_id: Optional[int] = None
    created_at: Optional[datetime] = None
