"""
DAOs for the author, publisher and category reference tables
"""

from library_integrity.models.catalog import Author, Category, Publisher
from library_integrity.services.base_dao import BaseDAO


class AuthorDAO(BaseDAO[Author]):
    table_name = "authors"
    model = Author


class PublisherDAO(BaseDAO[Publisher]):
    table_name = "publishers"
    model = Publisher


class CategoryDAO(BaseDAO[Category]):
    table_name = "categories"
    model = Category
