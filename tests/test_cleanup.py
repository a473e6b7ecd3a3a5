"""
Id tracking and best-effort cleanup
"""

import pytest

from library_integrity.database import MemoryStore
from library_integrity.services import BookDAO, BorrowingDAO, UserDAO
from library_integrity.testing import CLEANUP_ORDER, DataFactory, IdTracker


class TestIdTracker:

    def test_cleanup_order_deletes_children_first(self):
        assert CLEANUP_ORDER.index("borrowings") < CLEANUP_ORDER.index("books")
        assert CLEANUP_ORDER.index("books") < CLEANUP_ORDER.index("users")
        assert CLEANUP_ORDER.index("books") < CLEANUP_ORDER.index("authors")

    def test_track_ignores_duplicates_and_none(self):
        tracker = IdTracker()
        tracker.track("users", 1)
        tracker.track("users", 1)
        tracker.track("users", None)

        assert tracker.get_tracked("users") == [1]
        assert tracker.total_tracked() == 1

    def test_track_rejects_unknown_table(self):
        with pytest.raises(ValueError):
            IdTracker().track("loans", 1)


class TestCleanup:

    @pytest.mark.asyncio
    async def test_cleanup_tolerates_already_deleted_rows(self, ctx):
        borrowing = await ctx.create_borrowing()
        await ctx.users.delete(borrowing.user_id)

        # The borrowing went with the user; the book is still there
        assert await ctx.cleanup() == 1
        assert ctx.tracker.total_tracked() == 0

    @pytest.mark.asyncio
    async def test_cleanup_skips_rows_that_are_still_referenced(self):
        store = MemoryStore()
        factory = DataFactory()
        users, books, borrowings = UserDAO(store), BookDAO(store), BorrowingDAO(store)

        user = await users.create(factory.user())
        book = await books.create(factory.book())
        await borrowings.create(factory.borrowing(user.user_id, book.book_id, store.clock.now()))

        tracker = IdTracker()
        tracker.track("books", book.book_id)

        # Untracked borrowing keeps the book alive
        assert await tracker.cleanup({"books": books, "users": users}) == 0
        assert await books.find_by_id(book.book_id) is not None
        assert tracker.get_tracked("books") == []

    @pytest.mark.asyncio
    async def test_cleanup_deletes_tracked_rows(self, settings):
        store = MemoryStore()
        factory = DataFactory(settings.faker_locale)
        tracker = IdTracker()
        users = UserDAO(store)

        user = await users.create(factory.user())
        tracker.track("users", user.user_id)

        assert await tracker.cleanup({"users": users}) == 1
        assert await users.find_by_id(user.user_id) is None
