"""
Tracks ids created during a test run and deletes them afterwards
"""

import logging
from typing import Any, Dict, List

from library_integrity.database.errors import StoreError
from library_integrity.services.base_dao import BaseDAO

logger = logging.getLogger(__name__)

# Children before parents
CLEANUP_ORDER = ["borrowings", "books", "users", "authors", "publishers", "categories"]


class IdTracker:
    """Track every id created during testing for complete cleanup"""

    def __init__(self):
        self.tracked_ids: Dict[str, List[Any]] = {table: [] for table in CLEANUP_ORDER}

    def track(self, table: str, record_id: Any) -> None:
        if table not in self.tracked_ids:
            raise ValueError(f"Unknown table: {table}")
        if record_id is not None and record_id not in self.tracked_ids[table]:
            self.tracked_ids[table].append(record_id)

    def get_tracked(self, table: str) -> List[Any]:
        return list(self.tracked_ids.get(table, []))

    def total_tracked(self) -> int:
        return sum(len(ids) for ids in self.tracked_ids.values())

    async def cleanup(self, daos: Dict[str, BaseDAO]) -> int:
        """
        Delete every tracked row, children first

        Best effort: a row that is already gone or still referenced is skipped
        so the rest of the teardown still runs. Returns the number of rows
        deleted.
        """
        deleted = 0
        for table in CLEANUP_ORDER:
            dao = daos.get(table)
            if dao is None:
                continue
            for record_id in self.tracked_ids[table]:
                try:
                    if await dao.delete(record_id):
                        deleted += 1
                except StoreError as e:
                    logger.debug(f"Cleanup skipped {table} {record_id}: {e}")
            self.tracked_ids[table].clear()

        logger.info(f"Cleanup removed {deleted} rows")
        return deleted
