"""
Harness for exercising the schema constraints against a store
"""

from library_integrity.testing.context import IntegrityContext, open_integrity_context
from library_integrity.testing.data_factory import DataFactory
from library_integrity.testing.id_tracker import CLEANUP_ORDER, IdTracker

__all__ = [
    "CLEANUP_ORDER",
    "DataFactory",
    "IdTracker",
    "IntegrityContext",
    "open_integrity_context",
]
