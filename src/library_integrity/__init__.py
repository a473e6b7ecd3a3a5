"""
Library integrity - schema, stores and DAOs for the library-management
database, plus the harness used to verify its constraints
"""

__version__ = "1.0.0"
