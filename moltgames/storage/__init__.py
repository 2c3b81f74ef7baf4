"""
Storage Module - Persistence for sessions and leaderboards.

A single JSON document survives process restarts. There is no
database server; concurrency is handled by locks in this process.
"""

from .database import Database
from .migrations import CURRENT_VERSION, migrate, empty_document

__all__ = [
    "Database",
    "CURRENT_VERSION",
    "migrate",
    "empty_document",
]
