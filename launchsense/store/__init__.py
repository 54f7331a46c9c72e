"""
Data store boundary.

The pipeline reads rules, signal weights and history, and appends ledger
entries, through the DataStore interface only.
"""

from launchsense.store.base import DataStore
from launchsense.store.memory import InMemoryDataStore
from launchsense.store.sql import SqlDataStore

__all__ = ["DataStore", "InMemoryDataStore", "SqlDataStore"]
