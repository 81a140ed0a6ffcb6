"""
Personal Ledger - Source Package

A small personal income/expense ledger kept in one local file.

DESIGN PRINCIPLES:
1. Entries are immutable; updates replace them in place
2. Every change is saved immediately
3. A corrupt file never stops the ledger from starting, but is never silent
4. Save failures are raised, not swallowed
5. Storage is swappable
"""

from personal_ledger.models.entry import DEFAULT_CATEGORIES, Entry, EntryKind, LoadResult, LoadStatus
from personal_ledger.services.storage import CorruptLedgerError, LedgerSaveError, StorageError
from personal_ledger.store import (
    DuplicateEntryError,
    InvalidEntryError,
    LedgerError,
    LedgerStore,
)

__version__ = "1.0.0"

__all__ = [
    "DEFAULT_CATEGORIES",
    "CorruptLedgerError",
    "DuplicateEntryError",
    "Entry",
    "EntryKind",
    "InvalidEntryError",
    "LedgerError",
    "LedgerSaveError",
    "LedgerStore",
    "LoadResult",
    "LoadStatus",
    "StorageError",
]
