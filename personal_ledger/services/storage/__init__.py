"""
Storage Services Package

Provides the abstract ledger-file interface and its implementations.
The JSON file is the real backend; the in-memory one is for tests.
"""

from personal_ledger.services.storage.interface import (
    CorruptLedgerError,
    LedgerFileInterface,
    LedgerSaveError,
    StorageError,
)
from personal_ledger.services.storage.json_file import (
    SCHEMA_VERSION,
    JsonLedgerFile,
    entry_to_record,
    record_to_entry,
)
from personal_ledger.services.storage.memory import MemoryLedgerFile

__all__ = [
    # Interface
    "LedgerFileInterface",
    # Exceptions
    "CorruptLedgerError",
    "LedgerSaveError",
    "StorageError",
    # Implementations
    "JsonLedgerFile",
    "MemoryLedgerFile",
    "SCHEMA_VERSION",
    "entry_to_record",
    "record_to_entry",
]
