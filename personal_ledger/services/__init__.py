"""Services package."""

from personal_ledger.services.storage import (
    CorruptLedgerError,
    JsonLedgerFile,
    LedgerFileInterface,
    LedgerSaveError,
    MemoryLedgerFile,
    StorageError,
)

__all__ = [
    # Storage services
    "CorruptLedgerError",
    "JsonLedgerFile",
    "LedgerFileInterface",
    "LedgerSaveError",
    "MemoryLedgerFile",
    "StorageError",
]
