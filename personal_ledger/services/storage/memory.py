"""
In-Memory Storage Implementation

Keeps the "saved" ledger in a list. Used by tests and by callers that want
a throwaway ledger without touching the disk.
"""

from typing import Optional

from personal_ledger.models.entry import Entry
from personal_ledger.services.storage.interface import (
    CorruptLedgerError,
    LedgerFileInterface,
    LedgerSaveError,
)


class MemoryLedgerFile(LedgerFileInterface):
    """
    In-memory stand-in for a ledger file.

    Args:
        entries: Initial saved ledger. None means nothing saved yet.
        corrupt: Make read_entries fail as if the saved data were unreadable.
    """

    def __init__(self, entries: Optional[list[Entry]] = None, corrupt: bool = False):
        self._saved: Optional[list[Entry]] = list(entries) if entries is not None else None
        self._corrupt = corrupt
        self.fail_writes = False
        self.write_count = 0

    @property
    def location(self) -> str:
        return "<memory>"

    @property
    def saved_entries(self) -> Optional[list[Entry]]:
        return list(self._saved) if self._saved is not None else None

    def exists(self) -> bool:
        return self._saved is not None or self._corrupt

    def read_entries(self) -> list[Entry]:
        if self._corrupt:
            raise CorruptLedgerError("In-memory ledger marked corrupt")
        return list(self._saved or [])

    def write_entries(self, entries: list[Entry]) -> None:
        if self.fail_writes:
            raise LedgerSaveError("In-memory ledger write refused")
        self._saved = list(entries)
        self._corrupt = False
        self.write_count += 1
