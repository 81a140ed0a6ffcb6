"""
Abstract Storage Interface

DESIGN DECISION: The store talks to its file through an abstract interface.
This allows us to:
1. Swap the JSON file for another encoding later
2. Use an in-memory backend for testing
3. Keep the ledger logic decoupled from the on-disk format

The interface is intentionally tiny: the ledger is always read and
written as a whole.
"""

from abc import ABC, abstractmethod
from typing import Optional

from personal_ledger.models.entry import Entry


class LedgerFileInterface(ABC):
    """
    Abstract interface for whole-ledger persistence.

    Any backend (JSON file, in-memory, etc.) must implement these methods.
    """

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable location of the stored ledger, for logs."""
        pass

    @abstractmethod
    def exists(self) -> bool:
        """
        Check whether a saved ledger exists yet.

        Returns:
            False on first run, before anything was saved
        """
        pass

    @abstractmethod
    def read_entries(self) -> list[Entry]:
        """
        Read the saved ledger.

        Returns:
            Entries in their saved order

        Raises:
            CorruptLedgerError: If the saved ledger cannot be read
        """
        pass

    @abstractmethod
    def write_entries(self, entries: list[Entry]) -> None:
        """
        Replace the saved ledger with these entries.

        Args:
            entries: The complete ledger, in order

        Raises:
            LedgerSaveError: If the write fails
        """
        pass

    def backup(self) -> Optional[str]:
        """
        Keep a copy of an unreadable saved ledger.

        Returns:
            Where the copy was written, or None if the backend cannot back up
        """
        return None


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class CorruptLedgerError(StorageError):
    """The saved ledger exists but cannot be read."""
    pass


class LedgerSaveError(StorageError):
    """The ledger could not be written."""
    pass
