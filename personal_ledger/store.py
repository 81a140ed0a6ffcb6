"""
Ledger Store

This module owns the ledger: the ordered list of entries held in memory
for the life of the process, plus the file it is saved to.

Flows:
1. Construction -> load the file once (missing or corrupt both start empty)
2. add / update / delete -> change the list, then save the whole ledger
3. search / total / monthly_summary -> scan the list, never touch the disk

DESIGN DECISION: The store favours availability over durability at startup.
A corrupt file never stops the ledger from starting; instead the problem is
reported through load_result, logged as a warning, and (by default) the
unreadable file is copied aside before it can be overwritten.

Saves are the opposite: a failed save is raised to the caller as
LedgerSaveError. The in-memory change is kept, so the caller can keep
working and call save() again later.

The store is not thread-safe. Callers sharing it across threads must
serialize access themselves.
"""

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Iterator, Optional, Union

from personal_ledger.audit import AuditLogger
from personal_ledger.config import LedgerSettings, get_settings
from personal_ledger.models.entry import Entry, EntryKind, LoadResult, LoadStatus
from personal_ledger.queries import EntryQuery, QueryExecutor
from personal_ledger.services.storage import (
    CorruptLedgerError,
    JsonLedgerFile,
    LedgerFileInterface,
    LedgerSaveError,
)


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class InvalidEntryError(LedgerError, ValueError):
    """An absent or wrong-typed entry was passed to the store."""
    pass


class DuplicateEntryError(LedgerError):
    """An entry with the same id is already in the ledger."""
    pass


def _require_entry(value: object, argument: str) -> Entry:
    """Fail fast on None or anything that is not an Entry."""
    if value is None:
        raise InvalidEntryError(f"{argument} must not be None")
    if not isinstance(value, Entry):
        raise InvalidEntryError(
            f"{argument} must be an Entry, got {type(value).__name__}"
        )
    return value


class LedgerStore:
    """
    In-memory ledger with save-on-every-change persistence.

    Usage:
        store = LedgerStore(tmp_path / "ledger.json")
        store.add(Entry(kind=EntryKind.EXPENSE, amount=Decimal("12.50"),
                        category="Dining", entry_date=date.today()))
        store.total(EntryKind.EXPENSE)
    """

    def __init__(
        self,
        storage: Union[LedgerFileInterface, str, Path, None] = None,
        settings: Optional[LedgerSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Initialize the store and load the saved ledger.

        Args:
            storage: Backend, or a path for a JSON ledger file.
                     If None, the path comes from settings.data_file.
            settings: Settings to use. If None, get_settings() is used.
            audit_logger: Where audit events go. If None, one is created.
        """
        self._settings = settings or get_settings()
        if storage is None:
            storage = self._settings.data_file
        if not isinstance(storage, LedgerFileInterface):
            storage = JsonLedgerFile(storage, save_attempts=self._settings.save_attempts)

        self._storage = storage
        self._audit = audit_logger or AuditLogger()
        self._executor = QueryExecutor()
        self._entries: list[Entry] = []
        self._load_result = self._load()

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def _load(self) -> LoadResult:
        """Read the saved ledger once; never raises."""
        if not self._storage.exists():
            result = LoadResult(status=LoadStatus.MISSING)
        else:
            try:
                self._entries = self._storage.read_entries()
                result = LoadResult(
                    status=LoadStatus.LOADED,
                    entry_count=len(self._entries),
                )
            except CorruptLedgerError as e:
                self._entries = []
                backup_path = None
                if self._settings.backup_corrupt_file:
                    backup_path = self._storage.backup()
                result = LoadResult(
                    status=LoadStatus.CORRUPT,
                    error=str(e),
                    backup_path=backup_path,
                )

        self._audit.log_load(result, self._storage.location)
        return result

    def save(self) -> None:
        """
        Write the whole ledger to storage now.

        Called by every mutation. Callers can also use it to retry after a
        LedgerSaveError.

        Raises:
            LedgerSaveError: If the write fails
        """
        self._storage.write_entries(list(self._entries))

    def _save_after(self, operation: str) -> None:
        try:
            self.save()
        except LedgerSaveError as e:
            self._audit.log_save_failed(operation, str(e))
            raise

    @property
    def load_result(self) -> LoadResult:
        """What was found in storage when the store started."""
        return self._load_result

    @property
    def load_status(self) -> LoadStatus:
        return self._load_result.status

    @property
    def storage(self) -> LedgerFileInterface:
        return self._storage

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def _index_of(self, entry_id) -> int:
        """Position of the entry with this id, or -1."""
        for index, stored in enumerate(self._entries):
            if stored.id == entry_id:
                return index
        return -1

    def add(self, entry: Entry) -> None:
        """
        Append an entry and save.

        Raises:
            InvalidEntryError: If entry is None or not an Entry
            DuplicateEntryError: If an entry with the same id is stored
            LedgerSaveError: If the save fails (the entry stays appended)
        """
        entry = _require_entry(entry, "entry")
        if self._index_of(entry.id) != -1:
            raise DuplicateEntryError(f"Entry {entry.id} is already in the ledger")

        self._entries.append(entry)
        self._audit.log_entry_added(entry)
        self._save_after("add")

    def delete(self, entry: Entry) -> bool:
        """
        Remove the stored entry with the same id and save.

        Deleting an entry that is not stored does nothing, so repeating a
        delete is harmless.

        Returns:
            True if an entry was removed
        """
        entry = _require_entry(entry, "entry")
        index = self._index_of(entry.id)
        if index == -1:
            return False

        removed = self._entries.pop(index)
        self._audit.log_entry_deleted(removed, index)
        self._save_after("delete")
        return True

    def update(self, old_entry: Entry, new_entry: Entry) -> bool:
        """
        Replace the stored entry matching old_entry's id with new_entry.

        The replacement takes the same position in the ledger. Nothing
        happens if old_entry is not stored.

        Returns:
            True if an entry was replaced

        Raises:
            DuplicateEntryError: If new_entry carries a different id that
                                 already belongs to another stored entry
        """
        old_entry = _require_entry(old_entry, "old_entry")
        new_entry = _require_entry(new_entry, "new_entry")

        index = self._index_of(old_entry.id)
        if index == -1:
            return False
        if new_entry.id != old_entry.id and self._index_of(new_entry.id) != -1:
            raise DuplicateEntryError(f"Entry {new_entry.id} is already in the ledger")

        replaced = self._entries[index]
        self._entries[index] = new_entry
        self._audit.log_entry_updated(replaced, new_entry, index)
        self._save_after("update")
        return True

    # =========================================================================
    # QUERIES
    # =========================================================================

    def entries(self) -> list[Entry]:
        """Every entry, in insertion order (a copy)."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries())

    def search(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        kind: Union[EntryKind, str, None] = None,
        category: Optional[str] = None,
    ) -> list[Entry]:
        """
        Entries matching every given constraint, in insertion order.

        Args:
            start_date: Earliest date, inclusive
            end_date: Latest date, inclusive
            kind: EntryKind or label; None or "all" matches both kinds
            category: Exact category after trimming; None or blank matches all

        Returns:
            Matching entries; empty when nothing matches
        """
        query = EntryQuery(
            start_date=start_date,
            end_date=end_date,
            kind=kind,
            category=category,
        )
        results = self._executor.search(self._entries, query)
        self._audit.log_query_executed(query.describe(), len(results))
        return results

    def total(self, kind: Union[EntryKind, str]) -> Decimal:
        """Sum of amounts for one kind; Decimal("0") when there are none."""
        return self._executor.total(self._entries, kind)

    def monthly_summary(self, kind: Union[EntryKind, str]) -> dict[str, Decimal]:
        """Per-month sums for one kind, keyed "YYYY-MM" in ascending order."""
        return self._executor.monthly_summary(self._entries, kind)
