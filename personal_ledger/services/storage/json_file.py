"""
JSON File Storage Implementation

DESIGN DECISION: The ledger is saved as one UTF-8 JSON document with an
explicit, versioned schema:

    {
      "schema_version": 1,
      "entries": [
        {"id": "...", "kind": "expense", "amount": "100.00",
         "category": "Dining", "date": "2025-01-01", "note": "lunch"}
      ]
    }

- Amounts are written as decimal strings so no precision is lost
- Dates are ISO 8601 calendar dates
- Entry order in the file is ledger order

TRADEOFFS:
- The whole file is rewritten on every save (fine for personal volumes)
- Writes go to a temporary file that replaces the ledger with os.replace,
  so a failed write leaves the previous file untouched
- Unknown schema versions are treated as unreadable; there is no migration
"""

import json
import os
import shutil
import stat
import tempfile
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional, Union
from uuid import UUID

from pydantic import ValidationError
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from personal_ledger.audit import get_logger
from personal_ledger.models.entry import Entry, EntryKind
from personal_ledger.services.storage.interface import (
    CorruptLedgerError,
    LedgerFileInterface,
    LedgerSaveError,
)


SCHEMA_VERSION = 1

# Keys of one saved record
ENTRY_FIELDS = [
    "id",
    "kind",
    "amount",
    "category",
    "date",
    "note",
]


def entry_to_record(entry: Entry) -> dict:
    """Convert an Entry to its saved JSON record."""
    return {
        "id": str(entry.id),
        "kind": entry.kind.value,
        "amount": str(entry.amount),
        "category": entry.category,
        "date": entry.entry_date.isoformat(),
        "note": entry.note,
    }


def record_to_entry(record: dict) -> Entry:
    """
    Convert a saved JSON record back to an Entry.

    Raises:
        CorruptLedgerError: If the record is missing fields or holds bad values
    """
    if not isinstance(record, dict):
        raise CorruptLedgerError(f"Entry record must be an object, got {type(record).__name__}")

    missing = [key for key in ENTRY_FIELDS if key not in record]
    if missing:
        raise CorruptLedgerError(f"Entry record missing fields: {', '.join(missing)}")

    try:
        return Entry(
            id=UUID(record["id"]),
            kind=EntryKind(record["kind"]),
            amount=Decimal(record["amount"]),
            category=record["category"],
            entry_date=date.fromisoformat(record["date"]),
            note=record["note"],
        )
    except (ValueError, TypeError, AttributeError, InvalidOperation, ValidationError) as e:
        raise CorruptLedgerError(f"Invalid entry record {record.get('id')!r}: {e}") from e


class JsonLedgerFile(LedgerFileInterface):
    """
    Ledger persistence in a single local JSON file.

    Every file handle is opened in a with-block, so it is closed on
    success and on error alike.
    """

    def __init__(self, path: Union[str, Path], save_attempts: int = 1):
        self._path = Path(path)
        self._save_attempts = save_attempts

    @property
    def path(self) -> Path:
        return self._path

    @property
    def location(self) -> str:
        return str(self._path)

    def exists(self) -> bool:
        return self._path.exists()

    def read_entries(self) -> list[Entry]:
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, ValueError, RecursionError) as e:
            # ValueError covers JSONDecodeError and UnicodeDecodeError;
            # RecursionError comes from pathologically deep nesting
            raise CorruptLedgerError(f"Cannot read ledger file {self._path}: {e}") from e

        if not isinstance(payload, dict):
            raise CorruptLedgerError("Ledger file must contain a JSON object")

        version = payload.get("schema_version")
        if version != SCHEMA_VERSION:
            raise CorruptLedgerError(
                f"Unsupported ledger schema version: {version!r} (expected {SCHEMA_VERSION})"
            )

        records = payload.get("entries")
        if not isinstance(records, list):
            raise CorruptLedgerError("Ledger file 'entries' must be a list")

        entries = [record_to_entry(record) for record in records]

        seen = set()
        for entry in entries:
            if entry.id in seen:
                raise CorruptLedgerError(f"Duplicate entry id in ledger file: {entry.id}")
            seen.add(entry.id)

        return entries

    def write_entries(self, entries: list[Entry]) -> None:
        payload = {
            "schema_version": SCHEMA_VERSION,
            "entries": [entry_to_record(entry) for entry in entries],
        }
        try:
            for attempt in Retrying(
                stop=stop_after_attempt(self._save_attempts),
                wait=wait_exponential(multiplier=0.1, max=1),
                retry=retry_if_exception_type(OSError),
                reraise=True,
            ):
                with attempt:
                    self._replace_file(payload)
        except OSError as e:
            raise LedgerSaveError(f"Cannot save ledger file {self._path}: {e}") from e

    def _replace_file(self, payload: dict) -> None:
        """Write payload to a temporary sibling file, then swap it in."""
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            dir=directory,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2, ensure_ascii=False)
            # mkstemp creates 0600 files; keep the ledger's usual permissions
            os.chmod(tmp_path, self._file_mode())
            os.replace(tmp_path, self._path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def _file_mode(self) -> int:
        """Mode of the existing ledger file, or the umask default for a new one."""
        try:
            return stat.S_IMODE(os.stat(self._path).st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    def backup(self) -> Optional[str]:
        """
        Copy the current file to a timestamped <name>.corrupt-<time> sibling.

        An existing backup is never overwritten; a numeric suffix is added
        instead. A failed copy is logged and reported as None.
        """
        if not self._path.exists():
            return None

        stamp = datetime.now().strftime("%Y%m%dT%H%M%S")
        base_name = f"{self._path.name}.corrupt-{stamp}"
        backup_path = self._path.with_name(base_name)
        counter = 1
        while backup_path.exists():
            backup_path = self._path.with_name(f"{base_name}-{counter}")
            counter += 1

        try:
            shutil.copy2(self._path, backup_path)
        except OSError as e:
            get_logger(__name__).warning(
                "ledger_backup_failed",
                path=str(self._path),
                backup_path=str(backup_path),
                error=str(e),
            )
            return None
        return str(backup_path)
