"""
Core Data Models for the Personal Ledger

An Entry is the ledger's only entity: one dated income or expense.

DESIGN DECISION: Entries are frozen Pydantic models.
An update never edits fields in place. It builds a new Entry that keeps
the old id and swaps it into the ledger at the same position.

Amounts are Decimal magnitudes. The sign is implied by the kind,
so an expense of 100 is stored as kind=EXPENSE, amount=100.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class EntryKind(str, Enum):
    """
    The two kinds of ledger entry.

    DESIGN DECISION: An enum rather than free text, so a typo can never
    create a third "kind" that no total or summary picks up.
    """
    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def from_label(cls, value: Any) -> "EntryKind":
        """Coerce a label such as "Income" or " expense " into an EntryKind."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise ValueError(f"Unsupported entry kind: {value!r}") from e


# Suggested labels offered by a presentation layer. The store accepts any
# category string.
DEFAULT_CATEGORIES: dict[EntryKind, tuple[str, ...]] = {
    EntryKind.EXPENSE: (
        "Dining",
        "Transit",
        "Shopping",
        "Entertainment",
        "Medical",
        "Other",
    ),
    EntryKind.INCOME: (
        "Salary",
        "Bonus",
        "Investment",
        "Part-time",
        "Other",
    ),
}


# =============================================================================
# CORE ENTRY MODEL
# =============================================================================

class Entry(BaseModel):
    """
    A single ledger entry.

    The category is kept exactly as given: a blank category is a real
    category of its own, distinct from any "uncategorized" label a caller
    might choose.
    """
    model_config = ConfigDict(frozen=True)

    # Identity
    id: UUID = Field(
        default_factory=uuid4,
        description="Unique entry ID, preserved across save/load"
    )

    kind: EntryKind = Field(
        ...,
        description="Income or expense"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Non-negative amount; sign is implied by kind"
    )
    category: str = Field(
        default="",
        description="Free-form category label (e.g. Dining, Salary)"
    )
    entry_date: date = Field(
        ...,
        description="Calendar date of the entry"
    )
    note: str = Field(
        default="",
        description="Free-form note"
    )

    @property
    def month_key(self) -> str:
        """Month bucket used by monthly summaries, e.g. "2025-01"."""
        return f"{self.entry_date.year:04d}-{self.entry_date.month:02d}"

    def revise(self, **changes: Any) -> "Entry":
        """
        Build the replacement Entry for an update.

        The id is kept so the store can find the entry being replaced.
        Changes are validated like a fresh Entry.
        """
        if "id" in changes:
            raise ValueError("An entry's id cannot be revised")
        data = self.model_dump()
        data.update(changes)
        return Entry(**data)

    def to_row(self) -> tuple[str, str, str, str, str]:
        """
        Row for exporters, in column order: date, kind, category, amount, note.
        """
        return (
            self.entry_date.isoformat(),
            self.kind.value,
            self.category,
            str(self.amount),
            self.note,
        )

    def __str__(self) -> str:
        return f"{self.entry_date} [{self.kind.value}] {self.category}: {self.amount}"


# =============================================================================
# LOAD STATUS MODELS
# =============================================================================

class LoadStatus(str, Enum):
    """
    Outcome of reading the ledger file at startup.

    MISSING and CORRUPT both start an empty ledger, but only CORRUPT means
    data was lost.
    """
    LOADED = "loaded"      # File read, entries restored
    MISSING = "missing"    # No file yet (first run)
    CORRUPT = "corrupt"    # File present but unreadable


class LoadResult(BaseModel):
    """What the store found when it loaded its file."""

    status: LoadStatus
    entry_count: int = Field(
        default=0,
        ge=0,
        description="Number of entries restored"
    )
    error: Optional[str] = Field(
        default=None,
        description="Why the file could not be read (CORRUPT only)"
    )
    backup_path: Optional[str] = Field(
        default=None,
        description="Where the unreadable file was copied, if it was"
    )

    @property
    def data_lost(self) -> bool:
        """True when an existing file had to be discarded."""
        return self.status == LoadStatus.CORRUPT
