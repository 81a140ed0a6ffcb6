"""
Query Execution Engine

DESIGN DECISION: Every query is a single linear scan over the ledger.
There is no index and no secondary structure. Ledgers are personal-sized,
so O(n) per query is the intended cost, not a shortcut.

Results are always real entries taken from the ledger, in ledger order.
An empty result is a normal answer, never an error.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from personal_ledger.models.entry import Entry, EntryKind


# Kind filter label meaning "no kind restriction"
ALL_KINDS = "all"


class EntryQuery(BaseModel):
    """
    The optional constraints of a ledger search, combined with AND.

    - start_date / end_date: inclusive bounds; None means unbounded
    - kind: None or "all" means any kind
    - category: None or blank means any category; otherwise the trimmed
      text must equal the entry's category exactly (case-sensitive)
    """
    model_config = ConfigDict(frozen=True)

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    kind: Optional[EntryKind] = Field(
        default=None,
        description="Kind to match; None matches both"
    )
    category: Optional[str] = Field(
        default=None,
        description="Exact category to match; None matches all"
    )

    @field_validator('kind', mode='before')
    @classmethod
    def normalize_kind(cls, v: Any) -> Optional[EntryKind]:
        """Treat "all" as no restriction and accept labels in any case."""
        if v is None:
            return None
        if isinstance(v, str) and v.strip().lower() == ALL_KINDS:
            return None
        return EntryKind.from_label(v)

    @field_validator('category', mode='before')
    @classmethod
    def normalize_category(cls, v: Any) -> Optional[str]:
        """Trim the query; a blank query means no restriction."""
        if v is None:
            return None
        trimmed = str(v).strip()
        return trimmed or None

    def matches(self, entry: Entry) -> bool:
        """Check one entry against every active constraint."""
        if self.start_date is not None and entry.entry_date < self.start_date:
            return False
        if self.end_date is not None and entry.entry_date > self.end_date:
            return False
        if self.kind is not None and entry.kind != self.kind:
            return False
        if self.category is not None and entry.category != self.category:
            return False
        return True

    def describe(self) -> str:
        """Human-readable summary of the active filters."""
        parts = []
        if self.start_date or self.end_date:
            parts.append(_date_range_str(self.start_date, self.end_date))
        if self.kind is not None:
            parts.append(f"kind: {self.kind.value}")
        if self.category is not None:
            parts.append(f"category: {self.category}")
        return " | ".join(parts) if parts else "all entries"


class QueryExecutor:
    """
    Runs searches and aggregations over a sequence of entries.

    GUARANTEES:
    - Only returns entries that are in the given ledger
    - Preserves ledger order
    - Sums with Decimal, never float
    """

    def search(self, entries: Iterable[Entry], query: EntryQuery) -> list[Entry]:
        """Return the entries matching query, in their original order."""
        return [entry for entry in entries if query.matches(entry)]

    def total(self, entries: Iterable[Entry], kind: Union[EntryKind, str]) -> Decimal:
        """Sum of amounts for one kind; Decimal("0") if there are none."""
        kind = EntryKind.from_label(kind)
        return sum(
            (entry.amount for entry in entries if entry.kind == kind),
            Decimal("0"),
        )

    def monthly_summary(
        self,
        entries: Iterable[Entry],
        kind: Union[EntryKind, str],
    ) -> dict[str, Decimal]:
        """
        Sum of amounts per "YYYY-MM" month for one kind.

        Only months with at least one matching entry appear, and keys come
        back in ascending month order.
        """
        kind = EntryKind.from_label(kind)
        groups: dict[str, Decimal] = {}

        for entry in entries:
            if entry.kind != kind:
                continue
            key = entry.month_key
            groups[key] = groups.get(key, Decimal("0")) + entry.amount

        return {key: groups[key] for key in sorted(groups)}


def _date_range_str(
    start_date: Optional[date],
    end_date: Optional[date],
) -> str:
    """Format date range for description."""
    if start_date and end_date:
        if start_date == end_date:
            return f"on {start_date.isoformat()}"
        return f"from {start_date.isoformat()} to {end_date.isoformat()}"
    elif start_date:
        return f"from {start_date.isoformat()}"
    elif end_date:
        return f"until {end_date.isoformat()}"
    return ""
