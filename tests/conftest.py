"""
Pytest configuration and fixtures for Personal Ledger tests.

Every store built here writes to a pytest tmp_path, never to a real
ledger file.
"""

from datetime import date
from decimal import Decimal

import pytest

from personal_ledger.config import LedgerSettings
from personal_ledger.models.entry import Entry, EntryKind
from personal_ledger.store import LedgerStore


@pytest.fixture
def ledger_path(tmp_path):
    """Path of an isolated ledger file (not created yet)."""
    return tmp_path / "ledger.json"


@pytest.fixture
def settings(ledger_path):
    """Settings pointing at the isolated ledger file."""
    return LedgerSettings(data_file=ledger_path)


@pytest.fixture
def scenario_entries():
    """The five-entry January/February ledger."""
    return [
        Entry(
            kind=EntryKind.EXPENSE,
            amount=Decimal("100"),
            category="Dining",
            entry_date=date(2025, 1, 1),
            note="lunch",
        ),
        Entry(
            kind=EntryKind.EXPENSE,
            amount=Decimal("50"),
            category="Transit",
            entry_date=date(2025, 1, 5),
            note="metro",
        ),
        Entry(
            kind=EntryKind.INCOME,
            amount=Decimal("5000"),
            category="Salary",
            entry_date=date(2025, 1, 10),
            note="January salary",
        ),
        Entry(
            kind=EntryKind.EXPENSE,
            amount=Decimal("200"),
            category="Dining",
            entry_date=date(2025, 2, 1),
            note="team dinner",
        ),
        Entry(
            kind=EntryKind.INCOME,
            amount=Decimal("1000"),
            category="Bonus",
            entry_date=date(2025, 2, 15),
            note="year-end bonus",
        ),
    ]


@pytest.fixture
def store(settings):
    """An empty store backed by the isolated ledger file."""
    return LedgerStore(settings=settings)


@pytest.fixture
def scenario_store(store, scenario_entries):
    """A store holding the five scenario entries, in order."""
    for entry in scenario_entries:
        store.add(entry)
    return store
