"""
Tests for the query engine

Covers every filter branch of EntryQuery and the Decimal aggregations of
QueryExecutor, using the five-entry scenario ledger.
"""

import random

import pytest
from datetime import date
from decimal import Decimal

from pydantic import ValidationError

from personal_ledger.models.entry import Entry, EntryKind
from personal_ledger.queries import EntryQuery, QueryExecutor


@pytest.fixture
def executor():
    return QueryExecutor()


class TestEntryQuery:
    """Tests for query normalization."""

    def test_all_kind_means_no_restriction(self):
        assert EntryQuery(kind="all").kind is None
        assert EntryQuery(kind=" ALL ").kind is None

    def test_kind_label_is_coerced(self):
        assert EntryQuery(kind="Expense").kind is EntryKind.EXPENSE

    def test_unknown_kind_is_rejected(self):
        with pytest.raises(ValidationError):
            EntryQuery(kind="transfer")

    def test_blank_category_means_no_restriction(self):
        assert EntryQuery(category="   ").category is None
        assert EntryQuery(category="").category is None

    def test_category_is_trimmed(self):
        assert EntryQuery(category="  Dining ").category == "Dining"

    def test_describe_without_filters(self):
        assert EntryQuery().describe() == "all entries"

    def test_describe_with_filters(self):
        query = EntryQuery(
            start_date=date(2025, 1, 1),
            end_date=date(2025, 1, 31),
            kind="expense",
            category="Dining",
        )
        assert query.describe() == (
            "from 2025-01-01 to 2025-01-31 | kind: expense | category: Dining"
        )


class TestSearch:
    """Tests for QueryExecutor.search."""

    def test_no_filters_returns_everything(self, executor, scenario_entries):
        result = executor.search(scenario_entries, EntryQuery(kind="all"))
        assert result == scenario_entries

    def test_start_date_is_inclusive(self, executor, scenario_entries):
        result = executor.search(scenario_entries, EntryQuery(start_date=date(2025, 2, 1)))
        assert [e.entry_date for e in result] == [date(2025, 2, 1), date(2025, 2, 15)]

    def test_end_date_is_inclusive(self, executor, scenario_entries):
        result = executor.search(scenario_entries, EntryQuery(end_date=date(2025, 1, 5)))
        assert [e.entry_date for e in result] == [date(2025, 1, 1), date(2025, 1, 5)]

    def test_date_range(self, executor, scenario_entries):
        """1/5 to 2/1 picks transit, salary and the February dinner."""
        result = executor.search(
            scenario_entries,
            EntryQuery(start_date=date(2025, 1, 5), end_date=date(2025, 2, 1), kind="all", category=""),
        )
        assert [e.category for e in result] == ["Transit", "Salary", "Dining"]

    def test_inverted_range_matches_nothing(self, executor, scenario_entries):
        query = EntryQuery(start_date=date(2025, 2, 1), end_date=date(2025, 1, 1))
        assert executor.search(scenario_entries, query) == []

    def test_kind_expense(self, executor, scenario_entries):
        result = executor.search(scenario_entries, EntryQuery(kind=EntryKind.EXPENSE))
        assert len(result) == 3
        assert all(e.kind is EntryKind.EXPENSE for e in result)

    def test_kind_income(self, executor, scenario_entries):
        result = executor.search(scenario_entries, EntryQuery(kind="income"))
        assert [e.category for e in result] == ["Salary", "Bonus"]

    def test_category_exact_match(self, executor, scenario_entries):
        result = executor.search(scenario_entries, EntryQuery(category="Dining"))
        assert [e.entry_date for e in result] == [date(2025, 1, 1), date(2025, 2, 1)]

    def test_category_is_case_sensitive(self, executor, scenario_entries):
        assert executor.search(scenario_entries, EntryQuery(category="dining")) == []

    def test_category_query_is_trimmed(self, executor, scenario_entries):
        assert len(executor.search(scenario_entries, EntryQuery(category=" Dining "))) == 2

    def test_category_no_match(self, executor, scenario_entries):
        assert executor.search(scenario_entries, EntryQuery(category="Nonexistent")) == []

    def test_category_substring_does_not_match(self, executor, scenario_entries):
        """Matching is exact, never a substring search."""
        assert executor.search(scenario_entries, EntryQuery(category="Din")) == []

    def test_combined_filters(self, executor, scenario_entries):
        """January, expense, dining: only the first entry."""
        result = executor.search(
            scenario_entries,
            EntryQuery(
                start_date=date(2025, 1, 1),
                end_date=date(2025, 1, 31),
                kind="expense",
                category="Dining",
            ),
        )
        assert result == [scenario_entries[0]]

    def test_result_is_ordered_subsequence(self, executor, scenario_entries):
        result = executor.search(scenario_entries, EntryQuery(kind="expense"))
        positions = [scenario_entries.index(e) for e in result]
        assert positions == sorted(positions)

    def test_blank_stored_category_matches_no_query(self, executor):
        """An entry with a blank category is only returned when category is unrestricted."""
        entries = [
            Entry(kind=EntryKind.EXPENSE, amount=Decimal("1"), category="", entry_date=date(2025, 1, 1)),
        ]
        assert executor.search(entries, EntryQuery(category="")) == entries
        assert executor.search(entries, EntryQuery(category="Other")) == []


class TestAggregation:
    """Tests for total and monthly_summary."""

    def test_total_expense(self, executor, scenario_entries):
        assert executor.total(scenario_entries, EntryKind.EXPENSE) == Decimal("350")

    def test_total_income(self, executor, scenario_entries):
        assert executor.total(scenario_entries, "income") == Decimal("6000")

    def test_total_empty_is_zero(self, executor):
        total = executor.total([], EntryKind.INCOME)
        assert total == Decimal("0")
        assert isinstance(total, Decimal)

    def test_total_unknown_kind_is_rejected(self, executor, scenario_entries):
        with pytest.raises(ValueError):
            executor.total(scenario_entries, "refund")

    def test_total_is_exact(self, executor):
        """Decimal accumulation: ten 0.10 entries sum to exactly 1.00."""
        entries = [
            Entry(kind=EntryKind.EXPENSE, amount=Decimal("0.10"), entry_date=date(2025, 1, 1))
            for _ in range(10)
        ]
        assert executor.total(entries, EntryKind.EXPENSE) == Decimal("1.00")

    def test_monthly_summary_expense(self, executor, scenario_entries):
        summary = executor.monthly_summary(scenario_entries, EntryKind.EXPENSE)
        assert summary == {"2025-01": Decimal("150"), "2025-02": Decimal("200")}

    def test_monthly_summary_income(self, executor, scenario_entries):
        summary = executor.monthly_summary(scenario_entries, EntryKind.INCOME)
        assert summary == {"2025-01": Decimal("5000"), "2025-02": Decimal("1000")}

    def test_monthly_summary_keys_ascending(self, executor):
        """Keys are sorted even when entries arrive out of date order."""
        entries = [
            Entry(kind=EntryKind.EXPENSE, amount=Decimal("1"), entry_date=date(2025, 3, 1)),
            Entry(kind=EntryKind.EXPENSE, amount=Decimal("2"), entry_date=date(2024, 12, 31)),
            Entry(kind=EntryKind.EXPENSE, amount=Decimal("3"), entry_date=date(2025, 1, 15)),
        ]
        summary = executor.monthly_summary(entries, EntryKind.EXPENSE)
        assert list(summary) == ["2024-12", "2025-01", "2025-03"]

    def test_monthly_summary_orders_early_years(self, executor):
        """Years below 1000 sort before later years."""
        entries = [
            Entry(kind=EntryKind.EXPENSE, amount=Decimal("1"), entry_date=date(2025, 1, 1)),
            Entry(kind=EntryKind.EXPENSE, amount=Decimal("2"), entry_date=date(250, 3, 1)),
        ]
        summary = executor.monthly_summary(entries, EntryKind.EXPENSE)
        assert list(summary) == ["0250-03", "2025-01"]

    def test_monthly_summary_omits_empty_months(self, executor):
        entries = [
            Entry(kind=EntryKind.INCOME, amount=Decimal("1"), entry_date=date(2025, 1, 1)),
            Entry(kind=EntryKind.INCOME, amount=Decimal("1"), entry_date=date(2025, 4, 1)),
        ]
        summary = executor.monthly_summary(entries, EntryKind.INCOME)
        assert "2025-02" not in summary
        assert "2025-03" not in summary

    def test_monthly_summary_empty(self, executor):
        assert executor.monthly_summary([], EntryKind.EXPENSE) == {}

    def test_monthly_summary_sums_to_total(self, executor, scenario_entries):
        for kind in EntryKind:
            summary = executor.monthly_summary(scenario_entries, kind)
            assert sum(summary.values(), Decimal("0")) == executor.total(scenario_entries, kind)


class TestRandomizedSearch:
    """
    Randomized searches through the store.

    Each seed builds a batch of filter combinations: dates anywhere in the
    calendar, every kind label, and awkward category text. Every search
    must succeed and return an ordered subsequence of the ledger.
    """

    ODD_CATEGORIES = [
        None,
        "",
        "   ",
        "\t\n",
        "x" * 600,
        "餐饮",
        " 工资 ",
        "☕ coffee",
        "Dining",
        "Dining ",
        "dining",
    ]
    KIND_LABELS = [None, "all", "ALL", " All ", "income", "EXPENSE", EntryKind.INCOME, EntryKind.EXPENSE]

    @staticmethod
    def random_date(rng):
        if rng.random() < 0.2:
            return None
        if rng.random() < 0.5:
            # Around the scenario months
            return date.fromordinal(date(2025, 1, 1).toordinal() + rng.randint(-60, 90))
        return date.fromordinal(rng.randint(1, date.max.toordinal()))

    @staticmethod
    def random_category(rng):
        if rng.random() < 0.6:
            return rng.choice(TestRandomizedSearch.ODD_CATEGORIES)
        alphabet = "abcXYZ 0_-\t€餐😀"
        return "".join(rng.choice(alphabet) for _ in range(rng.randint(0, 40)))

    @staticmethod
    def expected(entries, start, end, kind, category):
        if isinstance(kind, str) and kind.strip().lower() == "all":
            kind = None
        if kind is not None:
            kind = EntryKind.from_label(kind)
        if category is not None:
            category = category.strip() or None
        return [
            e for e in entries
            if (start is None or e.entry_date >= start)
            and (end is None or e.entry_date <= end)
            and (kind is None or e.kind == kind)
            and (category is None or e.category == category)
        ]

    @pytest.mark.parametrize("seed", range(20))
    def test_random_filters(self, scenario_store, seed):
        rng = random.Random(seed)
        scenario_store.add(Entry(
            kind=EntryKind.EXPENSE,
            amount=Decimal("9.99"),
            category="餐饮",
            entry_date=date(2025, 1, 20),
        ))
        scenario_store.add(Entry(
            kind=EntryKind.INCOME,
            amount=Decimal("1"),
            category="x" * 600,
            entry_date=date(1, 1, 1),
        ))
        ledger = scenario_store.entries()

        for _ in range(50):
            start = self.random_date(rng)
            end = self.random_date(rng)
            kind = rng.choice(self.KIND_LABELS)
            category = self.random_category(rng)

            result = scenario_store.search(
                start_date=start,
                end_date=end,
                kind=kind,
                category=category,
            )

            positions = [ledger.index(e) for e in result]
            assert positions == sorted(positions)
            assert len(set(positions)) == len(positions)
            assert result == self.expected(ledger, start, end, kind, category)

        assert scenario_store.entries() == ledger
