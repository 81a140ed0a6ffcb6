"""Query execution package."""

from personal_ledger.queries.executor import ALL_KINDS, EntryQuery, QueryExecutor

__all__ = ["ALL_KINDS", "EntryQuery", "QueryExecutor"]
