"""Boundary validation package."""

from finance_ledger.validation.validator import EntryValidator

__all__ = ["EntryValidator"]
