"""Ledger state package: transaction stores, budgets and profiles."""

from finance_ledger.ledger.budgets import BudgetMap
from finance_ledger.ledger.registry import UserProfile, UserProfileRegistry
from finance_ledger.ledger.transactions import TransactionStore

__all__ = [
    "BudgetMap",
    "TransactionStore",
    "UserProfile",
    "UserProfileRegistry",
]
