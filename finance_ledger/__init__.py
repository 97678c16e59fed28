"""
Finance Ledger - Core Package

The domain and data layer of a personal finance ledger: per-user
transaction stores, category budgets, report aggregation and the
line-oriented text file that persists everything.

DESIGN PRINCIPLES:
1. Every fallible operation returns an explicit Outcome
2. Ids are assigned once and never reused
3. One bad record never spoils a whole load or report
4. The active user is a value held by the caller, never global state
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Ledger Team"
