"""
Finance Tracker - Source Package

A personal finance tracker: record income and expense transactions,
categorize them, set monthly budgets and review aggregated summaries.

DESIGN PRINCIPLES:
1. All state lives in a local key-value store
2. Reports are pure functions over the stored records
3. Fail early, fail visibly
4. Every change is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
