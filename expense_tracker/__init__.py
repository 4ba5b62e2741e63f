"""
Expense Tracker - Core Package

The expense data engine behind a personal expense tracker: an in-memory
record store with write-through persistence, a filter/search/sort pipeline,
aggregate summaries and a monthly budget tracker.

DESIGN PRINCIPLES:
1. The store is the only owner of expense records
2. Views are derived per query, never stored
3. Storage failures never crash the session
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
