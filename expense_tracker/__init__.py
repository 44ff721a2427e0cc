"""
Expense Tracker - Source Package

A command-line tracker for day-to-day expenses backed by a
relational database.

DESIGN PRINCIPLES:
1. One invocation, one unit of work
2. Fail early, fail visibly
3. The database enforces the data invariants
4. Every destructive step is confirmed and audited
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
