"""
Command-line launcher for Expense Tracker

Requires the package to be installed first (`pip install -e .` from the
repository root); the script does not add the source tree to sys.path.

Usage:
    python app/main.py list
    python app/main.py add 12.50 groceries
    python app/main.py search groc
    python app/main.py delete 1
    python app/main.py clear

The installed console script `expenses` runs the same entry point.
Database and logging are configured through EXPENSES_* environment
variables or a .env file (see expense_tracker.config.settings).
"""

import sys

from expense_tracker.dispatcher import main


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
