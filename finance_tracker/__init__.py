"""
Finance Tracker - Source Package

A single-user personal finance tracker: transaction records, search,
sorting, a budget-cap dashboard and JSON import/export, persisted to a
local JSON file.

DESIGN PRINCIPLES:
1. One owner of state (the RecordStore)
2. Validate before mutating, never after
3. Bad input degrades to a safe result, never a crash
4. Storage failures cost durability, not the session
"""

__version__ = "1.1.0"
__author__ = "Finance Tracker Team"
