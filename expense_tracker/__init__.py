"""
Expense Tracker - Source Package

Core engine for a personal expense tracker: a ledger of expense records,
budget aggregation per category, and entry validation. Presentation,
persistence and notification delivery sit outside the core and talk to it
through small interfaces.

DESIGN PRINCIPLES:
1. Validate before anything reaches the ledger
2. Derived numbers are recomputed, never stored
3. Bad stored data never crashes the app
4. Every mutation is audited
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
