"""
Double-Entry Ledger

Accounts with fixed debit/credit polarity, balanced transactions between
them, and idempotent transaction creation. Amounts are integers in the
currency's minor units.
"""

__version__ = "1.0.0"
