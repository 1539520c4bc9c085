"""
Account Ledger Service

A small file-backed account ledger with integer balances, exposed over HTTP.
"""

__version__ = "1.0.0"
