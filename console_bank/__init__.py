"""
Bharat Bank Console

A single-session console banking demo with an append-only, hash-chained
account ledger and proper financial math using Decimal.
"""

__version__ = "1.0.0"
