"""
Statement file → Text extraction → Heuristic line parsing → Idempotent import

Turns spreadsheets, PDFs and photographed statements into income/expense
transactions, tolerating unknown layouts and skipping entries that were
already imported for the same owner.
"""

__version__ = "0.1.0"
