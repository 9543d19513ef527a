"""
Statement text parsing.

Provides:
- parse_text_lines: heuristic cascade turning text into RawRows
- normalize_entries: RawRows → CanonicalEntries
"""

from .entry_normalizer import normalize_entries, normalize_row
from .line_parser import LINE_MATCHERS, ParseAttempt, ParserState, parse_line, parse_text_lines

__all__ = [
    "LINE_MATCHERS",
    "ParseAttempt",
    "ParserState",
    "normalize_entries",
    "normalize_row",
    "parse_line",
    "parse_text_lines",
]
