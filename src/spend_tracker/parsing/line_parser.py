"""
Heuristic line parser for extracted statement text.

Statements come from arbitrary banks, apps and export tools with no shared
layout, so every line is offered to a fixed cascade of matchers, most
specific first. The first matcher that claims a line decides its fate:

1. Fully labeled line:    date=... description=... category=... type=... amount=...
2. Labeled field line:    "Date: 2024-01-05" (fields accumulate until "amount")
3. Space separated line:  2024-01-05 Grocery Shopping Food expense 450
4. Jumbled five tokens:   Food 450 2024-01-05 expense Groceries
5. Delimited line:        2024-01-05, Groceries, Food, expense, 450

Lines no matcher claims are dropped. Output order follows input order.
"""

import logging
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from ..schemas.fields import extract_amount, fix_type, parse_flexible_date
from ..schemas.transaction import RawRow

logger = logging.getLogger(__name__)

# Minimum distinct keys for a fully labeled line
FULL_LINE_MIN_KEYS = 5

# The field that terminates a multi-line labeled record
TERMINAL_FIELD = "amount"

FULL_LINE_GUARD = re.compile(
    r"date[:=].*description[:=].*category[:=].*type[:=].*amount[:=]", re.IGNORECASE
)
LABELED_PAIR = re.compile(r"([a-zA-Z ]+)[=:]\s*([^:=]+)(?=\s+[a-zA-Z ]+[=:]|$)")
LABELED_LINE = re.compile(r"^([a-zA-Z ]+)[=:]\s*(.+)$")
TYPE_KEYWORD = re.compile(r"income|expense", re.IGNORECASE)
DELIMITERS = re.compile(r",|\t|\s{2,}")
DIGIT = re.compile(r"\d")


@dataclass(frozen=True)
class ParserState:
    """Fields collected so far for a multi-line labeled record."""

    pending: tuple[tuple[str, str], ...] = ()

    def with_field(self, key: str, value: str) -> "ParserState":
        fields = dict(self.pending)
        fields[key] = value
        return ParserState(pending=tuple(fields.items()))

    def as_row(self) -> RawRow:
        return dict(self.pending)


EMPTY_STATE = ParserState()


@dataclass(frozen=True)
class ParseAttempt:
    """
    Outcome of offering a line to one matcher.

    claimed: the matcher owns the line (later matchers are not tried)
    row: completed record, if the line finished one
    state: accumulator after this line (None = unchanged)
    """

    claimed: bool
    row: RawRow | None = None
    state: ParserState | None = None


NO_MATCH = ParseAttempt(claimed=False)

LineMatcher = Callable[[str, ParserState], ParseAttempt]


def match_full_labeled_line(line: str, state: ParserState) -> ParseAttempt:
    """All five fields as key=value / key: value pairs on one line."""
    if not FULL_LINE_GUARD.search(line):
        return NO_MATCH

    row: RawRow = {}
    for key, value in LABELED_PAIR.findall(line):
        row[key.strip().lower()] = value.strip()

    if len(row) >= FULL_LINE_MIN_KEYS:
        return ParseAttempt(claimed=True, row=row)
    return NO_MATCH


def match_labeled_field(line: str, state: ParserState) -> ParseAttempt:
    """One labeled field per line; the amount field completes the record."""
    match = LABELED_LINE.match(line)
    if not match:
        return NO_MATCH

    key = match.group(1).strip().lower()
    value = match.group(2).strip()
    new_state = state.with_field(key, value)

    if key == TERMINAL_FIELD:
        return ParseAttempt(claimed=True, row=new_state.as_row(), state=EMPTY_STATE)
    return ParseAttempt(claimed=True, state=new_state)


def match_space_separated(line: str, state: ParserState) -> ParseAttempt:
    """Date first, amount last, type and category just before the amount."""
    tokens = line.split()
    if len(tokens) < 5:
        return NO_MATCH
    if not parse_flexible_date(tokens[0]) or not DIGIT.search(tokens[-1]):
        return NO_MATCH

    return ParseAttempt(
        claimed=True,
        row={
            "date": tokens[0],
            "description": " ".join(tokens[1:-3]),
            "category": tokens[-3],
            "type": fix_type(tokens[-2]),
            "amount": tokens[-1],
        },
    )


def match_jumbled_tokens(line: str, state: ParserState) -> ParseAttempt:
    """
    Guess the field of each token of a five token line.

    Each token fills the first open slot it qualifies for, in the order
    date, amount, type, category, description.
    """
    tokens = line.split()
    if len(tokens) != 5:
        return NO_MATCH

    guess: RawRow = {}
    for token in tokens:
        parsed_date = parse_flexible_date(token) if "date" not in guess else None
        if parsed_date:
            guess["date"] = parsed_date
        elif "amount" not in guess and DIGIT.search(token):
            # A zero amount consumes the token but leaves the slot open
            if extract_amount(token):
                guess["amount"] = token
        elif "type" not in guess and TYPE_KEYWORD.search(token):
            guess["type"] = fix_type(token)
        elif "category" not in guess:
            guess["category"] = token
        elif "description" not in guess:
            guess["description"] = token

    if len(guess) == 5:
        return ParseAttempt(claimed=True, row=guess)
    return NO_MATCH


def match_delimited(line: str, state: ParserState) -> ParseAttempt:
    """Comma, tab or wide-space separated columns in canonical order."""
    parts = [part.strip() for part in DELIMITERS.split(line)]
    parts = [part for part in parts if part]
    if len(parts) < 5:
        return NO_MATCH

    return ParseAttempt(
        claimed=True,
        row={
            "date": parts[0],
            "description": parts[1],
            "category": parts[2],
            "type": fix_type(parts[3]),
            "amount": parts[4],
        },
    )


# Priority order: most specific first
LINE_MATCHERS: list[LineMatcher] = [
    match_full_labeled_line,
    match_labeled_field,
    match_space_separated,
    match_jumbled_tokens,
    match_delimited,
]


def iter_lines(text: str) -> Iterator[str]:
    """Yield trimmed, non-blank lines."""
    for line in (text or "").splitlines():
        line = line.strip()
        if line:
            yield line


def parse_line(
    line: str, state: ParserState, matchers: list[LineMatcher] = LINE_MATCHERS
) -> tuple[ParserState, RawRow | None]:
    """
    Offer one line to the matcher cascade.

    Returns:
        (state after the line, completed row or None)
    """
    for matcher in matchers:
        attempt = matcher(line, state)
        if attempt.claimed:
            return (attempt.state if attempt.state is not None else state), attempt.row

    logger.debug("Dropped unparseable line: %r", line)
    return state, None


def parse_text_lines(text: str) -> Iterator[RawRow]:
    """
    Parse extracted statement text into loosely keyed rows.

    Args:
        text: Raw text from PDF extraction or OCR

    Yields:
        RawRow per recognized record, in input order. A labeled record
        still waiting for its amount at the end of the text is discarded.
    """
    state = EMPTY_STATE
    for line in iter_lines(text):
        state, row = parse_line(line, state)
        if row is not None:
            yield row

    if state.pending:
        logger.debug("Discarded incomplete labeled record: %s", state.as_row())
