"""
Duplicate detection keys.

A stored transaction duplicates a new entry when it belongs to the same
owner, has the same description, the same amount, and a date inside the
same calendar day. Amounts are compared in canonical text form so that
100.5 and 100.50 are the same amount.
"""

import hashlib
from datetime import date, timedelta
from decimal import Context, Decimal
from pathlib import Path

# Read size when hashing uploaded statements
HASH_CHUNK_SIZE = 64 * 1024


def normalize_amount(amount: Decimal | str | float) -> str:
    """
    Normalize an amount to its canonical text form.

    Args:
        amount: Amount as Decimal, numeric string, or float

    Returns:
        Plain decimal string without exponent or trailing zeros

    Examples:
        >>> normalize_amount(Decimal("100.50"))
        '100.5'
        >>> normalize_amount("450.0")
        '450'
    """
    if isinstance(amount, float):
        amount = Decimal(str(amount))
    elif isinstance(amount, str):
        amount = Decimal(amount.strip())
    elif not isinstance(amount, Decimal):
        raise ValueError(f"amount must be Decimal, str, or float, got: {type(amount)}")

    # Precision covers every digit so nothing is rounded away
    normalized = amount.normalize(Context(prec=max(len(amount.as_tuple().digits), 1)))
    # normalize() turns 450 into 4.5E+2, render it back without exponent
    return f"{normalized:f}"


def day_window(day: date) -> tuple[str, str]:
    """
    Half-open date range covering one calendar day.

    Returns:
        (day_start, next_day_start) as YYYY-MM-DD strings
    """
    return day.isoformat(), (day + timedelta(days=1)).isoformat()


def compute_file_hash(file_path: Path | str) -> str:
    """
    Compute SHA256 hash of a file on disk.

    Args:
        file_path: Path to the uploaded statement

    Returns:
        64-character lowercase hex string
    """
    digest = hashlib.sha256()
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()
