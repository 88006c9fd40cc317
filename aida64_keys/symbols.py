"""Base-34 symbol codec and packed date encoding.

Keys are written in a fixed 34-symbol alphabet. The order of the alphabet
is part of the key format: every symbol's position is its digit value.
"""

import calendar
import random
import secrets
from datetime import date
from typing import Optional

ALPHABET = b"DY14UF3RHWCXLQB6IKJT9N5AGS2PM8VZ7E"
BASE = len(ALPHABET)

_DIGITS = {symbol: index for index, symbol in enumerate(ALPHABET)}

MIN_YEAR = 2004
MAX_YEAR = 2099
_YEAR_OFFSET = 2003

_system_random = secrets.SystemRandom()


def encode_part(value: int, width: int) -> bytes:
    """Encode ``value`` as ``width`` big-endian base-34 symbols.

    Digits that do not fit in ``width`` symbols are dropped.
    """
    out = bytearray(width)
    for i in range(width - 1, -1, -1):
        out[i] = ALPHABET[value % BASE]
        value //= BASE
    return bytes(out)


def decode_part(symbols: bytes) -> int:
    """Decode big-endian base-34 symbols. Unknown symbols count as 0."""
    result = 0
    for symbol in symbols:
        result = result * BASE + _DIGITS.get(symbol, 0)
    return result


def random_symbols(count: int, rng: Optional[random.Random] = None) -> bytes:
    """Draw ``count`` independent uniform symbols from the alphabet."""
    rng = rng or _system_random
    return bytes(rng.choice(ALPHABET) for _ in range(count))


def encode_date(value: date) -> int:
    """Pack a date into ``(year - 2003) * 512 + month * 32 + day``."""
    year = min(max(value.year, MIN_YEAR), MAX_YEAR) - _YEAR_OFFSET
    month = min(max(value.month, 1), 12)
    day = min(max(value.day, 1), 31)
    return year * 512 + month * 32 + day


def decode_date(packed: int) -> date:
    """Unpack a date written by :func:`encode_date`.

    Only five bits of the year survive, so years after 2034 wrap. Fields
    that do not form a calendar date are clamped to the nearest valid one.
    """
    day = packed & 31
    month = (packed >> 5) & 15
    year = ((packed >> 9) & 31) + _YEAR_OFFSET

    month = min(max(month, 1), 12)
    last_day = calendar.monthrange(year, month)[1]
    day = min(max(day, 1), last_day)
    return date(year, month, day)
