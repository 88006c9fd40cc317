"""Licence record and the 25-symbol key codec.

Key layout (symbol offsets)::

    0-1    edition       2-3    salt1         4-5    salt2
    6-7    salt3         8-11   seats         12-15  purchase date
    16-18  expiry        19-21  maintenance   22-23  random base
    24     check symbol

Every field is XORed with the random base (masked to 8 or 24 bits) and a
per-field constant before it is written.
"""

import logging
import random
import secrets
import string
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union

from aida64_keys.checksum import (
    KEY_LENGTH,
    PAYLOAD_LENGTH,
    checksum_symbol,
    compute_checksum,
    verify_checksum,
)
from aida64_keys.edition import KeyEdition
from aida64_keys.errors import InvalidChecksum, InvalidLength
from aida64_keys.symbols import (
    decode_date,
    decode_part,
    encode_date,
    encode_part,
    random_symbols,
)

logger = logging.getLogger(__name__)

_system_random = secrets.SystemRandom()

MIN_SEATS = 1
MAX_SEATS = 797
EARLIEST_PURCHASE = date(2004, 1, 1)
LATEST_PURCHASE = date(2099, 1, 1)
MIN_MAINTENANCE = timedelta(days=1)
MAX_MAINTENANCE = timedelta(days=3658)

SEPARATOR = "-"
GROUP_SIZE = 5

# (start, end) of each field in the key, in layout order
_PARTS = (
    (0, 2),    # edition
    (2, 4),    # salt1
    (4, 6),    # salt2
    (6, 8),    # salt3
    (8, 12),   # seats
    (12, 16),  # purchase date
    (16, 19),  # expiry
    (19, 22),  # maintenance
    (22, 24),  # base
)

_ALPHANUMERIC = frozenset((string.ascii_letters + string.digits).encode("ascii"))


def utc_today() -> date:
    """Return the current date in UTC."""
    return datetime.now(timezone.utc).date()


@dataclass(frozen=True)
class License:
    """A decoded or to-be-generated licence.

    ``expiry`` and ``maintenance_expiry`` are durations counted from
    ``purchase_date``; ``expiry=None`` means a perpetual licence.
    """

    edition: KeyEdition
    seats: int = MIN_SEATS
    purchase_date: date = field(default_factory=utc_today)
    expiry: Optional[timedelta] = None
    maintenance_expiry: timedelta = MAX_MAINTENANCE
    salt1: int = 100
    salt2: int = 0
    salt3: int = 0

    @classmethod
    def new(cls, edition: KeyEdition, rng: Optional[random.Random] = None) -> "License":
        """Create a licence with default fields and freshly drawn salts."""
        rng = rng or _system_random
        return cls(
            edition=edition,
            salt1=rng.randint(100, 988),
            salt2=rng.randint(0, 99),
            salt3=rng.randint(0, 99),
        )

    # -- builder ---------------------------------------------------------

    def with_edition(self, edition: KeyEdition) -> "License":
        """Return a copy for another edition."""
        return replace(self, edition=edition)

    def with_seats(self, seats: int) -> "License":
        """Return a copy with the seat count clamped to 1-797."""
        return replace(self, seats=min(max(seats, MIN_SEATS), MAX_SEATS))

    def with_purchase_date(self, purchase_date: date) -> "License":
        """Return a copy purchased on ``purchase_date``, clamped to 2004-01-01..2099-01-01."""
        clamped = min(max(purchase_date, EARLIEST_PURCHASE), LATEST_PURCHASE)
        return replace(self, purchase_date=clamped)

    def with_license_expiry(self, duration: Optional[timedelta]) -> "License":
        """Return a copy expiring ``duration`` after purchase (``None`` for perpetual)."""
        return replace(self, expiry=duration)

    def with_maintenance_expiry(self, duration: timedelta) -> "License":
        """Return a copy with maintenance clamped to 1-3658 days after purchase."""
        clamped = min(max(duration, MIN_MAINTENANCE), MAX_MAINTENANCE)
        return replace(self, maintenance_expiry=clamped)

    # -- derived dates ---------------------------------------------------

    @property
    def expiry_date(self) -> Optional[date]:
        if self.expiry is None:
            return None
        return self.purchase_date + self.expiry

    @property
    def maintenance_date(self) -> date:
        return self.purchase_date + self.maintenance_expiry

    # -- codec -----------------------------------------------------------

    def generate(self, rng: Optional[random.Random] = None) -> bytes:
        """Emit the 25 raw key symbols."""
        pair = random_symbols(2, rng)
        base = decode_part(pair)
        low = base & 0xFF
        wide = base & 0xFFFFFF

        # Written as a plain day count; from_key reads the same field as a
        # packed date, so a non-perpetual expiry does not survive a parse.
        expiry_days = self.expiry.days if self.expiry is not None else 0

        fields = (
            (low ^ (self.edition.value + 1) ^ 0xBF, 2),
            (low ^ self.salt1 ^ 0xED, 2),
            (low ^ self.salt2 ^ 0x77, 2),
            (low ^ self.salt3 ^ 0xDF, 2),
            (wide ^ self.seats ^ 0x4755, 4),
            (wide ^ encode_date(self.purchase_date) ^ 0x7CC1, 4),
            (low ^ expiry_days ^ 0x3FD, 3),
            (low ^ self.maintenance_expiry.days ^ 0x935, 3),
        )
        payload = b"".join(encode_part(value, width) for value, width in fields) + pair
        return payload + bytes([checksum_symbol(payload)])

    def generate_string(
        self, separators: bool = True, rng: Optional[random.Random] = None
    ) -> str:
        """Emit the key as text, optionally as ``XXXXX-XXXXX-XXXXX-XXXXX-XXXXX``."""
        key = self.generate(rng).decode("ascii")
        if not separators:
            return key
        return SEPARATOR.join(
            key[i:i + GROUP_SIZE] for i in range(0, KEY_LENGTH, GROUP_SIZE)
        )

    @classmethod
    def from_key(cls, key: Union[str, bytes]) -> "License":
        """Parse a key.

        Every character that is not an ASCII letter or digit is ignored, so
        separators, whitespace and punctuation may appear anywhere.

        Raises:
            InvalidLength: Not exactly 25 alphanumerics remain.
            InvalidChecksum: The check symbol does not match.
            UnknownEdition: The edition field is out of range.
        """
        if isinstance(key, str):
            key = (ord(c) for c in key)
        symbols = bytes(b for b in key if b in _ALPHANUMERIC)

        if len(symbols) != KEY_LENGTH:
            logger.debug("Rejected key with %d symbols", len(symbols))
            raise InvalidLength(expected=KEY_LENGTH, found=len(symbols))

        if not verify_checksum(symbols):
            logger.debug("Rejected key with bad check symbol")
            raise InvalidChecksum(
                expected=compute_checksum(symbols[:PAYLOAD_LENGTH]),
                found=symbols[PAYLOAD_LENGTH],
            )

        parts = [decode_part(symbols[start:end]) for start, end in _PARTS]
        base = parts[8]
        low = base & 0xFF

        edition = KeyEdition.from_value((low ^ parts[0] ^ 0xBF) - 1)
        purchase_date = decode_date(base ^ parts[5] ^ 0x7CC1)

        raw_expiry = low ^ parts[6] ^ 0x3FD
        expiry = None if raw_expiry == 0 else decode_date(raw_expiry) - purchase_date

        return cls(
            edition=edition,
            seats=base ^ parts[4] ^ 0x4755,
            purchase_date=purchase_date,
            expiry=expiry,
            maintenance_expiry=timedelta(days=low ^ parts[7] ^ 0x935),
            salt1=low ^ parts[1] ^ 0xED,
            salt2=low ^ (parts[2] & 0xFFFF) ^ 0x77,
            salt3=low ^ (parts[3] & 0xFFFF) ^ 0xDF,
        )

    # -- validation ------------------------------------------------------

    def is_expired(self, today: Optional[date] = None) -> bool:
        """True when the licence has an expiry that is not in the future."""
        if self.expiry is None:
            return False
        today = today or utc_today()
        return self.expiry <= today - self.purchase_date

    def is_valid_key(self, today: Optional[date] = None, check_expiry: bool = True) -> bool:
        """Check that every field is in range and the licence has not expired."""
        if not EARLIEST_PURCHASE <= self.purchase_date <= LATEST_PURCHASE:
            return False
        if check_expiry and self.is_expired(today):
            return False
        return (
            MIN_SEATS <= self.seats <= MAX_SEATS
            and 99 <= self.salt1 <= 989
            and self.salt2 <= 100
            and self.salt3 <= 100
            and self.maintenance_expiry.days < 3659
        )
