"""Batch key generation."""

import logging
import random
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from config.settings import MAX_BATCH_SIZE
from aida64_keys.edition import KeyEdition
from aida64_keys.license import (
    MAX_MAINTENANCE,
    MIN_MAINTENANCE,
    License,
    utc_today,
)

logger = logging.getLogger(__name__)


def _clamp_to_window(value: date, purchase: date) -> date:
    """Keep ``value`` between one and 3658 days after ``purchase``."""
    return min(max(value, purchase + MIN_MAINTENANCE), purchase + MAX_MAINTENANCE)


@dataclass
class KeyRequest:
    """What to put into a batch of keys.

    Expiry and maintenance are given as calendar dates; they are turned into
    durations relative to ``purchase_date`` when the licences are built.
    """

    edition: KeyEdition = KeyEdition.EXTREME
    seats: int = 1
    purchase_date: date = field(default_factory=utc_today)
    expiry_date: Optional[date] = None
    maintenance_date: Optional[date] = None
    count: int = 1
    separators: bool = True

    def build_license(self, rng: Optional[random.Random] = None) -> License:
        """Build one licence with fresh salts from this request."""
        licence = (
            License.new(self.edition, rng)
            .with_seats(self.seats)
            .with_purchase_date(self.purchase_date)
        )
        # Durations are measured from the clamped purchase date
        purchase = licence.purchase_date

        maintenance = self.maintenance_date or purchase + MAX_MAINTENANCE
        licence = licence.with_maintenance_expiry(
            _clamp_to_window(maintenance, purchase) - purchase
        )
        if self.expiry_date is not None:
            licence = licence.with_license_expiry(
                _clamp_to_window(self.expiry_date, purchase) - purchase
            )
        return licence


class KeyBatchGenerator:
    """Generate batches of distinct formatted keys."""

    def __init__(
        self, max_batch_size: Optional[int] = None, rng: Optional[random.Random] = None
    ):
        """Initialize the generator.

        Args:
            max_batch_size: Upper bound applied to every request's count
                (``KEYGEN_MAX_BATCH`` setting if omitted).
            rng: Entropy source for salts and key bases (system RNG if omitted).
        """
        self._max_batch_size = max_batch_size or MAX_BATCH_SIZE
        self._rng = rng

    def generate(self, request: KeyRequest) -> list[str]:
        """Generate ``request.count`` distinct keys.

        Every key comes from its own licence, so salts differ between keys.
        Duplicate keys are discarded and regenerated.

        Returns:
            Keys in the order they were generated.

        Raises:
            RuntimeError: Not enough distinct keys after repeated attempts.
        """
        count = min(max(request.count, 1), self._max_batch_size)
        max_attempts = count * 10

        keys: dict[str, None] = {}
        attempts = 0
        while len(keys) < count:
            if attempts >= max_attempts:
                raise RuntimeError(
                    f"Could only generate {len(keys)} of {count} distinct keys "
                    f"after {attempts} attempts"
                )
            attempts += 1
            licence = request.build_license(self._rng)
            key = licence.generate_string(request.separators, self._rng)
            if key in keys:
                logger.debug("Discarding duplicate key on attempt %d", attempts)
                continue
            keys[key] = None

        logger.debug(
            "Generated %d %s key(s) in %d attempt(s)",
            count, request.edition.display_name, attempts,
        )
        return list(keys)

    def generate_per_edition(self, separators: bool = True) -> dict[KeyEdition, str]:
        """Generate one default key for every edition."""
        return {
            edition: License.new(edition, self._rng).generate_string(separators, self._rng)
            for edition in KeyEdition
        }
