"""Licence key validation."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from aida64_keys.edition import KeyEdition
from aida64_keys.errors import InvalidKeyError
from aida64_keys.license import License

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of a licence key validation check."""

    is_valid: bool
    licence_key: str
    licence: Optional[License] = None
    edition: Optional[KeyEdition] = None
    error: Optional[str] = None
    is_expired: bool = False


class KeyValidator:
    """Validate licence keys and report why a key is rejected."""

    def validate(
        self,
        licence_key: str,
        check_expiry: bool = True,
        today: Optional[date] = None,
    ) -> ValidationResult:
        """Decode a key and check its fields.

        Args:
            licence_key: Key text, with or without separators.
            check_expiry: Whether an expired licence counts as invalid.
            today: Reference date for the expiry check (UTC today if omitted).

        Returns:
            ValidationResult with validation status and details.
        """
        try:
            licence = License.from_key(licence_key)
        except InvalidKeyError as exc:
            return ValidationResult(
                is_valid=False,
                licence_key=licence_key,
                error=str(exc),
            )

        result = ValidationResult(
            is_valid=True,
            licence_key=licence_key,
            licence=licence,
            edition=licence.edition,
        )

        if not licence.is_valid_key(today, check_expiry=False):
            result.is_valid = False
            result.error = "Key fields are out of range"
        elif check_expiry and licence.is_expired(today):
            result.is_valid = False
            result.is_expired = True
            result.error = f"Licence expired on {licence.expiry_date.isoformat()}"

        if not result.is_valid:
            logger.debug("Key rejected: %s", result.error)
        return result

    def is_key_format_valid(self, licence_key: str) -> bool:
        """Quick check that the key decodes, ignoring field ranges and expiry."""
        try:
            License.from_key(licence_key)
        except InvalidKeyError:
            return False
        return True
