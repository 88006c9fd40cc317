"""
Licence Key Codec.

Generates and parses 25-symbol product keys for the Business, Extreme,
Engineer and Network Audit editions.
"""

from aida64_keys.edition import KeyEdition
from aida64_keys.errors import (
    InvalidChecksum,
    InvalidKeyError,
    InvalidLength,
    UnknownEdition,
)
from aida64_keys.generator import KeyBatchGenerator, KeyRequest
from aida64_keys.license import License
from aida64_keys.validator import KeyValidator, ValidationResult

__all__ = [
    "KeyEdition",
    "License",
    "KeyBatchGenerator",
    "KeyRequest",
    "KeyValidator",
    "ValidationResult",
    "InvalidKeyError",
    "InvalidLength",
    "InvalidChecksum",
    "UnknownEdition",
]
