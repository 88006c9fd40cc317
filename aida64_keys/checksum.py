"""Key checksum.

A 16-bit shift-register residue over the raw key symbols, reduced modulo
0x9987. Only the middle base-34 digit of the residue is stored in the key.
"""

from aida64_keys.symbols import encode_part

POLYNOMIAL = 0x8201
MODULUS = 0x9987

KEY_LENGTH = 25
PAYLOAD_LENGTH = KEY_LENGTH - 1


def compute_checksum(data: bytes) -> int:
    """Return the checksum of ``data`` (ASCII symbols, not digit values)."""
    register = 0
    for byte in data:
        register ^= byte << 8
        for _ in range(8):
            if register & 0x8000 == 0:
                register = (register << 1) & 0xFFFFFFFF
            else:
                register = ((register << 1) ^ POLYNOMIAL) & 0xFFFFFFFF
    return (register & 0xFFFF) % MODULUS


def checksum_symbol(payload: bytes) -> int:
    """Return the check symbol (as a byte value) for a 24-symbol payload."""
    return encode_part(compute_checksum(payload), 3)[1]


def verify_checksum(key: bytes) -> bool:
    """Check the last symbol of a 25-symbol key against its payload."""
    if len(key) != KEY_LENGTH:
        return False
    return checksum_symbol(key[:PAYLOAD_LENGTH]) == key[PAYLOAD_LENGTH]
