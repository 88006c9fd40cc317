"""Errors raised while parsing licence keys."""


class InvalidKeyError(ValueError):
    """Base class for keys that cannot be decoded."""


class InvalidLength(InvalidKeyError):
    """The key does not hold the expected number of symbols."""

    def __init__(self, expected: int, found: int):
        self.expected = expected
        self.found = found
        super().__init__(
            f"key has an invalid length: expected {expected} symbols, found {found}"
        )


class InvalidChecksum(InvalidKeyError):
    """The check symbol does not match the key payload."""

    def __init__(self, expected: int, found: int):
        self.expected = expected
        self.found = found
        super().__init__(
            f"key has an invalid checksum: expected {expected:#06x}, "
            f"found symbol {chr(found)!r}"
        )


class UnknownEdition(InvalidKeyError):
    """The key decodes to an edition that does not exist."""

    def __init__(self, value=None):
        self.value = value
        super().__init__(f"key belongs to an unknown edition: {value!r}")
