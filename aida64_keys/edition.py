"""Product editions encoded in a key."""

from enum import Enum

from aida64_keys.errors import UnknownEdition


class KeyEdition(Enum):
    """Product edition. The value is what gets written into the key."""

    BUSINESS = 0
    EXTREME = 1
    ENGINEER = 2
    NETWORK_AUDIT = 3

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def cli_name(self) -> str:
        return _CLI_NAMES[self]

    def __str__(self) -> str:
        return self.display_name

    @classmethod
    def from_value(cls, value: int) -> "KeyEdition":
        """Look up an edition by its encoded value."""
        try:
            return cls(value)
        except ValueError:
            raise UnknownEdition(value) from None

    @classmethod
    def from_name(cls, name: str) -> "KeyEdition":
        """Look up an edition by its command-line name (``business``, ``network``, ...)."""
        for edition, cli_name in _CLI_NAMES.items():
            if cli_name == name:
                return edition
        raise UnknownEdition(name)


_DISPLAY_NAMES = {
    KeyEdition.BUSINESS: "Business",
    KeyEdition.EXTREME: "Extreme",
    KeyEdition.ENGINEER: "Engineer",
    KeyEdition.NETWORK_AUDIT: "Network Audit",
}

_CLI_NAMES = {
    KeyEdition.BUSINESS: "business",
    KeyEdition.EXTREME: "extreme",
    KeyEdition.ENGINEER: "engineer",
    KeyEdition.NETWORK_AUDIT: "network",
}
