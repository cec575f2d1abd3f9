"""Enum types for the bond domain.

Use enum members in business logic, never raw strings or bare chain ids.
"""

from enum import IntEnum


class NetworkId(IntEnum):
    """EVM chain id of a network the Bond Depository is deployed on."""

    MAINNET = 1
    TESTNET = 4  # Rinkeby

    @classmethod
    def from_name(cls, name: str) -> "NetworkId":
        """Resolve a case-insensitive network name (``"mainnet"``, ``"testnet"``)."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            valid = ", ".join(member.name.lower() for member in cls)
            msg = f"Unknown network '{name}', expected one of: {valid}"
            raise ValueError(msg) from None
