"""Address-to-token lookup for the tokens bond markets quote in."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from Bond_Watch.constants import KNOWN_QUOTE_TOKENS, OHM_TOKEN
from Bond_Watch.models.tokens import LPToken, Token
from Bond_Watch.utils.exceptions import UnknownTokenError

logger = logging.getLogger(__name__)


class TokenRegistry:
    """Resolve contract addresses to token descriptors on any network.

    Addresses compare case-insensitively, so checksummed and lowercase
    addresses resolve to the same token.
    """

    def __init__(self, tokens: Iterable[Token | LPToken] | None = None) -> None:
        known = tuple(tokens) if tokens is not None else (OHM_TOKEN, *KNOWN_QUOTE_TOKENS)
        self._by_address: dict[str, Token | LPToken] = {}
        for token in known:
            for address in token.addresses.values():
                self._by_address[address.lower()] = token
        logger.debug("TokenRegistry initialized with %d addresses", len(self))

    def __len__(self) -> int:
        return len(self._by_address)

    def get_token_by_address(self, address: str) -> Token | LPToken | None:
        """Return the token deployed at *address*, or None if unknown."""
        return self._by_address.get(address.lower())

    def require_token(self, address: str, *, market_id: str | None = None) -> Token | LPToken:
        """Like :meth:`get_token_by_address` but raise when the address is unknown.

        Raises:
            UnknownTokenError: If *address* is not registered.
        """
        token = self.get_token_by_address(address)
        if token is None:
            raise UnknownTokenError(
                f"Unknown token address: {address}",
                address=address,
                market_id=market_id,
            )
        return token
