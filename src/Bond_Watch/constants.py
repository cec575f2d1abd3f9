"""Static chain constants: contract addresses and known token descriptors.

Addresses are mainnet deployments. Testnet deployments are not fixed and are
supplied through ``Bond_Watch.config.Settings``.
"""

from typing import Final

from Bond_Watch.models.enums import NetworkId
from Bond_Watch.models.tokens import LPToken, Token

# ---------------------------------------------------------------------------
# Contracts
# ---------------------------------------------------------------------------

BOND_DEPOSITORY_ADDRESSES: Final[dict[NetworkId, str]] = {
    NetworkId.MAINNET: "0x9025046c6fb25Fb39e720d97a8FD881ED69a1Ef6",
}

# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

OHM_TOKEN: Final[Token] = Token(
    name="Olympus",
    symbol="OHM",
    decimals=9,
    addresses={NetworkId.MAINNET: "0x64aa3364F17a4D01c6f1751Fd97C2BD3D7e7f1D5"},
    coingecko_id="olympus",
)

DAI_TOKEN: Final[Token] = Token(
    name="Dai Stablecoin",
    symbol="DAI",
    decimals=18,
    addresses={NetworkId.MAINNET: "0x6B175474E89094C44Da98b954EedeAC495271d0F"},
    coingecko_id="dai",
)

FRAX_TOKEN: Final[Token] = Token(
    name="Frax",
    symbol="FRAX",
    decimals=18,
    addresses={NetworkId.MAINNET: "0x853d955aCEf822Db058eb8505911ED77F175b99e"},
    coingecko_id="frax",
)

LUSD_TOKEN: Final[Token] = Token(
    name="Liquity USD",
    symbol="LUSD",
    decimals=18,
    addresses={NetworkId.MAINNET: "0x5f98805A4E8be255a32880FDeC7F6728C6568bA0"},
    coingecko_id="liquity-usd",
)

WETH_TOKEN: Final[Token] = Token(
    name="Wrapped Ether",
    symbol="WETH",
    decimals=18,
    addresses={NetworkId.MAINNET: "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"},
    coingecko_id="weth",
)

OHM_DAI_LP_TOKEN: Final[LPToken] = LPToken(
    name="OHM-DAI SushiSwap LP",
    symbol="OHM-DAI SLP",
    decimals=18,
    addresses={NetworkId.MAINNET: "0x055475920a8c93CfFb64d039A8205F7AcC7722d3"},
    tokens=(OHM_TOKEN, DAI_TOKEN),
)

# Every token a bond market may quote in
KNOWN_QUOTE_TOKENS: Final[tuple[Token | LPToken, ...]] = (
    DAI_TOKEN,
    FRAX_TOKEN,
    LUSD_TOKEN,
    WETH_TOKEN,
    OHM_DAI_LP_TOKEN,
)

# Prices are always read from mainnet, whichever network the market lives on
PRICE_NETWORK: Final[NetworkId] = NetworkId.MAINNET
