"""Shared test fixtures for the Bond Watch test suite.

Provides realistic sample instances of the core models so tests don't
need to inline large construction blocks.
"""

from decimal import Decimal

import pytest

from Bond_Watch.analysis.valuation import compute_bond
from Bond_Watch.constants import DAI_TOKEN, OHM_DAI_LP_TOKEN, OHM_TOKEN
from Bond_Watch.models import Bond, LPToken, NetworkId, RawMarket, RawTerms, Token

# Fixed clock for every time-dependent computation in tests
NOW: float = 1_650_000_000.0
SECONDS_PER_DAY: int = 86_400


@pytest.fixture()
def ohm() -> Token:
    """The protocol token: 9 decimals."""
    return OHM_TOKEN


@pytest.fixture()
def dai() -> Token:
    """An 18-decimal stablecoin quote token."""
    return DAI_TOKEN


@pytest.fixture()
def ohm_dai_lp() -> LPToken:
    """The OHM-DAI pool share token."""
    return OHM_DAI_LP_TOKEN


@pytest.fixture()
def sample_market(dai: Token) -> RawMarket:
    """A DAI market with 1,000 OHM of capacity and a 100 OHM max payout."""
    return RawMarket(
        capacity=1_000 * 10**9,
        quote_token=dai.addresses[NetworkId.MAINNET].lower(),
        capacity_in_quote=False,
        total_debt=250 * 10**9,
        max_payout=100 * 10**9,
        sold=50 * 10**9,
        purchased=900 * 10**18,
    )


@pytest.fixture()
def fixed_term_terms() -> RawTerms:
    """A 14-day fixed-term market concluding 30 days after NOW."""
    return RawTerms(
        fixed_term=True,
        control_variable=1_000,
        vesting=14 * SECONDS_PER_DAY,
        conclusion=int(NOW) + 30 * SECONDS_PER_DAY,
        max_debt=5_000 * 10**9,
    )


@pytest.fixture()
def fixed_expiration_terms() -> RawTerms:
    """A fixed-expiration market concluding 10 days after NOW."""
    return RawTerms(
        fixed_term=False,
        control_variable=1_000,
        vesting=0,
        conclusion=int(NOW) + 10 * SECONDS_PER_DAY,
        max_debt=5_000 * 10**9,
    )


@pytest.fixture()
def sample_bond(
    sample_market: RawMarket,
    fixed_term_terms: RawTerms,
    ohm: Token,
    dai: Token,
) -> Bond:
    """A 10% discount DAI bond: OHM at $20, bond price 18 DAI."""
    return compute_bond(
        "7",
        sample_market,
        fixed_term_terms,
        ohm,
        dai,
        quote_token_per_base_token=Decimal("18.000000000"),
        base_token_per_usd=Decimal("20"),
        quote_token_per_usd=Decimal("1"),
        now=NOW,
    )


@pytest.fixture()
def sold_out_bond(
    fixed_expiration_terms: RawTerms,
    ohm: Token,
    dai: Token,
) -> Bond:
    """A fixed-expiration bond whose capacity is below one OHM."""
    market = RawMarket(
        capacity=5 * 10**8,
        quote_token=dai.addresses[NetworkId.MAINNET].lower(),
        capacity_in_quote=False,
        max_payout=5 * 10**8,
    )
    return compute_bond(
        "3",
        market,
        fixed_expiration_terms,
        ohm,
        dai,
        quote_token_per_base_token=Decimal("21.000000000"),
        base_token_per_usd=Decimal("20"),
        quote_token_per_usd=Decimal("1"),
        now=NOW,
    )
