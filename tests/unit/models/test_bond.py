"""Tests for the Bond snapshot model and its JSON serialization."""

from __future__ import annotations

import json
from decimal import Decimal

import pytest
from pydantic import ValidationError

from Bond_Watch.models import Bond, BondPrice, TokenAmounts


class TestBondSerialization:
    def test_decimals_serialize_as_strings(self, sample_bond: Bond) -> None:
        payload = json.loads(sample_bond.model_dump_json())
        assert payload["discount"] == "0.100000000"
        assert isinstance(payload["price"]["in_usd"], str)
        assert isinstance(payload["capacity"]["in_base_token"], str)
        assert payload["quote_token"]["kind"] == "token"

    def test_json_round_trip_is_lossless(self, sample_bond: Bond) -> None:
        restored = Bond.model_validate_json(sample_bond.model_dump_json())
        assert restored == sample_bond
        assert restored.capacity.in_quote_token == sample_bond.capacity.in_quote_token

    def test_bond_is_frozen(self, sample_bond: Bond) -> None:
        with pytest.raises(ValidationError):
            sample_bond.discount = Decimal("0.5")  # type: ignore[misc]


class TestAmounts:
    def test_token_amounts_keep_scale(self) -> None:
        amounts = TokenAmounts(
            in_base_token=Decimal("1.000000000"), in_quote_token=Decimal("18.0")
        )
        assert amounts.model_dump(mode="json") == {
            "in_base_token": "1.000000000",
            "in_quote_token": "18.0",
        }

    def test_bond_price_fields(self) -> None:
        price = BondPrice(in_usd=Decimal("18"), in_base_token=Decimal("18.000000000"))
        assert price.model_dump(mode="json") == {"in_usd": "18", "in_base_token": "18.000000000"}
