"""
Unit tests for roundtrip_arbitrage/adapters/router_v2.py

Covers the quote contract (last element, path validation) and how venue
failures map onto QuoteUnavailable / SourceUnreachable.
"""

import asyncio
from unittest.mock import MagicMock

import pytest
from web3 import Web3
from web3.exceptions import ContractLogicError

from roundtrip_arbitrage.abi import UNISWAP_V2_ROUTER_ABI
from roundtrip_arbitrage.adapters import Venue, make_router_venue, quote
from roundtrip_arbitrage.exceptions import (
    InvalidAmount,
    QuoteUnavailable,
    SourceUnreachable,
)

PATH = [
    "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174",
    "0x7ceB23fD6bC0adD59E62ac25578270cFf1b9f619",
]


def venue_returning(value=None, raises=None, delay=0.0):
    async def get_amounts_out(amount_in, path):
        if delay:
            await asyncio.sleep(delay)
        if raises is not None:
            raise raises
        return value

    return Venue(name="TestSwap", router_address="0x" + "11" * 20, get_amounts_out=get_amounts_out)


class TestQuote:
    """Test quote() result handling."""

    @pytest.mark.asyncio
    async def test_returns_last_amount(self):
        venue = venue_returning([1_000_000, 42, 500])
        assert await quote(venue, 1_000_000, PATH + ["0x" + "22" * 20]) == 500

    @pytest.mark.asyncio
    async def test_zero_output_is_a_valid_quote(self):
        venue = venue_returning([1_000_000, 0])
        assert await quote(venue, 1_000_000, PATH) == 0

    @pytest.mark.asyncio
    async def test_empty_amounts(self):
        with pytest.raises(QuoteUnavailable) as exc_info:
            await quote(venue_returning([]), 1, PATH)
        assert exc_info.value.venue == "TestSwap"

    @pytest.mark.asyncio
    async def test_no_result(self):
        with pytest.raises(QuoteUnavailable):
            await quote(venue_returning(None), 1, PATH)

    @pytest.mark.asyncio
    async def test_unusable_amount(self):
        for bad in ([1, -5], [1, "12"], [1, 1.5]):
            with pytest.raises(QuoteUnavailable):
                await quote(venue_returning(bad), 1, PATH)

    @pytest.mark.asyncio
    async def test_short_path_rejected(self):
        with pytest.raises(ValueError):
            await quote(venue_returning([1, 2]), 1, PATH[:1])

    @pytest.mark.asyncio
    async def test_invalid_amount_in_rejected(self):
        with pytest.raises(InvalidAmount):
            await quote(venue_returning([1, 2]), -1, PATH)
        with pytest.raises(InvalidAmount):
            await quote(venue_returning([1, 2]), 1.0, PATH)


class TestQuoteFailures:
    """Test failure mapping."""

    @pytest.mark.asyncio
    async def test_timeout_is_source_unreachable(self):
        venue = venue_returning([1, 2], delay=1.0)
        with pytest.raises(SourceUnreachable) as exc_info:
            await quote(venue, 1, PATH, timeout=0.05)
        assert "timed out" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_network_error_is_source_unreachable(self):
        venue = venue_returning(raises=ConnectionError("connection refused"))
        with pytest.raises(SourceUnreachable) as exc_info:
            await quote(venue, 1, PATH)
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_router_revert_is_quote_unavailable(self):
        venue = venue_returning(raises=ContractLogicError("execution reverted"))
        with pytest.raises(QuoteUnavailable):
            await quote(venue, 1, PATH)

    @pytest.mark.asyncio
    async def test_quote_errors_pass_through(self):
        original = QuoteUnavailable("no pool", venue="Other")
        venue = venue_returning(raises=original)
        with pytest.raises(QuoteUnavailable) as exc_info:
            await quote(venue, 1, PATH)
        assert exc_info.value is original


class TestMakeRouterVenue:
    """Test web3 binding without a live node."""

    @pytest.mark.asyncio
    async def test_calls_get_amounts_out(self):
        web3 = MagicMock()
        contract = web3.eth.contract.return_value
        contract.functions.getAmountsOut.return_value.call.return_value = [10, 20]

        venue = make_router_venue(
            web3, "QuickSwap", "0xa5e0829caced8ffdd4de3c43696c57f7d7a678ff"
        )

        assert venue.name == "QuickSwap"
        assert venue.router_address == Web3.to_checksum_address(
            "0xa5e0829caced8ffdd4de3c43696c57f7d7a678ff"
        )
        web3.eth.contract.assert_called_once_with(
            address=venue.router_address, abi=UNISWAP_V2_ROUTER_ABI
        )

        assert await quote(venue, 10, PATH) == 20
        contract.functions.getAmountsOut.assert_called_once_with(10, PATH)
