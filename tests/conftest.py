"""
Shared fixtures: a USDC/WETH style pair and scripted fake venues.
"""

import asyncio

import pytest

from roundtrip_arbitrage.adapters import Venue
from roundtrip_arbitrage.types import Asset, RoundTripParameters, make_pair

QUOTE_ADDR = "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174"
BASE_ADDR = "0x7ceB23fD6bC0adD59E62ac25578270cFf1b9f619"


def scripted_venue(name, buy_out=None, sell_out=None, delay=0.0, calls=None):
    """
    Venue that answers from fixed amounts.

    buy_out / sell_out are either an int (native amount returned), a callable
    amount_in -> int, or an exception instance to raise. The leg is inferred
    from path[0]: quote asset first means a buy.
    """

    async def get_amounts_out(amount_in, path):
        if calls is not None:
            calls.append((name, amount_in, list(path)))
        if delay:
            await asyncio.sleep(delay)
        answer = buy_out if path[0] == QUOTE_ADDR else sell_out
        if isinstance(answer, BaseException):
            raise answer
        if callable(answer):
            answer = answer(amount_in)
        return [amount_in, answer]

    return Venue(name=name, router_address="0x" + "00" * 20, get_amounts_out=get_amounts_out)


@pytest.fixture
def usdc():
    return Asset(symbol="USDC", address=QUOTE_ADDR, decimals=6)


@pytest.fixture
def weth():
    return Asset(symbol="WETH", address=BASE_ADDR, decimals=18)


@pytest.fixture
def pair(usdc, weth):
    return make_pair(usdc, weth)


@pytest.fixture
def params():
    return RoundTripParameters(trade_size=1000.0, min_profit=5.0, gas_cost=2.0)


class RecordingStore:
    """In-memory stand-in for OpportunityStore."""

    def __init__(self, fail_with=None):
        self.records = []
        self.fail_with = fail_with

    async def append(self, record):
        if self.fail_with is not None:
            raise self.fail_with
        self.records.append(record)


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def make_venue():
    return scripted_venue


@pytest.fixture
def make_store():
    return RecordingStore
