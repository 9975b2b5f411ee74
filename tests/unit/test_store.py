"""
Unit tests for roundtrip_arbitrage/store.py against a temporary SQLite file.
"""

import asyncio
from datetime import datetime, timezone

import pytest

from roundtrip_arbitrage.exceptions import PersistenceFailure
from roundtrip_arbitrage.store import OpportunityStore
from roundtrip_arbitrage.types import OpportunityRecord, RoundTripResult


def make_result(dex_buy="QuickSwap", dex_sell="SushiSwap", quote_out_native=1_010_000_000):
    quote_out = quote_out_native / 10**6
    return RoundTripResult(
        dex_buy=dex_buy,
        dex_sell=dex_sell,
        quote_in=1000.0,
        base_acquired=0.5,
        quote_out=quote_out,
        price_buy=2000.0,
        price_sell=quote_out / 0.5,
        gross_profit=quote_out - 1000.0,
        net_profit=quote_out - 1002.0,
        quote_in_native=1_000_000_000,
        base_acquired_native=5 * 10**17,
        quote_out_native=quote_out_native,
    )


def test_record_from_result(pair):
    ts = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)
    record = OpportunityRecord.from_result(make_result(quote_out_native=1_010_123_456), pair, ts)

    assert record.ts_utc == "2024-05-01T12:30:00+00:00"
    assert record.token_in == "USDC"
    assert record.token_out == "WETH"
    assert record.amount_in == "1000.000000"
    assert record.amount_out == "1010.123456"
    assert record.as_row()[0] == record.ts_utc
    assert len(record.as_row()) == 11


@pytest.mark.asyncio
async def test_append_and_read_back(tmp_path, pair):
    db_path = str(tmp_path / "arb.db")

    async with OpportunityStore(db_path) as store:
        await store.append(OpportunityRecord.from_result(make_result(), pair))
        assert await store.count() == 1

        rows = await store.fetch_recent()
        assert rows[0]["dex_buy"] == "QuickSwap"
        assert rows[0]["amount_out"] == "1010.000000"
        assert rows[0]["net_profit"] == pytest.approx(8.0)

    # rows survive reopening
    async with OpportunityStore(db_path) as store:
        assert await store.count() == 1


@pytest.mark.asyncio
async def test_concurrent_appends(tmp_path, pair):
    async with OpportunityStore(str(tmp_path / "arb.db")) as store:
        records = [
            OpportunityRecord.from_result(make_result("QuickSwap", "SushiSwap"), pair),
            OpportunityRecord.from_result(make_result("SushiSwap", "QuickSwap"), pair),
        ] * 5
        await asyncio.gather(*(store.append(r) for r in records))

        assert await store.count() == 10
        recent = await store.fetch_recent(limit=3)
        assert len(recent) == 3


@pytest.mark.asyncio
async def test_unopenable_path_fails(tmp_path):
    store = OpportunityStore(str(tmp_path / "missing" / "dir" / "arb.db"))
    with pytest.raises(PersistenceFailure) as exc_info:
        await store.initialize()
    assert exc_info.value.db_path.endswith("arb.db")


@pytest.mark.asyncio
async def test_append_before_initialize_fails(tmp_path, pair):
    store = OpportunityStore(str(tmp_path / "arb.db"))
    with pytest.raises(PersistenceFailure):
        await store.append(OpportunityRecord.from_result(make_result(), pair))
