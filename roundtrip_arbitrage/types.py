"""
Core data types for round-trip arbitrage scanning.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from .units import format_native


@dataclass(frozen=True)
class Asset:
    """
    A token identified by symbol and on-chain address.

    Attributes:
        symbol: Display symbol (e.g., "USDC")
        address: Checksum address of the token contract
        decimals: Fixed number of fractional decimal places (e.g., 6)
    """

    symbol: str
    address: str
    decimals: int


@dataclass(frozen=True)
class AssetPair:
    """
    Ordered (token_in, token_out) pair for one leg of a round trip.

    The forward pair is quote -> base (buy leg); the sell leg always uses
    reversed() so the two paths stay inverses of each other.
    """

    token_in: Asset
    token_out: Asset

    @property
    def path(self) -> List[str]:
        return [self.token_in.address, self.token_out.address]

    def reversed(self) -> "AssetPair":
        return AssetPair(token_in=self.token_out, token_out=self.token_in)

    @property
    def name(self) -> str:
        return f"{self.token_in.symbol}/{self.token_out.symbol}"


def make_pair(quote: Asset, base: Asset) -> AssetPair:
    """Build the forward (quote -> base) pair from the configured assets."""
    return AssetPair(token_in=quote, token_out=base)


@dataclass(frozen=True)
class RoundTripParameters:
    """
    Sizing and profitability parameters, all in quote-asset decimal units.

    Attributes:
        trade_size: Quote amount committed on the buy leg (> 0)
        min_profit: Minimum net profit to count as an opportunity (inclusive)
        gas_cost: Fixed execution cost estimate subtracted from gross profit
    """

    trade_size: float
    min_profit: float
    gas_cost: float

    def __post_init__(self):
        if not self.trade_size > 0:
            raise ValueError(f"trade_size must be > 0, got {self.trade_size}")


@dataclass(frozen=True)
class RoundTripResult:
    """
    Outcome of one simulated buy-on-A / sell-on-B round trip.

    Decimal amounts are for display and profit math; the *_native fields
    keep the exact router amounts for storage.
    """

    dex_buy: str
    dex_sell: str
    quote_in: float
    base_acquired: float
    quote_out: float
    price_buy: float  # quote per base paid on the buy venue
    price_sell: float  # quote per base received on the sell venue
    gross_profit: float
    net_profit: float
    quote_in_native: int
    base_acquired_native: int
    quote_out_native: int

    @property
    def direction(self) -> str:
        return f"{self.dex_buy} -> {self.dex_sell}"


@dataclass(frozen=True)
class OpportunityRecord:
    """
    Append-only persisted copy of a profitable RoundTripResult.

    Amounts are exact decimal strings; prices and profits are floats.
    """

    ts_utc: str
    dex_buy: str
    dex_sell: str
    token_in: str
    token_out: str
    amount_in: str
    amount_out: str
    price_buy: float
    price_sell: float
    gross_profit: float
    net_profit: float

    @classmethod
    def from_result(
        cls,
        result: RoundTripResult,
        pair: AssetPair,
        timestamp: Optional[datetime] = None,
    ) -> "OpportunityRecord":
        """
        Build a record from a simulation result.

        Args:
            result: Simulation output
            pair: Forward (quote -> base) pair the result was computed for
            timestamp: Detection time (default: now, UTC)
        """
        quote = pair.token_in
        ts = timestamp or datetime.now(timezone.utc)
        return cls(
            ts_utc=ts.astimezone(timezone.utc).isoformat(),
            dex_buy=result.dex_buy,
            dex_sell=result.dex_sell,
            token_in=quote.symbol,
            token_out=pair.token_out.symbol,
            amount_in=format_native(result.quote_in_native, quote.decimals),
            amount_out=format_native(result.quote_out_native, quote.decimals),
            price_buy=result.price_buy,
            price_sell=result.price_sell,
            gross_profit=result.gross_profit,
            net_profit=result.net_profit,
        )

    def as_row(self) -> Tuple:
        return (
            self.ts_utc,
            self.dex_buy,
            self.dex_sell,
            self.token_in,
            self.token_out,
            self.amount_in,
            self.amount_out,
            self.price_buy,
            self.price_sell,
            self.gross_profit,
            self.net_profit,
        )
