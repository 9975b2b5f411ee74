"""
DEX Round-Trip Arbitrage Scanner.

Polls two Uniswap V2 style routers for a quote/base pair, simulates buying on
one and selling on the other in both directions, and records round trips
whose net profit clears a threshold. Read-only: nothing is ever traded.
"""

PROJECT_NAME = "dex-roundtrip-arbitrage"

from roundtrip_arbitrage.version import __version__
from roundtrip_arbitrage.exceptions import (
    RoundTripArbitrageError,
    ConfigurationError,
    InvalidAmount,
    QuoteError,
    QuoteUnavailable,
    SourceUnreachable,
    PersistenceFailure,
)
from roundtrip_arbitrage.types import (
    Asset,
    AssetPair,
    OpportunityRecord,
    RoundTripParameters,
    RoundTripResult,
    make_pair,
)
from roundtrip_arbitrage.units import from_native, format_native, to_native
from roundtrip_arbitrage.adapters import Venue, make_router_venue, quote
from roundtrip_arbitrage.simulator import simulate_roundtrip
from roundtrip_arbitrage.store import OpportunityStore
from roundtrip_arbitrage.poller import DirectionOutcome, OpportunityPoller, PollerState

__all__ = [
    "PROJECT_NAME",
    "__version__",
    "RoundTripArbitrageError",
    "ConfigurationError",
    "InvalidAmount",
    "QuoteError",
    "QuoteUnavailable",
    "SourceUnreachable",
    "PersistenceFailure",
    "Asset",
    "AssetPair",
    "OpportunityRecord",
    "RoundTripParameters",
    "RoundTripResult",
    "make_pair",
    "from_native",
    "format_native",
    "to_native",
    "Venue",
    "make_router_venue",
    "quote",
    "simulate_roundtrip",
    "OpportunityStore",
    "DirectionOutcome",
    "OpportunityPoller",
    "PollerState",
]
