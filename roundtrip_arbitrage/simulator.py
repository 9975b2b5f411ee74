"""
Two-leg round-trip simulation across a pair of venues.

Buy leg: quote -> base on the buy venue. Sell leg: the acquired base amount
back to quote on the sell venue. Profit is measured in the quote asset.
"""

from .adapters.router_v2 import DEFAULT_QUOTE_TIMEOUT_SEC, Venue, quote
from .exceptions import QuoteError
from .types import AssetPair, RoundTripParameters, RoundTripResult
from .units import from_native, to_native
from .utils import get_logger

logger = get_logger(__name__)

# Floor for the acquired base amount when deriving prices: one wei of an
# 18-decimal token. Keeps prices finite when a leg rounds to zero.
MIN_ACQUIRED = 1e-18


async def simulate_roundtrip(
    buy_venue: Venue,
    sell_venue: Venue,
    pair: AssetPair,
    params: RoundTripParameters,
    timeout: float = DEFAULT_QUOTE_TIMEOUT_SEC,
) -> RoundTripResult:
    """
    Simulate buying the base asset on buy_venue and selling it on sell_venue.

    Args:
        buy_venue: Venue quoted for quote -> base
        sell_venue: Venue quoted for base -> quote
        pair: Forward pair (token_in = quote asset, token_out = base asset)
        params: Trade size, threshold and gas cost in quote units
        timeout: Per-quote timeout in seconds

    Returns:
        RoundTripResult with implied prices and gross/net profit

    Raises:
        QuoteUnavailable / SourceUnreachable: From either leg, with
            details["leg"] set to "buy" or "sell"
    """
    quote_asset = pair.token_in
    base_asset = pair.token_out

    quote_in_native = to_native(params.trade_size, quote_asset.decimals)

    # Leg 2 consumes leg 1's output, so the legs stay sequential
    try:
        base_native = await quote(
            buy_venue, quote_in_native, pair.path, timeout=timeout
        )
    except QuoteError as e:
        e.details.setdefault("leg", "buy")
        raise

    try:
        quote_out_native = await quote(
            sell_venue, base_native, pair.reversed().path, timeout=timeout
        )
    except QuoteError as e:
        e.details.setdefault("leg", "sell")
        raise

    quote_in = from_native(quote_in_native, quote_asset.decimals)
    base_acquired = from_native(base_native, base_asset.decimals)
    quote_out = from_native(quote_out_native, quote_asset.decimals)

    denominator = max(base_acquired, MIN_ACQUIRED)
    price_buy = quote_in / denominator
    price_sell = quote_out / denominator

    gross_profit = quote_out - quote_in
    net_profit = gross_profit - params.gas_cost

    logger.debug(
        f"{buy_venue.name} -> {sell_venue.name}: {quote_in} {quote_asset.symbol} "
        f"-> {base_acquired} {base_asset.symbol} -> {quote_out} {quote_asset.symbol}"
    )

    return RoundTripResult(
        dex_buy=buy_venue.name,
        dex_sell=sell_venue.name,
        quote_in=quote_in,
        base_acquired=base_acquired,
        quote_out=quote_out,
        price_buy=price_buy,
        price_sell=price_sell,
        gross_profit=gross_profit,
        net_profit=net_profit,
        quote_in_native=quote_in_native,
        base_acquired_native=base_native,
        quote_out_native=quote_out_native,
    )
