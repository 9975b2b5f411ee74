"""
Uniswap V2 style router adapter.

Every venue exposes the same read-only capability, getAmountsOut(amountIn,
path), and differs only by name and router address. A Venue carries that
capability as an async callable so tests and alternative backends can supply
their own without subclassing.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Sequence

from web3 import Web3
from web3.exceptions import ContractLogicError

from ..abi import UNISWAP_V2_ROUTER_ABI
from ..exceptions import InvalidAmount, QuoteError, QuoteUnavailable, SourceUnreachable
from ..units import UINT256_MAX
from ..utils import get_logger

logger = get_logger(__name__)

AmountsOut = Callable[[int, List[str]], Awaitable[Sequence[int]]]

DEFAULT_QUOTE_TIMEOUT_SEC = 10.0


@dataclass(frozen=True)
class Venue:
    """
    A DEX router that can quote swaps.

    Attributes:
        name: Human-readable DEX name (e.g., "QuickSwap")
        router_address: Checksum address of the router contract
        get_amounts_out: Async getAmountsOut(amount_in, path) -> amounts
    """

    name: str
    router_address: str
    get_amounts_out: AmountsOut


def connect_web3(rpc_url: str, request_timeout: float = 20.0) -> Web3:
    """
    Build a Web3 HTTP client and validate the connection.

    Args:
        rpc_url: HTTP(S) RPC endpoint
        request_timeout: Per-request HTTP timeout in seconds

    Returns:
        Connected Web3 instance

    Raises:
        SourceUnreachable: If the endpoint does not answer
    """
    if not rpc_url.startswith(("http://", "https://")):
        raise ValueError(f"Invalid RPC URL format: {rpc_url}")

    web3 = Web3(
        Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": request_timeout})
    )
    if not web3.is_connected():
        raise SourceUnreachable(f"Web3 not connected; bad RPC URL? ({rpc_url})")

    logger.info(f"Connected to RPC (block #{web3.eth.block_number:,})")
    return web3


def make_router_venue(web3: Web3, name: str, router_address: str) -> Venue:
    """
    Bind a router contract and wrap its getAmountsOut call.

    The web3 call is synchronous, so it runs in the default thread pool to
    keep the event loop free while both directions are in flight.
    """
    address = Web3.to_checksum_address(router_address)
    router = web3.eth.contract(address=address, abi=UNISWAP_V2_ROUTER_ABI)

    async def get_amounts_out(amount_in: int, path: List[str]) -> Sequence[int]:
        loop = asyncio.get_event_loop()
        call = router.functions.getAmountsOut(amount_in, list(path)).call
        return await loop.run_in_executor(None, call)

    return Venue(name=name, router_address=address, get_amounts_out=get_amounts_out)


async def quote(
    venue: Venue,
    amount_in: int,
    path: Sequence[str],
    timeout: float = DEFAULT_QUOTE_TIMEOUT_SEC,
) -> int:
    """
    Ask a venue how much of path[-1] it returns for amount_in of path[0].

    Args:
        venue: Venue to query
        amount_in: Input amount in path[0] native units
        path: Token addresses, at least two
        timeout: Seconds before the query is abandoned

    Returns:
        Output amount in path[-1] native units

    Raises:
        InvalidAmount: If amount_in is not a uint256
        QuoteUnavailable: If the venue returns nothing usable or reverts
        SourceUnreachable: If the query fails or times out
    """
    if len(path) < 2:
        raise ValueError(f"Quote path needs at least 2 tokens, got {len(path)}")
    if (
        isinstance(amount_in, bool)
        or not isinstance(amount_in, int)
        or not 0 <= amount_in <= UINT256_MAX
    ):
        raise InvalidAmount(f"Invalid native amount_in: {amount_in!r}", amount=amount_in)

    try:
        amounts = await asyncio.wait_for(
            venue.get_amounts_out(amount_in, list(path)), timeout=timeout
        )
    except asyncio.TimeoutError as e:
        raise SourceUnreachable(
            f"{venue.name} quote timed out after {timeout}s", venue=venue.name
        ) from e
    except QuoteError:
        raise
    except ContractLogicError as e:
        raise QuoteUnavailable(
            f"{venue.name} router reverted: {e}", venue=venue.name
        ) from e
    except Exception as e:
        raise SourceUnreachable(
            f"{venue.name} query failed: {e}", venue=venue.name
        ) from e

    if not amounts:
        raise QuoteUnavailable(f"{venue.name} returned empty amounts", venue=venue.name)

    amount_out = amounts[-1]
    if isinstance(amount_out, bool) or not isinstance(amount_out, int) or amount_out < 0:
        raise QuoteUnavailable(
            f"{venue.name} returned unusable amount {amount_out!r}",
            venue=venue.name,
            details={"amounts": list(amounts)},
        )

    logger.debug(f"{venue.name} quote {amount_in} {path[0]} -> {amount_out} {path[-1]}")
    return amount_out
