"""
Fixed-cadence opportunity poller.

Each tick simulates both directions between two venues (A -> B and B -> A)
concurrently, classifies each result against the profit threshold and
persists the profitable ones. One direction's failure never affects the
other, and ticks never overlap.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .adapters.router_v2 import DEFAULT_QUOTE_TIMEOUT_SEC, Venue
from .exceptions import PersistenceFailure, RoundTripArbitrageError
from .simulator import simulate_roundtrip
from .store import OpportunityStore
from .types import AssetPair, OpportunityRecord, RoundTripParameters, RoundTripResult
from .utils import format_duration, format_signed, get_logger

logger = get_logger(__name__)


class PollerState(Enum):
    IDLE = "idle"
    EVALUATING = "evaluating"


FOUND = "found"
NO_OP = "no-op"
ERROR = "error"


@dataclass
class DirectionOutcome:
    """
    Result of evaluating one direction during a tick.

    Attributes:
        direction: "<buy venue> -> <sell venue>"
        status: "found", "no-op" or "error"
        result: Simulation result (absent on error)
        error: Failure cause (only on error)
        persisted: True if the opportunity row was written
    """

    direction: str
    status: str
    result: Optional[RoundTripResult] = None
    error: Optional[BaseException] = None
    persisted: bool = False


class OpportunityPoller:
    """
    Drives round-trip simulations between two venues on a timer.

    State is IDLE between ticks and EVALUATING while both directions run.
    """

    def __init__(
        self,
        venue_a: Venue,
        venue_b: Venue,
        pair: AssetPair,
        params: RoundTripParameters,
        store: OpportunityStore,
        interval_sec: float,
        quote_timeout: float = DEFAULT_QUOTE_TIMEOUT_SEC,
    ):
        """
        Args:
            venue_a: First venue
            venue_b: Second venue
            pair: Forward pair (quote -> base)
            params: Trade size, minimum net profit and gas cost
            store: Destination for profitable round trips
            interval_sec: Seconds between tick starts
            quote_timeout: Per-quote timeout in seconds
        """
        if interval_sec <= 0:
            raise ValueError(f"interval_sec must be > 0, got {interval_sec}")

        self.venue_a = venue_a
        self.venue_b = venue_b
        self.pair = pair
        self.params = params
        self.store = store
        self.interval_sec = interval_sec
        self.quote_timeout = quote_timeout

        self.state = PollerState.IDLE

        # Scan stats
        self.ticks = 0
        self.opportunities_found = 0
        self.errors = 0
        self.skipped_ticks = 0

    def directions(self) -> List[Tuple[Venue, Venue]]:
        """(buy, sell) venue pairs checked every tick."""
        return [(self.venue_a, self.venue_b), (self.venue_b, self.venue_a)]

    async def evaluate_direction(self, buy: Venue, sell: Venue) -> DirectionOutcome:
        """Simulate, classify and (if profitable) persist one direction."""
        direction = f"{buy.name} -> {sell.name}"

        try:
            result = await simulate_roundtrip(
                buy, sell, self.pair, self.params, timeout=self.quote_timeout
            )
        except RoundTripArbitrageError as e:
            leg = e.details.get("leg", "-")
            logger.error(
                f"Simulation error | {direction} | stage={type(e).__name__} "
                f"leg={leg} | {e}"
            )
            return DirectionOutcome(direction=direction, status=ERROR, error=e)
        except Exception as e:
            logger.error(
                f"Simulation error | {direction} | stage=unexpected | {e}",
                exc_info=True,
            )
            return DirectionOutcome(direction=direction, status=ERROR, error=e)

        base = self.pair.token_out.symbol
        quote = self.pair.token_in.symbol

        if result.net_profit >= self.params.min_profit:
            logger.info(
                f"Opportunity found | {direction} | buy {result.base_acquired:.6f} {base} "
                f"@ {result.price_buy:.4f} {quote}, sell @ {result.price_sell:.4f} {quote} "
                f"| gross {format_signed(result.gross_profit)} {quote}, "
                f"net {format_signed(result.net_profit)} {quote}"
            )
            persisted = await self._persist(result)
            return DirectionOutcome(
                direction=direction, status=FOUND, result=result, persisted=persisted
            )

        logger.info(
            f"No-op | {direction} | net profit {format_signed(result.net_profit)} "
            f"< min {self.params.min_profit:.4f} {quote}"
        )
        return DirectionOutcome(direction=direction, status=NO_OP, result=result)

    async def _persist(self, result: RoundTripResult) -> bool:
        record = OpportunityRecord.from_result(result, self.pair)
        try:
            await self.store.append(record)
        except PersistenceFailure as e:
            logger.error(f"DB insert failed | {result.direction} | {e}")
            return False
        except Exception as e:
            logger.error(f"DB insert failed | {result.direction} | {e}", exc_info=True)
            return False
        return True

    async def run_tick(self) -> List[DirectionOutcome]:
        """
        Evaluate both directions once.

        Returns:
            One outcome per direction, or [] if a tick is already running
        """
        if self.state is PollerState.EVALUATING:
            self.skipped_ticks += 1
            logger.warning("Previous tick still evaluating; skipping this tick")
            return []

        self.state = PollerState.EVALUATING
        try:
            outcomes = await asyncio.gather(
                *(self.evaluate_direction(buy, sell) for buy, sell in self.directions())
            )
        finally:
            self.state = PollerState.IDLE

        self.ticks += 1
        for outcome in outcomes:
            if outcome.status == FOUND:
                self.opportunities_found += 1
            elif outcome.status == ERROR:
                self.errors += 1

        return list(outcomes)

    async def run(self, max_ticks: Optional[int] = None) -> None:
        """
        Main loop: tick immediately, then every interval_sec.

        Ticks are serialized. If a tick overruns its slot, the missed fire
        times are skipped rather than run back to back.

        Args:
            max_ticks: Stop after this many ticks (None = run forever)
        """
        loop = asyncio.get_event_loop()
        quote = self.pair.token_in.symbol

        logger.info(
            f"Starting loop: every {format_duration(self.interval_sec)}, "
            f"trade {self.params.trade_size:.2f} {quote}, "
            f"min profit {self.params.min_profit:.2f} {quote} "
            f"(gas {self.params.gas_cost:.2f}) | pair {self.pair.name} | "
            f"venues {self.venue_a.name} <-> {self.venue_b.name}"
        )

        next_fire = loop.time()
        completed = 0
        try:
            while max_ticks is None or completed < max_ticks:
                delay = next_fire - loop.time()
                if delay > 0:
                    await asyncio.sleep(delay)

                await self.run_tick()
                completed += 1

                next_fire += self.interval_sec
                now = loop.time()
                if now > next_fire:
                    missed = int((now - next_fire) // self.interval_sec) + 1
                    next_fire += missed * self.interval_sec
                    self.skipped_ticks += missed
                    logger.warning(
                        f"Tick overran {format_duration(self.interval_sec)} interval; "
                        f"skipping {missed} tick(s)"
                    )
        finally:
            logger.info(
                f"Stopped after {self.ticks} ticks | opportunities={self.opportunities_found} "
                f"errors={self.errors} skipped={self.skipped_ticks}"
            )
