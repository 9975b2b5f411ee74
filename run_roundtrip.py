#!/usr/bin/env python3
"""
DEX round-trip arbitrage scanner CLI.

Polls two routers for the configured quote/base pair, logs every round trip
and stores the profitable ones. Read-only: no transactions are sent.

Usage:
    python3 run_roundtrip.py                      # config from env / .env
    python3 run_roundtrip.py --config configs/roundtrip.example.yaml
    python3 run_roundtrip.py --config configs/roundtrip.example.yaml --once
"""

import argparse
import asyncio
import logging
import sys

from roundtrip_arbitrage import logging_config
from roundtrip_arbitrage.adapters import connect_web3, make_router_venue
from roundtrip_arbitrage.config import ArbConfig, ConfigError, load_config, load_config_from_env
from roundtrip_arbitrage.exceptions import RoundTripArbitrageError
from roundtrip_arbitrage.poller import OpportunityPoller
from roundtrip_arbitrage.store import OpportunityStore
from roundtrip_arbitrage.types import make_pair
from roundtrip_arbitrage.utils import get_logger

logger = get_logger("run_roundtrip")


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="DEX round-trip arbitrage scanner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Config from environment variables (.env supported)
  python3 run_roundtrip.py

  # Config from YAML
  python3 run_roundtrip.py --config configs/roundtrip.example.yaml

  # Single tick (for testing/CI)
  python3 run_roundtrip.py --config configs/roundtrip.example.yaml --once
        """,
    )

    parser.add_argument(
        "--config",
        default=None,
        help="Path to config YAML file (default: read environment variables)",
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single tick and exit (overrides config setting)",
    )

    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )

    return parser.parse_args(argv)


async def run(config: ArbConfig) -> None:
    """Build dependencies and drive the poller until stopped."""
    store = OpportunityStore(config.db_path)
    await store.initialize()

    try:
        web3 = connect_web3(config.rpc_url, request_timeout=config.quote_timeout_sec)
        venue_a, venue_b = (
            make_router_venue(web3, v["name"], v["router"]) for v in config.venues
        )
        quote_asset, base_asset = config.assets()

        poller = OpportunityPoller(
            venue_a,
            venue_b,
            make_pair(quote_asset, base_asset),
            config.params(),
            store,
            interval_sec=config.poll_interval_sec,
            quote_timeout=config.quote_timeout_sec,
        )
        await poller.run(max_ticks=1 if config.once else None)
    finally:
        await store.close()


def main(argv=None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = parse_args(argv)
    logging_config.setup(level=getattr(logging, args.log_level))

    try:
        if args.config:
            config = load_config(args.config)
        else:
            config = load_config_from_env()
    except ConfigError as e:
        logger.error(f"Config error: {e}")
        return 1
    logger.info("Loaded config")

    if args.once:
        config.once = True

    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        logger.info("Stopped by user")
        return 0
    except RoundTripArbitrageError as e:
        logger.error(f"Startup failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
