"""
Quote source adapters for different router types.
"""

from .router_v2 import Venue, connect_web3, make_router_venue, quote

__all__ = ["Venue", "connect_web3", "make_router_venue", "quote"]
