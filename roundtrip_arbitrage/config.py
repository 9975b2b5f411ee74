"""
Configuration loading and validation for the round-trip scanner.

Config comes either from a YAML file (load_config) or from environment
variables / .env (load_config_from_env). Both produce the same plain dict,
validated once by ArbConfig. Any problem is fatal at startup.
"""

import math
import os
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml
from dotenv import load_dotenv
from web3 import Web3

from .exceptions import ConfigurationError, InvalidAmount
from .types import Asset, RoundTripParameters
from .units import MAX_DECIMALS, to_native

ALCHEMY_POLYGON_URL = "https://polygon-mainnet.g.alchemy.com/v2/{key}"

DEFAULT_DB_PATH = "arb.db"
DEFAULT_QUOTE_TIMEOUT_SEC = 10.0


class ConfigError(ConfigurationError):
    """Raised when config is invalid or missing required fields."""

    pass


class ArbConfig:
    """
    Parsed and validated configuration for the round-trip scanner.

    Attributes:
        rpc_url: HTTP(S) RPC endpoint
        quote_token: {symbol, address, decimals} of the asset profits are measured in
        base_token: {symbol, address, decimals} of the asset bought and sold back
        venues: Exactly two {name, router} dicts
        trade_size: Quote amount committed per round trip (> 0)
        min_profit: Minimum net profit in quote units (inclusive)
        gas_cost: Fixed cost estimate in quote units
        poll_interval_sec: Seconds between ticks
        quote_timeout_sec: Per-quote timeout
        db_path: SQLite file for opportunities
        once: If True, run a single tick and exit
    """

    def __init__(self, config_dict: Dict[str, Any]):
        """
        Parse and validate config from dictionary.

        Args:
            config_dict: Loaded YAML config or env-derived dict

        Raises:
            ConfigError: If required fields missing or invalid
        """
        self.rpc_url: str = self._get_required(config_dict, "rpc_url", str)
        if not self.rpc_url.startswith(("http://", "https://")):
            raise ConfigError(f"rpc_url must be http(s), got '{self.rpc_url}'")

        self.quote_token: Dict[str, Any] = self._parse_token(
            self._get_required(config_dict, "quote_token", dict), "quote_token"
        )
        self.base_token: Dict[str, Any] = self._parse_token(
            self._get_required(config_dict, "base_token", dict), "base_token"
        )
        if self.quote_token["address"] == self.base_token["address"]:
            raise ConfigError("quote_token and base_token must be different tokens")

        self.venues: List[Dict[str, str]] = self._parse_venues(
            self._get_required(config_dict, "venues", list)
        )

        # Trading parameters
        self.trade_size: float = self._get_number(config_dict, "trade_size")
        self.min_profit: float = self._get_number(config_dict, "min_profit")
        self.gas_cost: float = self._get_number(config_dict, "gas_cost")

        if not self.trade_size > 0:
            raise ConfigError(f"trade_size must be > 0, got {self.trade_size}")
        try:
            to_native(self.trade_size, self.quote_token["decimals"])
        except InvalidAmount as e:
            raise ConfigError(f"Invalid trade_size: {e}") from e

        # Loop settings
        self.poll_interval_sec: float = self._get_number(
            config_dict, "poll_interval_sec"
        )
        if not self.poll_interval_sec > 0:
            raise ConfigError(
                f"poll_interval_sec must be > 0, got {self.poll_interval_sec}"
            )

        self.quote_timeout_sec: float = self._get_number(
            config_dict, "quote_timeout_sec", default=DEFAULT_QUOTE_TIMEOUT_SEC
        )
        if not self.quote_timeout_sec > 0:
            raise ConfigError(
                f"quote_timeout_sec must be > 0, got {self.quote_timeout_sec}"
            )

        self.db_path: str = str(config_dict.get("db_path") or DEFAULT_DB_PATH)
        self.once: bool = bool(config_dict.get("once", False))

    @staticmethod
    def _get_required(d: Dict, key: str, expected_type: type) -> Any:
        """Get required config field with type validation."""
        if key not in d or d[key] is None:
            raise ConfigError(f"Missing required config field: {key}")
        val = d[key]
        if not isinstance(val, expected_type):
            raise ConfigError(
                f"Config field '{key}' must be {expected_type.__name__}, got {type(val).__name__}"
            )
        return val

    @staticmethod
    def _get_number(d: Dict, key: str, default: Optional[float] = None) -> float:
        """Get numeric field (required unless a default is given); numeric strings are accepted."""
        if key not in d or d[key] is None:
            if default is not None:
                return float(default)
            raise ConfigError(f"Missing required config field: {key}")
        val = d[key]
        if isinstance(val, bool):
            raise ConfigError(f"Config field '{key}' must be a number, got bool")
        try:
            number = float(val)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Config field '{key}' must be a number, got {val!r}") from e
        if not math.isfinite(number):
            raise ConfigError(f"Config field '{key}' must be finite, got {val!r}")
        return number

    @staticmethod
    def _parse_address(value: Any, where: str) -> str:
        if not isinstance(value, str) or not Web3.is_address(value.lower()):
            raise ConfigError(f"{where} is not a valid address: {value!r}")
        return Web3.to_checksum_address(value.lower())

    @classmethod
    def _parse_token(cls, info: Dict[str, Any], key: str) -> Dict[str, Any]:
        """Parse and validate one token entry."""
        symbol = info.get("symbol")
        if not symbol or not isinstance(symbol, str):
            raise ConfigError(f"{key} missing 'symbol'")
        if "address" not in info:
            raise ConfigError(f"{key} '{symbol}' missing 'address'")
        if "decimals" not in info:
            raise ConfigError(f"{key} '{symbol}' missing 'decimals'")

        try:
            decimals = int(info["decimals"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"{key} '{symbol}' decimals must be an int") from e
        if decimals < 0 or decimals > MAX_DECIMALS:
            raise ConfigError(f"{key} '{symbol}' decimals out of range: {decimals}")

        return {
            "symbol": symbol,
            "address": cls._parse_address(info["address"], f"{key} '{symbol}' address"),
            "decimals": decimals,
        }

    @classmethod
    def _parse_venues(cls, venues_raw: List[Any]) -> List[Dict[str, str]]:
        """Parse and validate the two venue configs."""
        if len(venues_raw) != 2:
            raise ConfigError(f"Exactly 2 venues required, got {len(venues_raw)}")

        venues = []
        for i, venue in enumerate(venues_raw):
            if not isinstance(venue, dict):
                raise ConfigError(f"Venue config {i} must be a dict")

            name = venue.get("name")
            if not name:
                raise ConfigError(f"Venue config {i} missing 'name'")
            if not venue.get("router"):
                raise ConfigError(f"Venue '{name}' missing 'router'")

            venues.append(
                {
                    "name": str(name),
                    "router": cls._parse_address(
                        venue["router"], f"Venue '{name}' router"
                    ),
                }
            )

        if venues[0]["name"] == venues[1]["name"]:
            raise ConfigError(f"Venue names must differ, both are '{venues[0]['name']}'")

        return venues

    def params(self) -> RoundTripParameters:
        return RoundTripParameters(
            trade_size=self.trade_size,
            min_profit=self.min_profit,
            gas_cost=self.gas_cost,
        )

    def assets(self) -> Tuple[Asset, Asset]:
        """(quote, base) assets."""
        return Asset(**self.quote_token), Asset(**self.base_token)


def load_config(config_path: str) -> ArbConfig:
    """
    Load and validate config from YAML file.

    Args:
        config_path: Path to config YAML file

    Returns:
        Validated ArbConfig instance

    Raises:
        ConfigError: If config invalid or file not found
    """
    if not os.path.exists(config_path):
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML: {e}") from e

    if not isinstance(config_dict, dict):
        raise ConfigError("Config file must contain a YAML dictionary")

    return ArbConfig(config_dict)


def _require_env(env: Mapping[str, str], name: str) -> str:
    value = env.get(name)
    if value is None or not value.strip():
        raise ConfigError(f"Missing required environment variable: {name}")
    return value.strip()


def config_dict_from_env(env: Mapping[str, str]) -> Dict[str, Any]:
    """
    Map environment variables to a config dict.

    RPC_URL wins; otherwise ALCHEMY_KEY builds a Polygon Alchemy URL.
    """
    rpc_url = env.get("RPC_URL")
    if not rpc_url:
        key = _require_env(env, "ALCHEMY_KEY")
        rpc_url = ALCHEMY_POLYGON_URL.format(key=key)

    return {
        "rpc_url": rpc_url,
        "quote_token": {
            "symbol": env.get("QUOTE_SYMBOL", "USDC"),
            "address": _require_env(env, "USDC"),
            "decimals": env.get("USDC_DECIMALS", "6"),
        },
        "base_token": {
            "symbol": env.get("BASE_SYMBOL", "WETH"),
            "address": _require_env(env, "WETH"),
            "decimals": env.get("WETH_DECIMALS", "18"),
        },
        "venues": [
            {"name": "QuickSwap", "router": _require_env(env, "QUICKSWAP_ROUTER")},
            {"name": "SushiSwap", "router": _require_env(env, "SUSHISWAP_ROUTER")},
        ],
        "trade_size": _require_env(env, "TRADE_SIZE_USDC"),
        "min_profit": _require_env(env, "MIN_PROFIT_USDC"),
        "gas_cost": _require_env(env, "GAS_COST_USDC"),
        "poll_interval_sec": _require_env(env, "CHECK_INTERVAL_SECS"),
        "quote_timeout_sec": env.get("QUOTE_TIMEOUT_SECS", DEFAULT_QUOTE_TIMEOUT_SEC),
        "db_path": env.get("DB_PATH", DEFAULT_DB_PATH),
    }


def load_config_from_env(env: Optional[Mapping[str, str]] = None) -> ArbConfig:
    """
    Load and validate config from environment variables.

    Args:
        env: Mapping to read instead of os.environ (a .env file is loaded
            into os.environ first when this is None)

    Raises:
        ConfigError: If a variable is missing or invalid
    """
    if env is None:
        load_dotenv()
        env = os.environ
    return ArbConfig(config_dict_from_env(env))
