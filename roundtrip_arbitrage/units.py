"""
Fixed-point conversion between native token units and decimal display values.

Conversion policy:
- Native amounts are plain ints bounded by uint256, scaled by 10**decimals.
- Decimal -> native goes through Decimal(str(x)) so floats are read by their
  shortest repr, then rounds ROUND_HALF_UP (half away from zero; inputs are
  never negative).
- Native -> float splits the integer at 10**18 so the high and low parts are
  each converted without losing the low digits.
- format_native() gives the exact decimal string for storage.
"""

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Union

from .exceptions import InvalidAmount

UINT256_MAX = 2**256 - 1

# uint256 has 78 digits; keep every intermediate exact
_PRECISION = 100

_SPLIT = 10**18

# Largest d with 10**d inside uint256
MAX_DECIMALS = 77

DecimalLike = Union[int, float, Decimal, str]


def _check_decimals(decimals: int) -> None:
    if (
        isinstance(decimals, bool)
        or not isinstance(decimals, int)
        or not 0 <= decimals <= MAX_DECIMALS
    ):
        raise InvalidAmount(
            f"decimals must be an int in [0, {MAX_DECIMALS}], got {decimals!r}",
            decimals=decimals,
        )


def _as_decimal(amount: DecimalLike) -> Decimal:
    if isinstance(amount, bool):
        raise InvalidAmount(f"Not a numeric amount: {amount!r}", amount=amount)
    if isinstance(amount, float):
        if not math.isfinite(amount):
            raise InvalidAmount(f"Amount must be finite, got {amount!r}", amount=amount)
        return Decimal(repr(amount))
    if isinstance(amount, int):
        return Decimal(amount)
    if isinstance(amount, Decimal):
        value = amount
    elif isinstance(amount, str):
        try:
            value = Decimal(amount.strip())
        except InvalidOperation as e:
            raise InvalidAmount(
                f"Not a numeric amount: {amount!r}", amount=amount
            ) from e
    else:
        raise InvalidAmount(
            f"Unsupported amount type {type(amount).__name__}", amount=amount
        )

    if not value.is_finite():
        raise InvalidAmount(f"Amount must be finite, got {amount!r}", amount=amount)
    return value


def to_native(amount: DecimalLike, decimals: int) -> int:
    """
    Convert a decimal display amount to native integer units.

    Args:
        amount: Non-negative decimal amount (e.g. 1000.0 USDC)
        decimals: Token decimals (e.g. 6 for USDC)

    Returns:
        round(amount * 10**decimals) as int

    Raises:
        InvalidAmount: If amount is negative, non-finite, non-numeric, or the
            scaled value does not fit in uint256
    """
    _check_decimals(decimals)
    value = _as_decimal(amount)

    if value < 0:
        raise InvalidAmount(
            f"Amount must be non-negative, got {amount!r}",
            amount=amount,
            decimals=decimals,
        )

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        scaled = value.scaleb(decimals)
        if scaled > UINT256_MAX:
            raise InvalidAmount(
                f"Amount {amount!r} with {decimals} decimals overflows uint256",
                amount=amount,
                decimals=decimals,
            )
        native = int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))

    if native > UINT256_MAX:
        raise InvalidAmount(
            f"Amount {amount!r} with {decimals} decimals overflows uint256",
            amount=amount,
            decimals=decimals,
        )
    return native


def _check_native(amount: int, decimals: int) -> None:
    _check_decimals(decimals)
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(
            f"Native amount must be an int, got {type(amount).__name__}",
            amount=amount,
            decimals=decimals,
        )
    if amount < 0 or amount > UINT256_MAX:
        raise InvalidAmount(
            f"Native amount out of uint256 range: {amount}",
            amount=amount,
            decimals=decimals,
        )


def from_native(amount: int, decimals: int) -> float:
    """
    Convert native integer units to a float display amount.

    The integer is split into hi * 10**18 + lo so large balances do not lose
    their low digits before scaling.
    """
    _check_native(amount, decimals)
    scale = 10**decimals
    hi, lo = divmod(amount, _SPLIT)
    return hi * 1e18 / scale + lo / scale


def format_native(amount: int, decimals: int) -> str:
    """Exact decimal string for a native amount, e.g. (1500000, 6) -> '1.500000'."""
    _check_native(amount, decimals)
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return f"{Decimal(amount).scaleb(-decimals):f}"
