"""
Common helpers for the round-trip arbitrage scanner.

Logging is configured once per process by logging_config.setup(); modules
only ask for named loggers here.
"""

import logging
from typing import Any, Dict, Optional, Union


# Logging utilities
def get_logger(
    name: str,
    level: Optional[Union[str, int]] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> Union[logging.Logger, logging.LoggerAdapter]:
    """
    Get a module logger, optionally bound to extra context.

    Args:
        name: Logger name (typically __name__)
        level: Logging level override for this logger
        extra: Context fields attached to every record (e.g. {"pair": "USDC/WETH"})

    Returns:
        Logger, or LoggerAdapter when extra context is given
    """
    logger = logging.getLogger(name)

    if level is not None:
        logger.setLevel(level)

    if extra:
        return logging.LoggerAdapter(logger, dict(extra))

    return logger


# Formatting utilities
def format_duration(seconds: float) -> str:
    """Format duration in seconds to human-readable string."""
    if seconds < 60:
        return f"{seconds:.2f}s"
    elif seconds < 3600:
        minutes = seconds / 60
        return f"{minutes:.1f}m"
    else:
        hours = seconds / 3600
        return f"{hours:.1f}h"


def format_signed(value: float, places: int = 4) -> str:
    """
    Format a profit figure with an explicit sign.

    Examples:
        >>> format_signed(8.0)
        '+8.0000'
        >>> format_signed(-1.0, places=2)
        '-1.00'
    """
    if value >= 0:
        return f"+{value:.{places}f}"
    return f"{value:.{places}f}"
