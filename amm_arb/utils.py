"""
Common helpers: logging, JSON serialization and number formatting.
"""

import json
import logging
from datetime import datetime, timezone
from decimal import Context, Decimal, localcontext
from pathlib import Path
from typing import Any, Optional, Union


# Timestamp utilities
def utc_now_iso() -> str:
    """Current UTC time as an ISO 8601 string."""
    return datetime.now(tz=timezone.utc).isoformat()


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


# JSON utilities
def safe_json_dump(data: Any, **kwargs) -> str:
    """
    Serialize data to JSON with sensible defaults.

    Decimals are written as strings so no digits are lost; plain ints stay
    JSON integers.

    Args:
        data: Data to serialize
        **kwargs: Additional arguments to json.dumps

    Returns:
        JSON string
    """
    defaults = {"ensure_ascii": False, "indent": 2, "default": _json_default_handler}
    defaults.update(kwargs)
    return json.dumps(data, **defaults)


def _json_default_handler(obj: Any) -> Any:
    """Default JSON serialization handler for custom types."""
    if isinstance(obj, Decimal):
        return str(obj)
    elif isinstance(obj, datetime):
        return obj.isoformat()
    elif hasattr(obj, "to_dict"):
        return obj.to_dict()
    else:
        return str(obj)


def ensure_path_exists(path: Union[str, Path], is_file: bool = False) -> Path:
    """
    Ensure a path exists, creating directories if necessary.

    Args:
        path: Path to ensure exists
        is_file: If True, create parent directories for file path

    Returns:
        Path object
    """
    path_obj = Path(path)

    if is_file:
        path_obj.parent.mkdir(parents=True, exist_ok=True)
    else:
        path_obj.mkdir(parents=True, exist_ok=True)

    return path_obj


# Math utilities

# Precision for every derived amount, independent of the calling thread's
# decimal context
DECIMAL_CONTEXT = Context(prec=50)


def calculate_percentage(value: Decimal, total: Decimal) -> Decimal:
    """Calculate percentage with zero-division protection."""
    if total == 0:
        return Decimal(0)
    with localcontext(DECIMAL_CONTEXT):
        return (Decimal(value) / Decimal(total)) * Decimal(100)


def mean(values) -> Decimal:
    """Arithmetic mean of Decimals (0 for an empty sequence)."""
    values = [Decimal(v) for v in values]
    if not values:
        return Decimal(0)
    with localcontext(DECIMAL_CONTEXT):
        return sum(values, Decimal(0)) / Decimal(len(values))


# Formatting utilities
def format_number(num: Union[int, float, Decimal]) -> str:
    """
    Compact human-readable amount.

    Examples:
        >>> format_number(1500)
        '1.50K'
        >>> format_number(2_500_000)
        '2.50M'
        >>> format_number(12)
        '12.00'
    """
    num = float(num)
    if abs(num) >= 1e9:
        return f"{num / 1e9:.2f}B"
    if abs(num) >= 1e6:
        return f"{num / 1e6:.2f}M"
    if abs(num) >= 1e3:
        return f"{num / 1e3:.2f}K"
    return f"{num:.2f}"


def format_percent(pct: Union[float, Decimal], places: int = 4) -> str:
    """Format a percent value with a sign prefix, e.g. '+1.2345%'."""
    pct = float(pct)
    sign = "+" if pct >= 0 else ""
    return f"{sign}{pct:.{places}f}%"


# Logging utilities
def get_logger(name: str, level: Optional[Union[str, int]] = None) -> logging.Logger:
    """
    Get a module logger.

    Handlers and formatting are configured once by
    ``amm_arb.logging_config.setup``; library modules only emit records.

    Args:
        name: Logger name (typically __name__)
        level: Optional level to set on this logger

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger
