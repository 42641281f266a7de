"""Utility functions and decorators."""

import asyncio
import logging
import logging.config
import math
import re
import structlog
import yaml
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union
from tenacity import retry, stop_after_attempt, wait_exponential

_NUMBER = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def retry_with_backoff(
    max_retries: int = 3,
    backoff_factor: float = 1.5,
    max_wait: float = 60.0
):
    """Decorator for retry with exponential backoff."""
    return retry(
        stop=stop_after_attempt(max_retries),
        wait=wait_exponential(multiplier=backoff_factor, max=max_wait),
        reraise=True
    )


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    config_path: Optional[Union[str, Path]] = None
) -> None:
    """Setup structured logging configuration."""
    if config_path and Path(config_path).exists():
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
        logging.config.dictConfig(config)
    else:
        logging.basicConfig(
            level=getattr(logging, log_level.upper()),
            format='%(message)s'
        )

    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def safe_get(dictionary: Dict[str, Any], key: str, default: Any = None) -> Any:
    """Safely get a value from a nested dictionary using dot notation."""
    keys = key.split('.')
    value = dictionary

    try:
        for k in keys:
            value = value[k]
        return value
    except (KeyError, TypeError, IndexError):
        return default


def parse_cost(raw: Any) -> float:
    """Parse a cost given as a number or a string with symbols; 0.0 when unparsable."""
    if raw is None or isinstance(raw, bool):
        return 0.0

    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        try:
            value = float(text)
        except ValueError:
            # Currency symbols and thousands separators around the amount
            match = _NUMBER.search(text.replace(',', ''))
            if not match:
                return 0.0
            value = float(match.group(0))

    if math.isnan(value) or math.isinf(value):
        return 0.0
    return value


def parse_usage_date(usage_date_raw: Any) -> Optional[date]:
    """Parse a usage date from YYYYMMDD (int or str), ISO strings or date objects."""
    if usage_date_raw is None or usage_date_raw == "":
        return None

    try:
        if isinstance(usage_date_raw, datetime):
            return usage_date_raw.date()
        if isinstance(usage_date_raw, date):
            return usage_date_raw

        if isinstance(usage_date_raw, (int, float)):
            usage_date_raw = str(int(usage_date_raw))

        if isinstance(usage_date_raw, str):
            text = usage_date_raw.strip()
            if len(text) == 8 and text.isdigit():
                return datetime.strptime(text, '%Y%m%d').date()
            if 'T' in text:
                return datetime.fromisoformat(text.replace('Z', '+00:00')).date()
            if '-' in text:
                return datetime.strptime(text, '%Y-%m-%d').date()

        return None

    except (ValueError, TypeError):
        return None


def format_currency(amount: float, symbol: str = "₹") -> str:
    """Format an amount with a currency symbol and two decimals."""
    return f"{symbol}{amount:.2f}"


async def gather_with_concurrency(
    coros: list,
    max_concurrency: int = 10,
    return_exceptions: bool = True
) -> list:
    """Execute coroutines with limited concurrency."""
    semaphore = asyncio.Semaphore(max_concurrency)

    async def limited_coro(coro):
        async with semaphore:
            return await coro

    limited_coros = [limited_coro(coro) for coro in coros]
    return await asyncio.gather(*limited_coros, return_exceptions=return_exceptions)
