from .exceptions import *
from .base_client import BaseClient
from .utils import *

__all__ = [
    "BaseClient",
    "CostInsightsException",
    "ClientConnectionException",
    "DataFetchException",
    "CostDataFetchException",
    "DataValidationException",
    "ConfigurationException",
    "retry_with_backoff",
    "setup_logging",
    "parse_cost",
    "parse_usage_date",
    "format_currency",
    "gather_with_concurrency",
]
