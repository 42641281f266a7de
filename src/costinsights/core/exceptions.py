"""Custom exceptions for the cost insights pipeline."""

from typing import Optional, Dict, Any


class CostInsightsException(Exception):
    """Base exception for the cost insights pipeline."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ClientConnectionException(CostInsightsException):
    """Raised when client connections fail."""

    def __init__(self, client_type: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.client_type = client_type
        super().__init__(f"{client_type} connection failed: {message}", details)


class DataFetchException(CostInsightsException):
    """Raised when an external data source cannot be read."""

    def __init__(self, source: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.source = source
        super().__init__(f"Data fetch failed for {source}: {message}", details)


class CostDataFetchException(DataFetchException):
    """Raised when the primary cost feed fails; no report is assembled."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("cost_data", message, details)


class DataValidationException(CostInsightsException):
    """Raised when data validation fails."""

    def __init__(self, field: str, value: Any, message: str):
        self.field = field
        self.value = value
        super().__init__(f"Validation failed for {field}: {message}")


class ConfigurationException(CostInsightsException):
    """Raised when configuration is invalid."""
    pass
