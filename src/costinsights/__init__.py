"""Azure cost insights: turns raw billing telemetry into a structured cost report."""

__version__ = "0.1.0"
