from .settings import (
    Settings,
    AzureSettings,
    BenchmarkSettings,
    AnalyticsSettings,
    PipelineSettings,
)

__all__ = [
    "Settings",
    "AzureSettings",
    "BenchmarkSettings",
    "AnalyticsSettings",
    "PipelineSettings",
]
