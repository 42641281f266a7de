from .azure.client_factory import AzureClientFactory
from .benchmark.benchmark_client import BenchmarkClient
from .bundle import ReportClients

__all__ = ["AzureClientFactory", "BenchmarkClient", "ReportClients"]
