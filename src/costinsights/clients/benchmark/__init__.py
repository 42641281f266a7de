"""Benchmark feed client."""

from .benchmark_client import BenchmarkClient

__all__ = ["BenchmarkClient"]
