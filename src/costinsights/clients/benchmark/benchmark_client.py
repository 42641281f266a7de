# src/costinsights/clients/benchmark/benchmark_client.py
"""HTTP client for the industry and multi-cloud benchmark feeds."""

from typing import Dict, Any, Iterable, List, Optional
import httpx
import structlog
from pydantic import ValidationError

from costinsights.analytics.benchmarking import (
    fallback_industry_benchmarks,
    fallback_multi_cloud_benchmarks,
)
from costinsights.core.base_client import BaseClient
from costinsights.models.report_models import IndustryBenchmark, MultiCloudBenchmark

logger = structlog.get_logger(__name__)


class BenchmarkClient(BaseClient):
    """
    Benchmark feed client.

    Feed problems never propagate: a missing API key, a transport error, a
    non-2xx response or a malformed payload all fall back to the embedded tables.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: str = "https://api.cloudbenchmarking.com/v1/azure",
        region: str = "south-asia",
        industry: str = "IT",
        tier: str = "production",
        multicloud_api_url: Optional[str] = None,
        timeout_seconds: float = 20.0,
        config: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(config, "BenchmarkClient")
        self.api_key = api_key
        self.api_url = api_url
        self.region = region
        self.industry = industry
        self.tier = tier
        self.multicloud_api_url = multicloud_api_url
        self.timeout_seconds = timeout_seconds
        self._http: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_settings(cls, settings) -> "BenchmarkClient":
        return cls(
            api_key=settings.api_key,
            api_url=settings.api_url,
            region=settings.region,
            industry=settings.industry,
            tier=settings.tier,
            multicloud_api_url=settings.multicloud_api_url,
            timeout_seconds=settings.timeout_seconds,
        )

    async def connect(self) -> None:
        self._http = httpx.AsyncClient(timeout=self.timeout_seconds)
        self._connected = True
        self.logger.info("Benchmark client ready", live_feed=bool(self.api_key))

    async def disconnect(self) -> None:
        if self._http is not None:
            await self._http.aclose()
            self._http = None
        self._connected = False

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

    async def _post(self, url: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if self._http is None:
            await self.connect()
        response = await self._http.post(url, json=payload, headers=self._headers())
        response.raise_for_status()
        return response.json()

    async def fetch_industry_benchmarks(self, service_names: Iterable[str]) -> List[IndustryBenchmark]:
        names = list(dict.fromkeys(service_names))
        if not self.api_key:
            return fallback_industry_benchmarks(names)

        payload = {
            "services": names,
            "region": self.region,
            "industry": self.industry,
            "tier": self.tier,
        }
        try:
            data = await self._post(self.api_url, payload)
            benchmarks = [IndustryBenchmark.model_validate(item) for item in data["benchmarks"]]
        except (httpx.HTTPError, ValueError, KeyError, TypeError, ValidationError) as e:
            self.logger.warning("Using fallback benchmark data", error=str(e))
            return fallback_industry_benchmarks(names)

        self.logger.info(f"Fetched {len(benchmarks)} industry benchmarks")
        return benchmarks

    async def fetch_multi_cloud_benchmarks(self, service_names: Iterable[str]) -> List[MultiCloudBenchmark]:
        names = list(dict.fromkeys(service_names))
        if not (self.api_key and self.multicloud_api_url):
            return fallback_multi_cloud_benchmarks(names)

        try:
            data = await self._post(self.multicloud_api_url, {"services": names, "region": self.region})
            benchmarks = [MultiCloudBenchmark.model_validate(item) for item in data["benchmarks"]]
        except (httpx.HTTPError, ValueError, KeyError, TypeError, ValidationError) as e:
            self.logger.warning("Using fallback multi-cloud data", error=str(e))
            return fallback_multi_cloud_benchmarks(names)

        self.logger.info(f"Fetched {len(benchmarks)} multi-cloud estimates")
        return benchmarks
