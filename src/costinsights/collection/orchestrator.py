"""Collection orchestrator for running external fetches concurrently."""

import asyncio
from typing import List, Dict, Optional
import structlog
from datetime import datetime, timezone

from costinsights.core.utils import gather_with_concurrency
from .base import BaseCollector, CollectionResult, FAILED, SUCCESS, TIMEOUT

logger = structlog.get_logger(__name__)


class CollectionOrchestrator:
    """Fans out collectors under a concurrency bound and a per-collector timeout."""

    def __init__(self,
                 collectors: List[BaseCollector],
                 max_concurrency: int = 5,
                 timeout_seconds: Optional[float] = None):
        self.collectors = collectors
        self.max_concurrency = max_concurrency
        self.timeout_seconds = timeout_seconds
        self.logger = logger.bind(orchestrator="collection")

    async def run(self) -> Dict[str, CollectionResult]:
        """Run all collectors; one result per collector type, never raises for a collector failure."""
        start_time = datetime.now(timezone.utc)

        self.logger.info(f"Starting collection with {len(self.collectors)} collectors")

        tasks = [
            self._run_collector_with_timeout(collector)
            for collector in self.collectors
        ]

        results = await gather_with_concurrency(
            tasks,
            max_concurrency=self.max_concurrency,
            return_exceptions=True
        )

        collected = {}
        for collector, result in zip(self.collectors, results):
            if isinstance(result, BaseException):
                result = collector.failure(FAILED, str(result))
            collected[result.type] = result

        duration = (datetime.now(timezone.utc) - start_time).total_seconds()
        successful = sum(1 for r in collected.values() if r.status == SUCCESS)
        self.logger.info(
            f"Collection completed in {duration:.2f}s",
            successful=successful,
            failed=len(collected) - successful
        )

        return collected

    async def _run_collector_with_timeout(self, collector: BaseCollector) -> CollectionResult:
        """Run a single collector with timeout."""
        try:
            if self.timeout_seconds:
                return await asyncio.wait_for(
                    collector.collect_with_metadata(),
                    timeout=self.timeout_seconds
                )
            else:
                return await collector.collect_with_metadata()

        except asyncio.TimeoutError:
            self.logger.warning(f"Collection timed out for {collector.get_collection_type()}")
            return collector.failure(TIMEOUT, f"Collection timed out after {self.timeout_seconds} seconds")
        except Exception as e:
            return collector.failure(FAILED, str(e))
