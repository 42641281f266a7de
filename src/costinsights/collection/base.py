"""Base collector interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Any, Optional
import structlog
from datetime import datetime, timezone

logger = structlog.get_logger(__name__)

SUCCESS = "success"
FAILED = "failed"
TIMEOUT = "timeout"


@dataclass
class CollectionResult:
    """Outcome of one external fetch. Failed or timed-out fetches carry the collector's empty default."""

    type: str
    status: str
    data: Any = None
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == SUCCESS


class BaseCollector(ABC):
    """Abstract base class for all external fetches feeding the report."""

    # The report cannot be built without a primary collector's data
    primary = False

    def __init__(self, client, config: Optional[Dict[str, Any]] = None):
        self.client = client
        self.config = config or {}
        self.logger = logger.bind(collector=self.__class__.__name__)
        self._collection_metadata = {
            'start_time': None,
            'end_time': None,
            'duration_seconds': None,
            'items_collected': 0,
            'errors': []
        }

    @abstractmethod
    async def collect(self) -> Any:
        """Perform the fetch."""
        pass

    @abstractmethod
    def get_collection_type(self) -> str:
        """Get the type of data this collector fetches."""
        pass

    def empty_result(self) -> Any:
        """Value handed downstream when the fetch fails."""
        return []

    def failure(self, status: str, error: str) -> CollectionResult:
        return CollectionResult(
            type=self.get_collection_type(),
            status=status,
            data=self.empty_result(),
            error=error,
            metadata={'errors': [error]}
        )

    async def collect_with_metadata(self) -> CollectionResult:
        """Perform the fetch with metadata tracking."""
        self._collection_metadata['start_time'] = datetime.now(timezone.utc)

        try:
            results = await self.collect()
            if results is None:
                self._collection_metadata['items_collected'] = 0
            elif hasattr(results, '__len__'):
                self._collection_metadata['items_collected'] = len(results)
            else:
                self._collection_metadata['items_collected'] = 1
            status = SUCCESS
            error = None

        except Exception as e:
            self.logger.error(f"Collection failed for {self.get_collection_type()}", error=str(e))
            results = self.empty_result()
            status = FAILED
            error = str(e)
            self._collection_metadata['errors'].append(error)

        finally:
            self._collection_metadata['end_time'] = datetime.now(timezone.utc)
            if self._collection_metadata['start_time']:
                duration = self._collection_metadata['end_time'] - self._collection_metadata['start_time']
                self._collection_metadata['duration_seconds'] = duration.total_seconds()

        return CollectionResult(
            type=self.get_collection_type(),
            status=status,
            data=results,
            error=error,
            metadata=self._collection_metadata.copy()
        )
