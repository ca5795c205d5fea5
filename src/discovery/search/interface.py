"""Standard interface for search transports used by the aggregator."""

from abc import ABC, abstractmethod

from src.contracts.discovery_v1 import RawSearchHit


class SearchTransport(ABC):
    """Executes one already-scoped query against an external search engine."""

    @abstractmethod
    async def query(self, backend_query: str, locale: str, result_count: int) -> list[RawSearchHit]:
        """Return up to `result_count` hits in engine order.

        Per-request timeouts are enforced here, not by the caller.
        """

    @property
    def is_configured(self) -> bool:
        return True
