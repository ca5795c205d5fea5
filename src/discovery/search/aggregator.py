"""Concurrent fan-out of one candidate query over several search backends.

Each backend gets exactly one request. The requests run concurrently and the
aggregator waits for every one of them to settle; a failing backend turns
into an empty BackendOutcome instead of an exception, so it cannot affect
the others or escape this module.
"""

import asyncio
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field

from src.contracts.discovery_v1 import (
    AggregatedSearchResponse,
    BackendDescriptor,
    SearchResultItem,
)
from src.core.config import config
from src.core.logger import logger as event_logger
from src.discovery.errors import ConfigurationMissing
from src.discovery.search.constants import DEFAULT_BACKENDS
from src.discovery.search.interface import SearchTransport
from src.discovery.search.query import normalize_query, scope_to_domain

logger = logging.getLogger(__name__)


@dataclass
class BackendOutcome:
    """Settled result of one backend request."""

    backend: BackendDescriptor
    items: list[SearchResultItem] = field(default_factory=list)
    error: str | None = None
    elapsed_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


class MultiSourceSearchAggregator:
    def __init__(
        self,
        transport: SearchTransport,
        backends: Sequence[BackendDescriptor] | None = None,
        *,
        locale: str | None = None,
        result_count: int | None = None,
    ):
        self._transport = transport
        self._backends = tuple(backends) if backends is not None else DEFAULT_BACKENDS
        self._locale = locale or config.search_locale
        self._result_count = result_count if result_count is not None else config.search_result_count

    @property
    def backends(self) -> tuple[BackendDescriptor, ...]:
        return self._backends

    @property
    def is_configured(self) -> bool:
        return self._transport.is_configured

    async def _query_backend(self, query: str, backend: BackendDescriptor) -> BackendOutcome:
        t0 = time.monotonic()
        try:
            hits = await self._transport.query(
                scope_to_domain(query, backend.domain),
                self._locale,
                self._result_count,
            )
        except Exception as e:
            elapsed = time.monotonic() - t0
            event_logger.backend_result(
                backend.name, 0, False, duration_seconds=elapsed, error_reason=str(e)
            )
            return BackendOutcome(
                backend=backend,
                error=f"{backend.name}: {e!s}",
                elapsed_ms=round(elapsed * 1000, 1),
            )
        elapsed = time.monotonic() - t0
        items = [SearchResultItem.from_hit(hit, backend) for hit in hits]
        event_logger.backend_result(backend.name, len(items), True, duration_seconds=elapsed)
        return BackendOutcome(backend=backend, items=items, elapsed_ms=round(elapsed * 1000, 1))

    async def fan_out(
        self, query: str, backends: Sequence[BackendDescriptor]
    ) -> list[BackendOutcome]:
        """One request per backend, all concurrent; returns outcomes in backend order."""
        tasks = [self._query_backend(query, b) for b in backends]
        settled = await asyncio.gather(*tasks, return_exceptions=True)
        outcomes: list[BackendOutcome] = []
        for backend, result in zip(backends, settled):
            if isinstance(result, BaseException):
                # Only BaseException (e.g. cancellation) gets past _query_backend.
                outcomes.append(BackendOutcome(backend=backend, error=f"{backend.name}: {result!s}"))
                continue
            outcomes.append(result)
        return outcomes

    async def search(
        self,
        raw_query: str,
        backends: Sequence[BackendDescriptor] | None = None,
    ) -> AggregatedSearchResponse:
        if not self.is_configured:
            raise ConfigurationMissing("SEARXNG_URL", "web candidate search is unavailable")
        selected = tuple(backends) if backends is not None else self._backends
        normalized = normalize_query(raw_query)
        logger.info(
            "Web candidate search: query=%r targeted=%s backends=%s",
            normalized.query,
            normalized.is_targeted,
            [b.name for b in selected],
        )

        outcomes = await self.fan_out(normalized.query, selected)

        items: list[SearchResultItem] = []
        counts: dict[str, int] = {}
        errors: list[str] = []
        failed: list[str] = []
        icons: dict[str, str] = {}
        for outcome in outcomes:
            items.extend(outcome.items)
            counts[outcome.backend.name] = len(outcome.items)
            icons[outcome.backend.name] = outcome.backend.icon
            if outcome.error:
                errors.append(outcome.error)
                failed.append(outcome.backend.name)

        logger.info(
            "Web candidate search: %s results, %s/%s backends failed",
            len(items),
            len(errors),
            len(outcomes),
        )
        return AggregatedSearchResponse(
            raw_query=raw_query,
            query=normalized.query,
            items=items,
            per_backend_counts=counts,
            errors=errors,
            failed_backends=failed,
            backend_icons=icons,
        )
