"""Web candidate search: transports, query normalization, concurrent aggregation."""

from src.discovery.search.aggregator import BackendOutcome, MultiSourceSearchAggregator
from src.discovery.search.constants import DEFAULT_BACKENDS
from src.discovery.search.interface import SearchTransport

__all__ = [
    "BackendOutcome",
    "DEFAULT_BACKENDS",
    "MultiSourceSearchAggregator",
    "SearchTransport",
]
