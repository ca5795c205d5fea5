"""Candidate discovery: channel ingestion, web search aggregation, presentation."""

from src.discovery.cache import CacheSnapshot, CacheState, ChannelIngestionCache
from src.discovery.extraction import TextRecordExtractor
from src.discovery.search import MultiSourceSearchAggregator

__all__ = [
    "CacheSnapshot",
    "CacheState",
    "ChannelIngestionCache",
    "MultiSourceSearchAggregator",
    "TextRecordExtractor",
]
