"""Candidate discovery contract v1: shared types for channel records, filters and web search results."""

from src.contracts.discovery_v1 import (
    NOT_SPECIFIED,
    UNSPECIFIED,
    AggregatedSearchResponse,
    BackendDescriptor,
    CandidateFilters,
    CandidateRecord,
    ChannelMessage,
    RawSearchHit,
    SearchResultItem,
    SeniorityLevel,
)

__all__ = [
    "NOT_SPECIFIED",
    "UNSPECIFIED",
    "AggregatedSearchResponse",
    "BackendDescriptor",
    "CandidateFilters",
    "CandidateRecord",
    "ChannelMessage",
    "RawSearchHit",
    "SearchResultItem",
    "SeniorityLevel",
]
