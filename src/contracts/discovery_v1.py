"""Candidate Discovery Contract v1.

Defines the canonical types exchanged between the discovery components:
  - Channel input (ChannelMessage) and the parsed record (CandidateRecord)
  - Search backend input/output (BackendDescriptor, RawSearchHit, SearchResultItem)
  - Request/response shapes (CandidateFilters, AggregatedSearchResponse)

Records are frozen: the extractor is the only producer, everything downstream
reads them.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Record sentinel for name/position that could not be extracted.
UNSPECIFIED = "unspecified"
# Placeholder printed for any absent field.
NOT_SPECIFIED = "not specified"

# ---------------------------------------------------------------------------
# Seniority vocabulary
# ---------------------------------------------------------------------------


class SeniorityLevel(StrEnum):
    INTERN = "Intern"
    TRAINEE = "Trainee"
    JUNIOR = "Junior"
    MIDDLE = "Middle"
    SENIOR = "Senior"
    LEAD = "Lead"


# ---------------------------------------------------------------------------
# Channel side
# ---------------------------------------------------------------------------


class ChannelMessage(BaseModel):
    """One message as returned by a channel reader."""

    text: str = Field(default="")
    timestamp: datetime | None = Field(default=None, description="Publication time, if known")
    message_id: int | None = Field(default=None, description="Channel-local message id")


class CandidateRecord(BaseModel):
    """One parsed candidate signal."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default=UNSPECIFIED)
    position: str = Field(default=UNSPECIFIED)
    level: str | None = Field(default=None, description="Canonical SeniorityLevel value")
    location: str | None = None
    salary_expectation: str | None = Field(default=None, description="Free-form; currency/period not normalized")
    skills: tuple[str, ...] | None = Field(default=None, description="Ordered, may contain duplicates")
    experience: str | None = None
    contacts: str | None = Field(default=None, description="All matched contact patterns, comma-joined")
    source_link: str = Field(description="Deep link back to the originating message")
    captured_at: datetime | None = Field(default=None)
    raw_text: str = Field(description="Original input, verbatim")

    @field_validator("raw_text")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("raw_text must be non-empty")
        return v


class CandidateFilters(BaseModel):
    """Optional, AND-combined filters for a channel search."""

    profession: str | None = None
    level: str | None = None
    location: str | None = None
    force_refresh: bool = False

    @field_validator("profession", "level", "location")
    @classmethod
    def _blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None

    def active(self) -> dict[str, str]:
        """Filters that will actually narrow the result set."""
        out: dict[str, str] = {}
        for key in ("profession", "level", "location"):
            value = getattr(self, key)
            if value:
                out[key] = value
        return out


# ---------------------------------------------------------------------------
# Web search side
# ---------------------------------------------------------------------------


class BackendDescriptor(BaseModel):
    """A named external search source with the domain used to scope queries."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Display name, e.g. 'HeadHunter'")
    domain: str = Field(description="Site scope, e.g. 'hh.ru'")
    icon: str = Field(default="🔎", description="Presentation hint")


class RawSearchHit(BaseModel):
    """One hit as returned by a search transport, before provenance tagging."""

    title: str = ""
    snippet: str = ""
    link: str = ""


class SearchResultItem(BaseModel):
    """One external search hit tagged with the backend that produced it."""

    source_name: str
    source_domain: str
    source_icon: str = ""
    title: str = ""
    snippet: str = ""
    link: str = ""

    @classmethod
    def from_hit(cls, hit: RawSearchHit, backend: BackendDescriptor) -> SearchResultItem:
        return cls(
            source_name=backend.name,
            source_domain=backend.domain,
            source_icon=backend.icon,
            title=hit.title,
            snippet=hit.snippet,
            link=hit.link,
        )


class AggregatedSearchResponse(BaseModel):
    """Merged output of one fan-out over all backends."""

    raw_query: str = ""
    query: str = Field(default="", description="Normalized query sent to the backends")
    items: list[SearchResultItem] = Field(default_factory=list, description="Backend-descriptor order")
    per_backend_counts: dict[str, int] = Field(default_factory=dict)
    errors: list[str] = Field(default_factory=list, description="Per-backend failures")
    failed_backends: list[str] = Field(default_factory=list, description="Names of backends that errored")
    backend_icons: dict[str, str] = Field(default_factory=dict, description="Backend name -> icon, every queried backend")

    @property
    def total(self) -> int:
        return len(self.items)
