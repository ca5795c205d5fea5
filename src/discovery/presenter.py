"""Plain-text summaries of discovery results.

Pure formatting, no I/O. Section order is fixed: header, stats, grouped
items, truncation notices. Optional fields that are absent are printed as
NOT_SPECIFIED instead of being left out, so the layout is the same for every
record.
"""

from collections.abc import Sequence

from src.contracts.discovery_v1 import (
    NOT_SPECIFIED,
    UNSPECIFIED,
    AggregatedSearchResponse,
    CandidateFilters,
    CandidateRecord,
    SearchResultItem,
)
from src.discovery.search.constants import GLOBAL_RESULTS_NOTE_THRESHOLD, MAX_ITEMS_PER_BACKEND

MAX_CANDIDATES_SHOWN = 10
MAX_SKILLS_SHOWN = 5
MAX_SNIPPET_CHARS = 200


def _or_placeholder(value: str | None) -> str:
    if value is None or not str(value).strip() or value == UNSPECIFIED:
        return NOT_SPECIFIED
    return str(value)


def _format_skills(skills: Sequence[str] | None) -> str:
    if not skills:
        return NOT_SPECIFIED
    shown = ", ".join(skills[:MAX_SKILLS_SHOWN])
    if len(skills) > MAX_SKILLS_SHOWN:
        shown += f" (+{len(skills) - MAX_SKILLS_SHOWN} more)"
    return shown


def format_candidate(index: int, record: CandidateRecord) -> list[str]:
    captured = record.captured_at.strftime("%Y-%m-%d %H:%M") if record.captured_at else NOT_SPECIFIED
    return [
        f"{index}. {_or_placeholder(record.name)}",
        f"   Position: {_or_placeholder(record.position)}",
        f"   Level: {_or_placeholder(record.level)}",
        f"   Location: {_or_placeholder(record.location)}",
        f"   Salary: {_or_placeholder(record.salary_expectation)}",
        f"   Experience: {_or_placeholder(record.experience)}",
        f"   Skills: {_format_skills(record.skills)}",
        f"   Contacts: {_or_placeholder(record.contacts)}",
        f"   Link: {record.source_link}",
        f"   Captured: {captured}",
    ]


def format_filters(filters: CandidateFilters | None) -> str:
    filters = filters or CandidateFilters()
    return (
        f"Filters: profession={_or_placeholder(filters.profession)}, "
        f"level={_or_placeholder(filters.level)}, "
        f"location={_or_placeholder(filters.location)}"
    )


def present_candidates(
    records: Sequence[CandidateRecord],
    filters: CandidateFilters | None = None,
    *,
    channel: str = "",
    limit: int = MAX_CANDIDATES_SHOWN,
) -> str:
    source = f"@{channel}" if channel else "the channel"
    parts: list[str] = [f"Candidates found in {source}: {len(records)}", format_filters(filters)]

    if not records:
        parts.append("")
        parts.append("No candidates match these filters.")
        parts.append("Try broader filters, or refresh later: new posts arrive regularly.")
        return "\n".join(parts)

    shown = list(records)[: max(0, limit)]
    for i, record in enumerate(shown, 1):
        parts.append("")
        parts.extend(format_candidate(i, record))

    hidden = len(records) - len(shown)
    if hidden > 0:
        parts.append("")
        parts.append(f"... and {hidden} more candidate(s)")
    return "\n".join(parts)


def _format_item(index: int, item: SearchResultItem) -> list[str]:
    lines = [f"  {index}. {_or_placeholder(item.title)}"]
    snippet = (item.snippet or "").replace("\n", " ").strip()
    if snippet:
        if len(snippet) > MAX_SNIPPET_CHARS:
            snippet = snippet[:MAX_SNIPPET_CHARS].rstrip() + "..."
        lines.append(f"     {snippet}")
    lines.append(f"     {_or_placeholder(item.link)}")
    return lines


def present_search(response: AggregatedSearchResponse) -> str:
    total = response.total
    parts: list[str] = [f'Web search: {total} results for "{response.query}"']

    failed = set(response.failed_backends)
    grouped: dict[str, list[SearchResultItem]] = {}
    for item in response.items:
        grouped.setdefault(item.source_name, []).append(item)
    icons = {item.source_name: item.source_icon for item in response.items}
    icons.update(response.backend_icons)

    parts.append("Sources:")
    for name, count in response.per_backend_counts.items():
        status = " (failed)" if name in failed else ""
        icon = icons.get(name, "")
        label = f"{icon} {name}".strip()
        parts.append(f"  {label}: {count}{status}")

    if not response.items:
        parts.append("")
        parts.append("No results found.")
        return "\n".join(parts)

    for name, items in grouped.items():
        parts.append("")
        parts.append(f"{icons.get(name, '')} {name}".strip())
        for i, item in enumerate(items[:MAX_ITEMS_PER_BACKEND], 1):
            parts.extend(_format_item(i, item))
        remainder = len(items) - MAX_ITEMS_PER_BACKEND
        if remainder > 0:
            parts.append(f"  ... and {remainder} more from {name}")

    if total > GLOBAL_RESULTS_NOTE_THRESHOLD:
        parts.append("")
        parts.append(
            f"Showing at most {MAX_ITEMS_PER_BACKEND} results per source out of {total} in total."
        )
    return "\n".join(parts)


def manual_instructions(channel: str) -> str:
    url = f"https://t.me/{channel}" if channel else "https://t.me"
    return (
        f"How to follow the channel manually:\n"
        f"1. Open {url}\n"
        f"2. Subscribe to get new posts\n"
        f"3. Read new resumes in the channel feed\n\n"
        f"To read it automatically set TELEGRAM_CHANNEL in .env to a public channel name "
        f"and restart the service."
    )


def present_unavailable(reason: str, instructions: str = "") -> str:
    parts = [f"Unavailable: {reason}"]
    if instructions:
        parts.append("")
        parts.append(instructions)
    return "\n".join(parts)
