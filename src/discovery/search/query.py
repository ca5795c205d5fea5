"""Query normalization for web candidate search.

Labelled hints ("skills: ...", "должность: ...") are turned into a targeted
keyword query; anything else has its trigger phrase stripped and is used
as written.
"""

import re
from dataclasses import dataclass, field

from src.discovery.search.constants import MIN_QUERY_LENGTH

# Hint label -> canonical field. Values run until the next label or end of line.
_HINT_LABELS: dict[str, str] = {
    "должность": "position",
    "позиция": "position",
    "position": "position",
    "навыки": "skills",
    "skills": "skills",
    "skill": "skills",
    "опыт": "experience",
    "experience": "experience",
    "город": "location",
    "локация": "location",
    "location": "location",
}
_HINT_ORDER = ("position", "skills", "experience", "location")

_HINT_LABEL_RE = re.compile(
    r"\b(" + "|".join(sorted(_HINT_LABELS, key=len, reverse=True)) + r")\b\s*:",
    re.IGNORECASE,
)

TRIGGER_PHRASES: tuple[str, ...] = (
    "найди кандидатов",
    "найти кандидатов",
    "поиск кандидатов",
    "ищи кандидатов",
    "найди специалистов",
    "поищи в интернете",
    "найди в интернете",
    "поиск в интернете",
    "find candidates",
    "search candidates",
    "look for candidates",
    "search online",
    "search the web",
)
_TRIGGER_RE = re.compile(
    "|".join(re.escape(p) for p in sorted(TRIGGER_PHRASES, key=len, reverse=True)),
    re.IGNORECASE,
)
_EDGE_PUNCT = " \t\n:;,.!?-–—"


@dataclass
class NormalizedQuery:
    raw: str
    query: str
    hints: dict[str, str] = field(default_factory=dict)

    @property
    def is_targeted(self) -> bool:
        return bool(self.hints)


def extract_hints(text: str) -> dict[str, str]:
    """Map of canonical field -> value for every labelled hint in text (first label wins)."""
    matches = list(_HINT_LABEL_RE.finditer(text))
    hints: dict[str, str] = {}
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        value = text[match.end():end].split("\n", 1)[0].strip(_EDGE_PUNCT)
        key = _HINT_LABELS[match.group(1).lower()]
        if value and key not in hints:
            hints[key] = value
    return hints


def strip_triggers(text: str) -> str:
    stripped = _TRIGGER_RE.sub(" ", text)
    return re.sub(r"\s+", " ", stripped).strip(_EDGE_PUNCT)


def normalize_query(raw_query: str) -> NormalizedQuery:
    raw = raw_query or ""
    hints = extract_hints(raw)
    if hints:
        terms = [hints[k].replace(",", " ") for k in _HINT_ORDER if k in hints]
        query = re.sub(r"\s+", " ", " ".join(terms)).strip()
    else:
        query = strip_triggers(raw)
    if len(query) < MIN_QUERY_LENGTH:
        return NormalizedQuery(raw=raw, query=raw, hints=hints)
    return NormalizedQuery(raw=raw, query=query, hints=hints)


def scope_to_domain(query: str, domain: str) -> str:
    return f"{query} site:{domain}" if domain else query
