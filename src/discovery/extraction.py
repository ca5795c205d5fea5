"""Heuristic extraction of candidate records from free-form channel text.

Every field owns an ordered table of (pattern, extractor) rules. Rules are
tried top to bottom and the first one producing a non-empty value wins, so
the order of a table is part of its behaviour: overlapping patterns capture
the same substring differently depending on which runs first.

Nothing here performs I/O and no rule raises; a field that cannot be found
comes back as None (or the UNSPECIFIED sentinel for name/position).
"""

import re
from collections.abc import Callable
from datetime import datetime, timezone

from src.contracts.discovery_v1 import (
    UNSPECIFIED,
    CandidateRecord,
    ChannelMessage,
    SeniorityLevel,
)
from src.core.config import config

Extractor = Callable[[re.Match[str]], str | None]
Rule = tuple[re.Pattern[str], Extractor]

MAX_SKILL_LENGTH = 50

RESUME_MARKERS: tuple[str, ...] = (
    "резюме",
    "ищу работу",
    "рассмотрю предложения",
    "опыт работы",
    "навыки:",
    "resume",
    "looking for work",
    "will consider offers",
    "open to offers",
    "work experience",
    "skills:",
)

POSTING_MARKERS: tuple[str, ...] = (
    "вакансия",
    "требуется",
    "ищем",
    "vacancy",
    "required",
    "hiring",
)

# A label value ends at the first sentence break on its line ("Frontend. Skills: ...").
_SENTENCE_BREAK = re.compile(r"\.[ \t]+")
_SKILL_DELIMITERS = re.compile(r"[,;•\n]")


def _clip(value: str | None) -> str | None:
    if not value:
        return None
    head = _SENTENCE_BREAK.split(value, maxsplit=1)[0]
    head = head.strip().rstrip(".").strip()
    return head or None


def _group(index: int = 1) -> Extractor:
    def extract(match: re.Match[str]) -> str | None:
        return _clip(match.group(index))

    return extract


def _canonical(value: str) -> Extractor:
    def extract(_: re.Match[str]) -> str | None:
        return value

    return extract


def first_match(rules: list[Rule], text: str) -> str | None:
    """Run an ordered rule table against text; first non-empty value wins."""
    for pattern, extractor in rules:
        match = pattern.search(text)
        if not match:
            continue
        value = extractor(match)
        if value:
            return value
    return None


# ---------------------------------------------------------------------------
# labels
# ---------------------------------------------------------------------------


def _label(native: str, latin: str) -> str:
    """Label prefix: Cyrillic labels may omit the colon, Latin ones must have it."""
    return rf"(?:\b(?:{native})\b[ \t]*:?|\b(?:{latin})\b[ \t]*:)[ \t]*"


# ---------------------------------------------------------------------------
# name
# ---------------------------------------------------------------------------

# Role nouns that follow a name without punctuation ("Иван Петров Разработчик").
_ROLE_NOUN = r"(?:Разработчик|Программист|Инженер|Дизайнер|Менеджер|Аналитик|Тестировщик|Тимлид)"
_NAME_WORD = rf"(?!{_ROLE_NOUN}(?![а-яё]))[А-ЯЁ][а-яё]+(?:-[А-ЯЁ][а-яё]+)?"

NAME_RULES: list[Rule] = [
    (
        re.compile(
            rf"(?i:{_label('меня зовут|my name is|имя|фио', 'name')})"
            rf"({_NAME_WORD}(?:[ \t]+{_NAME_WORD}){{0,2}})(?![\w-])"
        ),
        _group(),
    ),
    (re.compile(r"\A\s*([А-ЯЁ][а-яё]+[ \t]+[А-ЯЁ][а-яё]+)(?![\w-])"), _group()),
]

# ---------------------------------------------------------------------------
# position
# ---------------------------------------------------------------------------

POSITION_RULES: list[Rule] = [
    (
        re.compile(
            _label("должность|позиция|специальность", "position") + r"([^\n]+)",
            re.IGNORECASE,
        ),
        _group(),
    ),
    (
        re.compile(
            r"\b(?:Frontend|Backend|Fullstack|Full-stack|React|Vue|Angular|Node\.?js|Python|"
            r"JavaScript|TypeScript|Java|Golang|PHP|DevOps|QA|Mobile|iOS|Android|Designer|UI/UX|"
            r"Product Manager|Project Manager|Analyst|Data Scientist)\b"
            r"(?:[ \t]*(?:разработчик|developer|engineer|инженер|дизайнер|менеджер|аналитик))?",
            re.IGNORECASE,
        ),
        _group(0),
    ),
]

# ---------------------------------------------------------------------------
# level
# ---------------------------------------------------------------------------


_LEVELS = {level.value.lower(): level.value for level in SeniorityLevel}


def _seniority(match: re.Match[str]) -> str | None:
    return _LEVELS.get(match.group(1).lower())


# Leftmost seniority word in the text wins.
LEVEL_RULES: list[Rule] = [
    (
        re.compile(
            r"\b(" + "|".join(level.value for level in SeniorityLevel) + r")\b",
            re.IGNORECASE,
        ),
        _seniority,
    ),
]

# ---------------------------------------------------------------------------
# location
# ---------------------------------------------------------------------------

_CITY_VOCABULARY: list[tuple[str, str]] = [
    (r"Москв[аеуы]|Moscow", "Москва"),
    (r"Санкт-Петербург[аеу]?|СПб|Питер[аеу]?|Saint Petersburg", "Санкт-Петербург"),
    (r"Екатеринбург[аеу]?", "Екатеринбург"),
    (r"Новосибирск[аеу]?", "Новосибирск"),
    (r"Казан[ьи]", "Казань"),
    (r"Нижн(?:ий|ем) Новгород[аеу]?", "Нижний Новгород"),
    (r"Краснодар[аеу]?", "Краснодар"),
    (r"Удал[её]нн?о|Удал[её]нк[аеуи]|Remote", "Удалённо"),
    (r"Релокаци[яюи]|Relocation", "Релокация"),
]

LOCATION_RULES: list[Rule] = [
    (
        re.compile(_label("город|локация", "location|city") + r"([^\n,]+)", re.IGNORECASE),
        _group(),
    ),
] + [
    (re.compile(rf"\b(?:{pattern})\b", re.IGNORECASE), _canonical(canonical))
    for pattern, canonical in _CITY_VOCABULARY
]

# ---------------------------------------------------------------------------
# salary
# ---------------------------------------------------------------------------

_NUMBER = r"(?:\d{1,3}(?:[ \u00a0]\d{3})+|\d+)"
_UNIT = r"(?:[ \t]*(?:k|к|тыс\.?))?"
_CURRENCY = r"(?:[ \t]*(?:руб\.?|₽|rub|usd|\$|€|eur))?"
_NOT_DURATION = r"(?![ \t]*(?:лет|года?|years?|мес))"

SALARY_RULES: list[Rule] = [
    (
        re.compile(_label("зарплата|зп|з/п|оклад", "salary") + r"([^\n]+)", re.IGNORECASE),
        _group(),
    ),
    (
        re.compile(rf"\bот[ \t]*((?:\d{{1,3}}(?:[ \u00a0]\d{{3}})+|\d{{2,}}){_UNIT}{_CURRENCY}){_NOT_DURATION}", re.IGNORECASE),
        _group(),
    ),
    (
        re.compile(
            rf"(?<![\d+\-])(?!(?:19|20)\d{{2}}\b)"
            rf"({_NUMBER}[ \t]*[-–—][ \t]*{_NUMBER}{_UNIT}{_CURRENCY})"
            rf"(?![\d\-]){_NOT_DURATION}",
            re.IGNORECASE,
        ),
        _group(),
    ),
]

# ---------------------------------------------------------------------------
# skills
# ---------------------------------------------------------------------------

SKILLS_SECTION = re.compile(
    _label("навыки|стек|технологии", "navyki|skills|stack|technologies") + r"\s*([^\n]+(?:\n[^\n]+)*)",
    re.IGNORECASE,
)


def split_skills(section: str) -> tuple[str, ...] | None:
    """Split a skills section into trimmed items; run-on fragments are dropped."""
    head = _SENTENCE_BREAK.split(section, maxsplit=1)[0]
    skills: list[str] = []
    for part in _SKILL_DELIMITERS.split(head):
        item = part.strip().strip("-*·–").strip().rstrip(".").strip()
        if 0 < len(item) < MAX_SKILL_LENGTH:
            skills.append(item)
    return tuple(skills) if skills else None


# ---------------------------------------------------------------------------
# experience
# ---------------------------------------------------------------------------

EXPERIENCE_RULES: list[Rule] = [
    (
        re.compile(
            _label("опыт работы|стаж", "work experience|experience") + r"([^\n]+)",
            re.IGNORECASE,
        ),
        _group(),
    ),
    (
        re.compile(r"(\d+(?:[.,]\d+)?\+?[ \t]*(?:лет|года?|years?|yrs?)\b(?:[ \t]+опыта)?)", re.IGNORECASE),
        _group(),
    ),
]

# ---------------------------------------------------------------------------
# contacts (every pattern is independent; all matches are kept)
# ---------------------------------------------------------------------------

CONTACT_PATTERNS: list[re.Pattern[str]] = [
    re.compile(
        r"(?:\b(?:telegram|телеграм|тг|tg)\b[ \t]*:?[ \t]*@?|(?<![\w.@])@)[A-Za-z][A-Za-z0-9_]{4,31}\b",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:\b(?:e-mail|email|почта)\b[ \t]*:?[ \t]*)?[\w.+-]+@[\w-]+(?:\.[\w-]+)+",
        re.IGNORECASE,
    ),
    re.compile(
        r"(?:\b(?:телефон|тел|phone|tel)\b\.?[ \t]*:?[ \t]*\+?|(?<![\w+])\+)\d[\d \-()]{6,}\d",
        re.IGNORECASE,
    ),
]


def extract_contacts(text: str) -> str | None:
    found = [m.group(0).strip() for m in (p.search(text) for p in CONTACT_PATTERNS) if m]
    return ", ".join(found) if found else None


# ---------------------------------------------------------------------------
# classification
# ---------------------------------------------------------------------------


def has_marker(text: str, markers: tuple[str, ...]) -> bool:
    lowered = text.lower()
    return any(marker in lowered for marker in markers)


def is_candidate_text(text: str) -> bool:
    """Posting markers without resume markers reject; ambiguous text is kept."""
    is_resume = has_marker(text, RESUME_MARKERS)
    is_posting = has_marker(text, POSTING_MARKERS)
    return not (is_posting and not is_resume)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TextRecordExtractor:
    """Maps raw channel text to zero or one CandidateRecord."""

    def __init__(
        self,
        channel: str = "",
        *,
        min_length: int | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._channel = channel.strip().lstrip("@")
        self._min_length = max(1, min_length if min_length is not None else config.min_text_length)
        self._clock = clock or _utcnow

    @property
    def channel_url(self) -> str:
        return f"https://t.me/{self._channel}" if self._channel else "https://t.me"

    @property
    def min_length(self) -> int:
        return self._min_length

    def source_link(self, message_id: int | None) -> str:
        if message_id is not None and self._channel:
            return f"{self.channel_url}/{message_id}"
        return self.channel_url

    def _captured_at(self, timestamp: datetime | None) -> datetime:
        if timestamp is None:
            return self._clock()
        if timestamp.tzinfo is None:
            return timestamp.replace(tzinfo=timezone.utc)
        return timestamp

    def extract(
        self,
        text: str,
        message_id: int | None = None,
        timestamp: datetime | None = None,
    ) -> CandidateRecord | None:
        if not text or len(text) < self._min_length:
            return None
        if not is_candidate_text(text):
            return None

        skills_match = SKILLS_SECTION.search(text)
        return CandidateRecord(
            name=first_match(NAME_RULES, text) or UNSPECIFIED,
            position=first_match(POSITION_RULES, text) or UNSPECIFIED,
            level=first_match(LEVEL_RULES, text),
            location=first_match(LOCATION_RULES, text),
            salary_expectation=first_match(SALARY_RULES, text),
            skills=split_skills(skills_match.group(1)) if skills_match else None,
            experience=first_match(EXPERIENCE_RULES, text),
            contacts=extract_contacts(text),
            source_link=self.source_link(message_id),
            captured_at=self._captured_at(timestamp),
            raw_text=text,
        )

    def extract_message(self, message: ChannelMessage) -> CandidateRecord | None:
        return self.extract(message.text, message_id=message.message_id, timestamp=message.timestamp)
