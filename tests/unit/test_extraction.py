from datetime import datetime, timezone

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from src.contracts.discovery_v1 import UNSPECIFIED, ChannelMessage, SeniorityLevel
from src.discovery.extraction import (
    LEVEL_RULES,
    SALARY_RULES,
    SKILLS_SECTION,
    TextRecordExtractor,
    extract_contacts,
    first_match,
    is_candidate_text,
    split_skills,
)

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

IVAN = (
    "Меня зовут Иван Петров. Должность: Frontend разработчик. "
    "Navyki: React, TypeScript. Опыт работы: 3 года. Телефон: +79001234567"
)


@pytest.fixture
def extractor() -> TextRecordExtractor:
    return TextRecordExtractor("javascript_jobs", min_length=44, clock=lambda: FIXED_NOW)


def test_labelled_resume_is_fully_extracted(extractor):
    record = extractor.extract(IVAN)

    assert record is not None
    assert record.name == "Иван Петров"
    assert record.position == "Frontend разработчик"
    assert record.skills == ("React", "TypeScript")
    assert record.experience == "3 года"
    assert record.contacts == "Телефон: +79001234567"
    assert record.salary_expectation is None
    assert record.level is None
    assert record.location is None
    assert record.raw_text == IVAN
    assert record.captured_at == FIXED_NOW


def test_short_text_is_rejected(extractor):
    assert extractor.extract("Ищу работу") is None
    assert extractor.extract("") is None


def test_min_length_boundary():
    extractor = TextRecordExtractor("jobs", min_length=20, clock=lambda: FIXED_NOW)
    text = "Резюме: Python dev 5"
    assert len(text) == 20
    assert extractor.extract(text) is not None
    assert extractor.extract(text[:-1]) is None


def test_posting_without_resume_markers_is_rejected(extractor):
    text = "Вакансия: требуется Middle Java разработчик в офис, зарплата от 250000 руб"
    assert extractor.extract(text) is None


def test_posting_with_resume_marker_is_kept():
    assert is_candidate_text("Рассмотрю предложения, ищем команду с интересными задачами")


def test_ambiguous_text_is_kept_with_vocabulary_fields(extractor):
    text = "Senior Python developer, 5 лет, Москва, стек: Django, PostgreSQL, Redis"
    record = extractor.extract(text)

    assert record is not None
    assert record.name == UNSPECIFIED
    assert record.position == "Python developer"
    assert record.level == SeniorityLevel.SENIOR
    assert record.location == "Москва"
    assert record.experience == "5 лет"
    assert record.skills == ("Django", "PostgreSQL", "Redis")


def test_name_from_leading_words():
    extractor = TextRecordExtractor("jobs", min_length=10, clock=lambda: FIXED_NOW)
    record = extractor.extract("Анна Смирнова. Рассмотрю предложения. Позиция: Python developer. Junior")

    assert record is not None
    assert record.name == "Анна Смирнова"
    assert record.position == "Python developer"
    assert record.level == "Junior"


def test_inflected_city_is_canonical(extractor):
    record = extractor.extract("Ищу работу React разработчиком, готов работать в офисе в Санкт-Петербурге")
    assert record is not None
    assert record.location == "Санкт-Петербург"


def test_salary_range_and_phone_guard():
    assert first_match(SALARY_RULES, "Ожидания 150-200k, готов к переезду") == "150-200k"
    assert first_match(SALARY_RULES, "Телефон: +7 900-123-45-67") is None
    assert first_match(SALARY_RULES, "Опыт 2019-2023 в стартапе") is None


def test_contacts_keep_every_pattern():
    contacts = extract_contacts("Telegram: @ivan_dev, email: ivan@example.com")
    assert contacts == "Telegram: @ivan_dev, email: ivan@example.com"


def test_skills_are_not_deduplicated_and_long_items_dropped():
    long_item = "x" * 60
    assert split_skills(f"React, React, {long_item}, Vue") == ("React", "React", "Vue")
    assert split_skills(" , ") is None


def test_timestamp_and_link_come_from_message(extractor):
    naive = datetime(2024, 4, 30, 9, 30)
    record = extractor.extract_message(ChannelMessage(text=IVAN, timestamp=naive, message_id=321))

    assert record is not None
    assert record.source_link == "https://t.me/javascript_jobs/321"
    assert record.captured_at == naive.replace(tzinfo=timezone.utc)


def test_without_message_id_link_points_at_channel(extractor):
    record = extractor.extract(IVAN)
    assert record.source_link == "https://t.me/javascript_jobs"


def test_extraction_is_deterministic(extractor):
    assert extractor.extract(IVAN) == extractor.extract(IVAN)


@pytest.mark.property
@settings(max_examples=200, deadline=None)
@given(st.text(max_size=400))
def test_extract_never_raises_and_keeps_raw_text(text):
    extractor = TextRecordExtractor("jobs", min_length=44, clock=lambda: FIXED_NOW)
    record = extractor.extract(text)

    if len(text) < 44:
        assert record is None
    if record is not None:
        assert record.raw_text == text
        assert record.name
        assert record.position
        assert record.level is None or record.level in {lvl.value for lvl in SeniorityLevel}
        assert record.skills is None or all(0 < len(s) < 50 for s in record.skills)


def test_leftmost_seniority_word_wins(extractor):
    record = extractor.extract(
        "Senior Python developer, ищу работу. Был наставником для Junior разработчиков в команде"
    )

    assert record is not None
    assert record.level == "Senior"
    assert first_match(LEVEL_RULES, "intern в прошлом, сейчас LEAD") == "Intern"


def test_labelled_name_stops_before_title(extractor):
    latin_title = extractor.extract(
        "Меня зовут Иван Петров Frontend разработчик, ищу работу, стек: React, Vue"
    )
    cyrillic_title = extractor.extract(
        "Меня зовут Иван Петров Разработчик интерфейсов, ищу работу, стек: React, Vue"
    )

    assert latin_title.name == "Иван Петров"
    assert latin_title.position == "Frontend разработчик"
    assert cyrillic_title.name == "Иван Петров"


def test_latin_label_words_in_prose_are_not_labels(extractor):
    record = extractor.extract(
        "Ищу работу. Senior Python developer, played a key role in migrating services to Kubernetes"
    )
    prose_experience = extractor.extract(
        "Ищу работу. 6 years of experience with Go and Kubernetes, open to offers"
    )

    assert record.position == "Python developer"
    assert prose_experience.experience == "6 years"
    assert SKILLS_SECTION.search("Ищу работу, хочу сменить stack на Go") is None


def test_latin_labels_with_colon_still_apply(extractor):
    record = extractor.extract(
        "Resume. Position: Backend engineer. Experience: 4 years. Skills: Go, gRPC"
    )

    assert record.position == "Backend engineer"
    assert record.experience == "4 years"
    assert record.skills == ("Go", "gRPC")
