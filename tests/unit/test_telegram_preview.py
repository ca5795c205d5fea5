from datetime import datetime, timezone

import httpx
import pytest

from src.discovery.channel.telegram_preview import TelegramPreviewReader, parse_preview_html
from src.discovery.errors import SourceUnavailable

PREVIEW_HTML = """
<html><body>
<div class="tgme_widget_message_wrap">
  <div class="tgme_widget_message" data-post="javascript_jobs/101">
    <div class="tgme_widget_message_text">Вакансия: требуется React разработчик</div>
    <div class="tgme_widget_message_footer">
      <a class="tgme_widget_message_date" href="https://t.me/javascript_jobs/101">
        <time datetime="2024-05-01T09:00:00+00:00">09:00</time>
      </a>
    </div>
  </div>
</div>
<div class="tgme_widget_message_wrap">
  <div class="tgme_widget_message" data-post="javascript_jobs/102">
    <div class="tgme_widget_message_text">Резюме<br/>Имя: Иван Петров<br>Навыки: React</div>
    <a class="tgme_widget_message_date"><time datetime="2024-05-01T10:30:00+00:00">10:30</time></a>
  </div>
</div>
<div class="tgme_widget_message_wrap">
  <div class="tgme_widget_message" data-post="javascript_jobs/103">
    <div class="tgme_widget_message_photo_wrap"></div>
  </div>
</div>
</body></html>
"""


def _patch_client(monkeypatch, handler) -> None:
    real_client = httpx.AsyncClient

    def client_factory(*args, **kwargs):
        kwargs["transport"] = httpx.MockTransport(handler)
        return real_client(*args, **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", client_factory)


def test_parse_preview_html_reads_text_ids_and_times():
    messages = parse_preview_html(PREVIEW_HTML)

    assert [m.message_id for m in messages] == [101, 102]
    assert messages[1].text == "Резюме\nИмя: Иван Петров\nНавыки: React"
    assert messages[1].timestamp == datetime(2024, 5, 1, 10, 30, tzinfo=timezone.utc)


def test_parse_preview_html_empty_page():
    assert parse_preview_html("<html><body></body></html>") == []


@pytest.mark.asyncio
async def test_reader_returns_newest_first_and_respects_limit(monkeypatch):
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, text=PREVIEW_HTML)

    _patch_client(monkeypatch, handler)
    reader = TelegramPreviewReader(base_url="https://t.me/s", timeout=5)

    messages = await reader.get_recent_messages("@javascript_jobs", 1)

    assert seen == ["https://t.me/s/javascript_jobs"]
    assert [m.message_id for m in messages] == [102]


@pytest.mark.asyncio
async def test_reader_wraps_http_errors(monkeypatch):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    _patch_client(monkeypatch, handler)
    reader = TelegramPreviewReader(base_url="https://t.me/s", timeout=5)

    with pytest.raises(SourceUnavailable):
        await reader.get_recent_messages("javascript_jobs", 10)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_reader_against_live_preview():
    reader = TelegramPreviewReader()
    messages = await reader.get_recent_messages("javascript_jobs", 5)
    assert len(messages) <= 5
