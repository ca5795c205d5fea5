"""Telegram channel reader over the public web preview (t.me/s/<channel>).

Works for public channels without an API session; the preview page carries
the latest ~20 posts, which covers the bounded page sizes the cache asks for.
"""

import logging
from datetime import datetime

import httpx
from bs4 import BeautifulSoup

from src.contracts.discovery_v1 import ChannelMessage
from src.core.config import config
from src.discovery.channel.interface import ChannelReader
from src.discovery.errors import SourceUnavailable

logger = logging.getLogger(__name__)

_USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0 Safari/537.36"


def _parse_message_id(data_post: str) -> int | None:
    """data-post looks like 'javascript_jobs/12345'."""
    _, _, tail = (data_post or "").rpartition("/")
    return int(tail) if tail.isdigit() else None


def _parse_timestamp(raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        return None


def parse_preview_html(html: str) -> list[ChannelMessage]:
    """Parse a preview page into messages, oldest first as the page renders them."""
    soup = BeautifulSoup(html, "html.parser")
    messages: list[ChannelMessage] = []
    for node in soup.select("div.tgme_widget_message[data-post]"):
        text_node = node.select_one("div.tgme_widget_message_text")
        if text_node is None:
            continue
        for br in text_node.find_all("br"):
            br.replace_with("\n")
        text = text_node.get_text().strip()
        if not text:
            continue
        time_node = node.select_one("a.tgme_widget_message_date time[datetime]") or node.select_one(
            "time[datetime]"
        )
        messages.append(
            ChannelMessage(
                text=text,
                timestamp=_parse_timestamp(time_node.get("datetime") if time_node else None),
                message_id=_parse_message_id(node.get("data-post", "")),
            )
        )
    return messages


class TelegramPreviewReader(ChannelReader):
    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        preview_url = base_url or config.telegram_preview_url or ""
        self._base_url = preview_url.rstrip("/")
        self._timeout = timeout if timeout is not None else config.telegram_timeout_seconds

    async def get_recent_messages(self, channel_id: str, limit: int) -> list[ChannelMessage]:
        channel = (channel_id or "").strip().lstrip("@")
        if not self._base_url or not channel or limit <= 0:
            return []

        url = f"{self._base_url}/{channel}"
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(
                    url,
                    headers={"User-Agent": _USER_AGENT},
                    follow_redirects=True,
                )
                response.raise_for_status()
                html = response.text
        except httpx.HTTPError as e:
            raise SourceUnavailable(f"Telegram preview for @{channel} failed: {e!s}") from e

        messages = parse_preview_html(html)
        logger.info("Telegram preview @%s: %s posts on page", channel, len(messages))
        # Newest first, bounded by the requested page size.
        return list(reversed(messages))[:limit]
