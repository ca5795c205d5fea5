"""Standard interface for channel readers consumed by the ingestion cache."""

from abc import ABC, abstractmethod

from src.contracts.discovery_v1 import ChannelMessage


class ChannelReader(ABC):
    """Source of recent channel messages (Telegram today)."""

    @abstractmethod
    async def get_recent_messages(self, channel_id: str, limit: int) -> list[ChannelMessage]:
        """Return up to `limit` most recent messages, newest first.

        May return an empty list. Transport problems raise SourceUnavailable.
        """
