from src.discovery.channel.interface import ChannelReader
from src.discovery.channel.telegram_preview import TelegramPreviewReader

__all__ = [
    "ChannelReader",
    "TelegramPreviewReader",
]
