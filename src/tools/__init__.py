from src.tools.channel_candidates import ChannelCandidatesTool
from src.tools.web_candidates import WebCandidatesTool

__all__ = [
    "ChannelCandidatesTool",
    "WebCandidatesTool",
]
