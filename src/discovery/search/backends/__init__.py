from src.discovery.search.backends.searxng import SearxngTransport

__all__ = [
    "SearxngTransport",
]
