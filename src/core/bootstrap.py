"""Service wiring and tool registration at startup."""

from dataclasses import dataclass

from src.core.config import config
from src.core.logger import logger
from src.discovery.cache import ChannelIngestionCache
from src.discovery.channel import ChannelReader, TelegramPreviewReader
from src.discovery.extraction import TextRecordExtractor
from src.discovery.search import MultiSourceSearchAggregator, SearchTransport
from src.discovery.search.backends import SearxngTransport
from src.discovery.search.constants import select_backends
from src.tools import ChannelCandidatesTool, WebCandidatesTool
from src.tools.base import ToolRegistry


@dataclass
class DiscoveryServices:
    cache: ChannelIngestionCache
    aggregator: MultiSourceSearchAggregator
    registry: ToolRegistry

    async def warm_up(self) -> None:
        """Fill the channel cache once so the first search does not wait on the network."""
        if self.cache.is_configured:
            await self.cache.warm_up()

    async def close(self) -> None:
        self.cache.clear()
        logger.info("Discovery services stopped; candidate cache cleared")


def build_services(
    reader: ChannelReader | None = None,
    transport: SearchTransport | None = None,
) -> DiscoveryServices:
    """Build the cache, the aggregator and the tool registry from config.

    `reader` and `transport` override the default network implementations.
    """
    for problem in config.validate():
        logger.warning(problem)

    if reader is None and config.telegram_channel:
        reader = TelegramPreviewReader()
    extractor = TextRecordExtractor(config.telegram_channel, min_length=config.min_text_length)
    cache = ChannelIngestionCache(reader, config.telegram_channel, extractor=extractor)

    backends = select_backends(config.search_backends)
    if not backends:
        logger.warning("SEARCH_BACKENDS matched no known backend: %s", config.search_backends)
    aggregator = MultiSourceSearchAggregator(transport or SearxngTransport(), backends)

    registry = ToolRegistry()
    registry.register(ChannelCandidatesTool(cache))
    registry.register(WebCandidatesTool(aggregator))

    logger.info(
        "Bootstrap complete: %s tools, channel=@%s, backends=%s",
        len(registry.list_tools()),
        cache.channel or "-",
        ", ".join(b.name for b in aggregator.backends) or "-",
    )
    return DiscoveryServices(cache=cache, aggregator=aggregator, registry=registry)


async def setup_tools(
    reader: ChannelReader | None = None,
    transport: SearchTransport | None = None,
) -> DiscoveryServices:
    """Build services and warm the channel cache."""
    services = build_services(reader, transport)
    await services.warm_up()
    return services
