"""TTL-based candidate cache over a channel reader.

Lazy and pull-based: the staleness check runs at the start of every search.
The cached slot is replaced wholesale on a successful refresh and never
partially mutated; refreshes are serialized by a lock so two stale searches
racing each other read the channel once.
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import StrEnum

from src.contracts.discovery_v1 import UNSPECIFIED, CandidateFilters, CandidateRecord
from src.core.config import config
from src.core.logger import logger
from src.discovery.channel.interface import ChannelReader
from src.discovery.extraction import TextRecordExtractor

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class CacheState(StrEnum):
    COLD = "cold"
    WARM = "warm"


@dataclass(frozen=True)
class CacheSnapshot:
    records: tuple[CandidateRecord, ...] = ()
    last_refreshed_at: datetime | None = None


def _sort_key(record: CandidateRecord) -> datetime:
    return record.captured_at or EPOCH


def matches_filters(record: CandidateRecord, filters: CandidateFilters) -> bool:
    """AND of the active filters, checked in the order profession, level, location."""
    if filters.profession:
        needle = filters.profession.lower()
        in_position = record.position != UNSPECIFIED and needle in record.position.lower()
        in_skills = any(needle in s.lower() for s in (record.skills or ()))
        if not (in_position or in_skills):
            return False
    if filters.level:
        if record.level is None or record.level.lower() != filters.level.lower():
            return False
    if filters.location:
        if record.location is None or filters.location.lower() not in record.location.lower():
            return False
    return True


def apply_filters(records: list[CandidateRecord], filters: CandidateFilters) -> list[CandidateRecord]:
    results = [r for r in records if matches_filters(r, filters)]
    results.sort(key=_sort_key, reverse=True)
    return results


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChannelIngestionCache:
    """Owns the candidate slot for one channel."""

    def __init__(
        self,
        reader: ChannelReader | None,
        channel: str | None = None,
        *,
        extractor: TextRecordExtractor | None = None,
        page_size: int | None = None,
        staleness: timedelta | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._reader = reader
        self._channel = (channel if channel is not None else config.telegram_channel).strip().lstrip("@")
        self._extractor = extractor or TextRecordExtractor(self._channel)
        self._page_size = max(1, page_size if page_size is not None else config.telegram_page_size)
        self._staleness = staleness if staleness is not None else timedelta(seconds=config.cache_ttl_seconds)
        self._clock = clock or _utcnow
        self._records: tuple[CandidateRecord, ...] = ()
        self._last_refreshed_at: datetime | None = None
        self._refresh_lock = asyncio.Lock()

    @property
    def channel(self) -> str:
        return self._channel

    @property
    def channel_url(self) -> str:
        return self._extractor.channel_url

    @property
    def is_configured(self) -> bool:
        return self._reader is not None and bool(self._channel)

    @property
    def state(self) -> CacheState:
        return CacheState.COLD if self._last_refreshed_at is None else CacheState.WARM

    def snapshot(self) -> CacheSnapshot:
        return CacheSnapshot(records=self._records, last_refreshed_at=self._last_refreshed_at)

    def age(self) -> timedelta | None:
        if self._last_refreshed_at is None:
            return None
        return self._clock() - self._last_refreshed_at

    def is_stale(self) -> bool:
        age = self.age()
        return age is None or age > self._staleness

    async def refresh(self) -> bool:
        """Read the channel and replace the slot. Returns False when nothing changed."""
        async with self._refresh_lock:
            return await self._refresh_locked()

    async def _refresh_locked(self) -> bool:
        if self._reader is None or not self._channel:
            logger.warning("Channel reader not configured; using cached candidates")
            return False

        t0 = time.monotonic()
        try:
            messages = await self._reader.get_recent_messages(self._channel, self._page_size)
        except Exception as e:
            logger.channel_refresh(
                self._channel,
                0,
                len(self._records),
                False,
                duration_seconds=time.monotonic() - t0,
                error_reason=str(e),
            )
            return False

        records: list[CandidateRecord] = []
        for message in messages:
            record = self._extractor.extract_message(message)
            if record is not None:
                records.append(record)

        self._records = tuple(records)
        self._last_refreshed_at = self._clock()
        logger.channel_refresh(
            self._channel,
            len(messages),
            len(records),
            True,
            duration_seconds=time.monotonic() - t0,
        )
        return True

    async def refresh_if_stale(self, force: bool = False) -> bool:
        if not (force or self.is_stale()):
            return False
        async with self._refresh_lock:
            # Another search may have refreshed while this one waited.
            if not (force or self.is_stale()):
                return False
            return await self._refresh_locked()

    async def warm_up(self) -> None:
        """Best-effort refresh at startup."""
        try:
            await self.refresh_if_stale()
        except Exception as e:
            logger.warning(f"Could not fetch channel messages on startup: {e!s}")

    async def search(self, filters: CandidateFilters | None = None) -> list[CandidateRecord]:
        filters = filters or CandidateFilters()
        age = self.age()
        logger.debug(
            f"Channel search @{self._channel}: cached={len(self._records)} "
            f"force_refresh={filters.force_refresh} "
            f"age={int(age.total_seconds()) if age is not None else 'n/a'}s"
        )
        await self.refresh_if_stale(force=filters.force_refresh)
        return apply_filters(list(self._records), filters)

    def clear(self) -> None:
        self._records = ()
        self._last_refreshed_at = None
