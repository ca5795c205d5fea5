"""Channel candidate search: filters resumes cached from the Telegram channel."""

import re

from src.contracts.discovery_v1 import CandidateFilters
from src.core.logger import logger
from src.discovery.cache import ChannelIngestionCache
from src.discovery.errors import ConfigurationMissing
from src.discovery.extraction import LEVEL_RULES, LOCATION_RULES, first_match
from src.discovery.presenter import manual_instructions, present_candidates, present_unavailable
from src.tools.base import Tool, ToolResult

_PROFESSION_RE = re.compile(
    r"\b(frontend|backend|fullstack|react|vue|angular|node|python|java|devops|qa|mobile|"
    r"ios|android|designer|ui|ux|product|project|analyst|data)\b",
    re.IGNORECASE,
)
_REFRESH_MARKERS = ("обнови", "refresh")


def filters_from_message(text: str) -> CandidateFilters:
    """Best-effort filters from a free-text request ("senior frontend в Москве, обнови")."""
    text = text or ""
    profession = _PROFESSION_RE.search(text)
    lowered = text.lower()
    return CandidateFilters(
        profession=profession.group(1).lower() if profession else None,
        level=first_match(LEVEL_RULES, text),
        location=first_match(LOCATION_RULES, text),
        force_refresh=any(marker in lowered for marker in _REFRESH_MARKERS),
    )


def _merge_filters(message: str, **explicit: object) -> CandidateFilters:
    base = filters_from_message(message) if message.strip() else CandidateFilters()
    updates = {k: v for k, v in explicit.items() if v not in (None, "")}
    if "force_refresh" in updates:
        updates["force_refresh"] = str(updates["force_refresh"]).strip().lower() in ("1", "true", "yes")
    return base.model_copy(update=updates)


class ChannelCandidatesTool(Tool):
    def __init__(self, cache: ChannelIngestionCache):
        self._cache = cache

    @property
    def cache(self) -> ChannelIngestionCache:
        return self._cache

    @property
    def name(self) -> str:
        return "channel_candidates"

    @property
    def description(self) -> str:
        return (
            f"Find candidate resumes posted in the Telegram channel @{self._cache.channel}. "
            "Results are cached for a while; ask for a refresh to re-read the channel."
        )

    @property
    def parameters(self) -> dict[str, str]:
        return {
            "profession": "Optional. Role or skill, matched against position and skills.",
            "level": "Optional. Junior, Middle, Senior, Lead, Intern or Trainee.",
            "location": "Optional. City or 'remote'.",
            "force_refresh": "Optional. 'true' to re-read the channel now.",
            "message": "Optional. Free-text request; filters are parsed from it.",
        }

    async def execute(self, **kwargs: object) -> ToolResult:
        message = str(kwargs.get("message") or "")
        filters = _merge_filters(
            message,
            profession=kwargs.get("profession"),
            level=kwargs.get("level"),
            location=kwargs.get("location"),
            force_refresh=kwargs.get("force_refresh"),
        )
        logger.tool_execute(self.name, filters.model_dump())

        try:
            if not self._cache.is_configured:
                raise ConfigurationMissing("TELEGRAM_CHANNEL", "channel candidate search is unavailable")
            records = await self._cache.search(filters)
        except ConfigurationMissing as e:
            reason = str(e)
            out = present_unavailable(reason, manual_instructions(self._cache.channel))
            logger.tool_result(self.name, len(out), False, error_reason=reason)
            return ToolResult.unavailable(reason, out, {"count": 0, "records": []})
        except Exception as e:
            logger.error("Channel candidate search failed: %s", e, exc_info=True)
            fail_msg = f"Channel candidate search failed: {e!s}"
            out = present_unavailable(fail_msg, manual_instructions(self._cache.channel))
            logger.tool_result(self.name, len(out), False, error_reason=fail_msg)
            return ToolResult.fail(fail_msg, output=out)

        out = present_candidates(records, filters, channel=self._cache.channel)
        logger.tool_result(self.name, len(out), True)
        return ToolResult.ok(
            out,
            data={
                "count": len(records),
                "records": [r.model_dump(mode="json") for r in records],
                "filters": filters.model_dump(),
            },
        )
