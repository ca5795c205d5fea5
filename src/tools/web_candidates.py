"""Web candidate search: one query fanned out over job sites."""

from src.core.logger import logger
from src.discovery.errors import ConfigurationMissing
from src.discovery.presenter import present_search, present_unavailable
from src.discovery.search import MultiSourceSearchAggregator
from src.tools.base import Tool, ToolResult


class WebCandidatesTool(Tool):
    def __init__(self, aggregator: MultiSourceSearchAggregator):
        self._aggregator = aggregator

    @property
    def aggregator(self) -> MultiSourceSearchAggregator:
        return self._aggregator

    @property
    def name(self) -> str:
        return "web_candidates"

    @property
    def description(self) -> str:
        sites = ", ".join(b.domain for b in self._aggregator.backends)
        return f"Search job sites for candidate profiles and resumes. Sites: {sites}."

    @property
    def parameters(self) -> dict[str, str]:
        return {
            "query": "Free text or labelled hints, e.g. 'position: Python developer, skills: Django, location: Москва'.",
        }

    async def execute(self, **kwargs: object) -> ToolResult:
        query = str(kwargs.get("query") or "").strip()
        logger.tool_execute(self.name, {"query": query[:200]})

        if not query:
            fail_msg = "Web candidate search requires a query"
            logger.tool_result(self.name, 0, False, error_reason=fail_msg)
            return ToolResult.fail(fail_msg)

        try:
            response = await self._aggregator.search(query)
        except ConfigurationMissing as e:
            reason = str(e)
            out = present_unavailable(reason)
            logger.tool_result(self.name, len(out), False, error_reason=reason)
            return ToolResult.unavailable(reason, out, {"count": 0, "per_backend_counts": {}, "items": []})
        except Exception as e:
            logger.error("Web candidate search failed: %s", e, exc_info=True)
            fail_msg = f"Web candidate search failed: {e!s}"
            logger.tool_result(self.name, 0, False, error_reason=fail_msg)
            return ToolResult.fail(fail_msg)

        out = present_search(response)
        logger.tool_result(self.name, len(out), True)
        return ToolResult.ok(
            out,
            data={
                "count": response.total,
                "per_backend_counts": dict(response.per_backend_counts),
                "items": [i.model_dump() for i in response.items],
                "query": response.query,
                "errors": list(response.errors),
            },
        )
