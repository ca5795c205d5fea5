"""One-shot interface: run a single discovery request, print the result, exit."""

from __future__ import annotations

import asyncio

from src.core.bootstrap import setup_tools


async def run_oneshot(tool_name: str, text: str) -> int:
    text = (text or "").strip()
    if tool_name == "web_candidates" and not text:
        print("Error: query must not be empty")
        return 2

    services = await setup_tools()
    try:
        if tool_name == "web_candidates":
            result = await services.registry.execute(tool_name, query=text)
        else:
            result = await services.registry.execute(tool_name, message=text)
        print(result.output or f"Error: {result.error}")
        return 0 if result.success else 1
    finally:
        await services.close()


def main(tool_name: str, text: str) -> int:
    return asyncio.run(run_oneshot(tool_name=tool_name, text=text))
