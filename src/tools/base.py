"""Tool base class, ToolResult, and ToolRegistry for the discovery tools."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ToolResult:
    """Formatted text for the user plus structured `data` for callers.

    `data["available"]` is False when the tool could not run at all
    (missing configuration); a plain failure leaves it unset.
    """

    success: bool
    output: str
    error: str = ""
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, output: str, data: dict[str, Any] | None = None) -> "ToolResult":
        return cls(success=True, output=output, data={**(data or {}), "available": True})

    @classmethod
    def fail(cls, error: str, output: str = "") -> "ToolResult":
        return cls(success=False, output=output, error=error)

    @classmethod
    def unavailable(cls, reason: str, output: str, empty: dict[str, Any]) -> "ToolResult":
        return cls(success=False, output=output, error=reason, data={**empty, "available": False})

    @property
    def available(self) -> bool:
        return self.data.get("available", True)


class Tool(ABC):
    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        pass

    @property
    @abstractmethod
    def parameters(self) -> dict[str, str]:
        pass

    @abstractmethod
    async def execute(self, **kwargs) -> ToolResult:
        pass

    def get_schema(self) -> str:
        if not self.parameters:
            return f"- **{self.name}**: {self.description}"
        param_lines = [f"    - `{k}`: {v}" for k, v in self.parameters.items()]
        params_str = "\n".join(param_lines)
        return f"- **{self.name}**: {self.description}\n  Parameters:\n{params_str}"


class ToolRegistry:
    def __init__(self):
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        if not isinstance(tool, Tool):
            raise TypeError(f"Expected Tool instance, got {type(tool)}")
        if tool.name in self._tools:
            raise ValueError(f"Tool already registered: {tool.name}")
        self._tools[tool.name] = tool

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def list_tools(self) -> list[Tool]:
        return list(self._tools.values())

    async def execute(self, name: str, **kwargs) -> ToolResult:
        tool = self._tools.get(name)
        if tool is None:
            return ToolResult.fail(f"Unknown tool: {name}")
        return await tool.execute(**kwargs)

    def get_tools_prompt(self) -> str:
        if not self._tools:
            return "No discovery tools registered."

        lines = ["Discovery tools:"]
        for tool in self._tools.values():
            lines.append(tool.get_schema())
        return "\n".join(lines)
