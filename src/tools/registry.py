from __future__ import annotations

import structlog

from src.tools.base import ToolDescriptor, ToolGroup

logger = structlog.get_logger()


class ToolRegistry:
    """Closed catalog of tool descriptors, populated once at startup."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolDescriptor] = {}

    def register(self, tool: ToolDescriptor) -> None:
        """Register a tool. Raises ValueError if name already registered."""
        if tool.name in self._tools:
            raise ValueError(f"Tool already registered: {tool.name}")
        self._tools[tool.name] = tool
        logger.debug("tool_registered", tool_name=tool.name, group=str(tool.group))

    def get(self, name: str) -> ToolDescriptor | None:
        """Get a tool by name. Returns None if not found."""
        return self._tools.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def names(self) -> list[str]:
        return list(self._tools)

    def list_tools(self, group: ToolGroup | None = None) -> list[ToolDescriptor]:
        """Return tools in registration order, optionally filtered by group."""
        return [
            tool for tool in self._tools.values()
            if group is None or tool.group == group
        ]

    def get_tools_schema(self) -> list[dict]:
        """Return every tool as ``{"name", "description", "inputSchema"}``."""
        return [
            {
                "name": tool.name,
                "description": tool.description,
                "inputSchema": tool.parameters,
            }
            for tool in self._tools.values()
        ]
