from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Optional

from .base import Tool, ToolSpec
from ..errors import DuplicateToolError, UnknownToolError

@dataclass
class ToolRegistry:
    """Name -> tool table. Filled once at startup, read-only afterwards."""

    _tools: Dict[str, Tool] = field(default_factory=dict)

    def register(self, tool: Tool) -> None:
        name = tool.spec.name
        if name in self._tools:
            raise DuplicateToolError(f"Tool already registered: {name}")
        self._tools[name] = tool

    def get(self, name: str) -> Tool:
        if name not in self._tools:
            raise UnknownToolError(name)
        return self._tools[name]

    def get_optional(self, name: str) -> Optional[Tool]:
        return self._tools.get(name)

    def list_specs(self) -> list[ToolSpec]:
        return [t.spec for t in self._tools.values()]

    def names(self) -> list[str]:
        return sorted(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
