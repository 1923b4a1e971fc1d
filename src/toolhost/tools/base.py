from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol

from .schema import ParamSpec, input_schema

@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    parameters: tuple[ParamSpec, ...] = ()

    def input_schema(self) -> dict[str, Any]:
        return input_schema(self.parameters)

    def to_wire(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description, "inputSchema": self.input_schema()}

@dataclass(frozen=True)
class ContentBlock:
    text: str
    type: Literal["text"] = "text"

    def to_wire(self) -> dict[str, Any]:
        return {"type": self.type, "text": self.text}

@dataclass
class ToolResult:
    content: list[ContentBlock] = field(default_factory=list)
    is_error: bool = False

    @staticmethod
    def success(text: str) -> "ToolResult":
        return ToolResult(content=[ContentBlock(text)])

    @staticmethod
    def failure(message: str) -> "ToolResult":
        return ToolResult(content=[ContentBlock(message)], is_error=True)

    @property
    def text(self) -> str:
        return "\n".join(b.text for b in self.content if b.type == "text")

    def to_wire(self) -> dict[str, Any]:
        # failures are ordinary replies; the text tells the caller what went wrong
        return {"content": [b.to_wire() for b in self.content], "isError": False}

class Tool(Protocol):
    spec: ToolSpec
    def execute(self, args: dict[str, Any]) -> ToolResult: ...

@dataclass
class CallRequest:
    tool_name: str
    arguments: Any = field(default_factory=dict)
