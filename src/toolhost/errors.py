from __future__ import annotations


class ToolHostError(Exception):
    """Base class for everything toolhost raises on purpose."""


class ValidationError(ToolHostError):
    """Call arguments do not match the tool's input schema."""

    def __init__(self, message: str, param: str | None = None):
        super().__init__(message)
        self.param = param


class UnknownToolError(ToolHostError, KeyError):
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"unknown tool: {self.name}"


class DuplicateToolError(ToolHostError, ValueError):
    pass


class SandboxViolation(ToolHostError):
    pass


class UpstreamError(ToolHostError):
    pass


class LocalIOError(ToolHostError):
    pass


class ConfigError(ToolHostError):
    pass
