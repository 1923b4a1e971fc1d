from __future__ import annotations
from dataclasses import dataclass
from typing import Any

JSONRPC_VERSION = "2.0"
PROTOCOL_VERSION = "2024-11-05"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601

@dataclass(frozen=True)
class ServerInfo:
    name: str
    version: str

    def to_wire(self) -> dict[str, Any]:
        return {"name": self.name, "version": self.version}

class ProtocolError(Exception):
    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = code
        self.message = message
