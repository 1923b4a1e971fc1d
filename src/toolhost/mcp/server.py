from __future__ import annotations

import json
import logging
import sys
from typing import IO, Any

from .models import (
    INVALID_REQUEST,
    JSONRPC_VERSION,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    PROTOCOL_VERSION,
    ProtocolError,
    ServerInfo,
)
from ..dispatch import Dispatcher
from ..tools.base import CallRequest, ToolResult
from ..tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


class StdioServer:
    """Newline-delimited JSON-RPC 2.0 over a pair of text streams.

    Messages are handled strictly one at a time, in arrival order; each
    request gets exactly one reply, notifications get none.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        dispatcher: Dispatcher,
        info: ServerInfo,
        *,
        stdin: IO[str] | None = None,
        stdout: IO[str] | None = None,
    ):
        self.registry = registry
        self.dispatcher = dispatcher
        self.info = info
        self._stdin = sys.stdin if stdin is None else stdin
        self._stdout = sys.stdout if stdout is None else stdout

    def _write(self, msg: dict[str, Any]) -> None:
        self._stdout.write(json.dumps(msg, ensure_ascii=False) + "\n")
        self._stdout.flush()

    @staticmethod
    def _reply(rid: Any, result: Any) -> dict[str, Any]:
        return {"jsonrpc": JSONRPC_VERSION, "id": rid, "result": result}

    @staticmethod
    def _error(rid: Any, code: int, message: str) -> dict[str, Any]:
        return {"jsonrpc": JSONRPC_VERSION, "id": rid, "error": {"code": code, "message": message}}

    def serve_forever(self) -> None:
        logger.info("%s %s ready with tools: %s", self.info.name, self.info.version, ", ".join(self.registry.names()))
        for line in self._stdin:
            line = line.strip()
            if not line:
                continue
            reply = self.handle_line(line)
            if reply is not None:
                self._write(reply)
        logger.info("stdin closed, shutting down")

    def handle_line(self, line: str) -> dict[str, Any] | None:
        try:
            msg = json.loads(line)
        except json.JSONDecodeError as e:
            logger.warning("unparseable frame: %s", e)
            return self._error(None, PARSE_ERROR, "Parse error")
        return self.handle_message(msg)

    def handle_message(self, msg: Any) -> dict[str, Any] | None:
        if not isinstance(msg, dict) or not isinstance(msg.get("method"), str):
            rid = msg.get("id") if isinstance(msg, dict) else None
            if isinstance(msg, dict) and "method" not in msg:
                # a response to something we never sent; nothing to answer
                return None
            return self._error(rid, INVALID_REQUEST, "Invalid Request")

        method = msg["method"]
        params = msg.get("params") or {}
        is_notification = "id" not in msg
        rid = msg.get("id")

        try:
            result = self._route(method, params)
        except ProtocolError as e:
            if is_notification:
                return None
            return self._error(rid, e.code, e.message)

        if is_notification:
            return None
        return self._reply(rid, result)

    def _route(self, method: str, params: Any) -> Any:
        if method == "initialize":
            return {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {}},
                "serverInfo": self.info.to_wire(),
            }
        if method.startswith("notifications/"):
            logger.debug("notification %s", method)
            return None
        if method == "ping":
            return {}
        if method == "tools/list":
            return {"tools": [spec.to_wire() for spec in self.registry.list_specs()]}
        if method == "tools/call":
            return self._call_tool(params).to_wire()
        raise ProtocolError(METHOD_NOT_FOUND, f"Method not found: {method}")

    def _call_tool(self, params: Any) -> ToolResult:
        # malformed calls become textual failures rather than protocol errors
        if not isinstance(params, dict) or not isinstance(params.get("name"), str):
            return ToolResult.failure("Invalid tool call: missing tool name")
        req = CallRequest(tool_name=params["name"], arguments=params.get("arguments"))
        return self.dispatcher.call_request(req)
