from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .errors import UnknownToolError, ValidationError
from .tools.base import CallRequest, ToolResult
from .tools.registry import ToolRegistry
from .tools.schema import validate_arguments

logger = logging.getLogger(__name__)


@dataclass
class Dispatcher:
    """Routes one call to its tool and always answers with a ToolResult.

    lookup -> validate -> invoke -> respond. Nothing survives between calls.
    """

    registry: ToolRegistry

    def call(self, tool_name: str, arguments: Any = None) -> ToolResult:
        try:
            tool = self.registry.get(tool_name)
        except UnknownToolError as e:
            logger.info("call rejected: %s", e)
            return ToolResult.failure(str(e))

        try:
            args = validate_arguments(tool.spec.parameters, arguments)
        except ValidationError as e:
            logger.info("call to %s rejected: %s", tool_name, e)
            return ToolResult.failure(str(e))

        logger.debug("calling %s", tool_name)
        try:
            result = tool.execute(args)
        except Exception:
            logger.exception("tool %s raised", tool_name)
            return ToolResult.failure(f'Tool "{tool_name}" failed unexpectedly')

        if not isinstance(result, ToolResult):
            logger.error("tool %s returned %s instead of ToolResult", tool_name, type(result).__name__)
            return ToolResult.failure(f'Tool "{tool_name}" failed unexpectedly')
        if result.is_error:
            logger.info("tool %s failed: %s", tool_name, result.text)
        return result

    def call_request(self, req: CallRequest) -> ToolResult:
        return self.call(req.tool_name, req.arguments)
