from __future__ import annotations

from dataclasses import dataclass

from .config.models import HostConfig
from .dispatch import Dispatcher
from .mcp.models import ServerInfo
from .mcp.server import StdioServer
from .tools.builtin import register_builtin_tools
from .tools.registry import ToolRegistry

@dataclass
class AppContext:
    config: HostConfig
    tools: ToolRegistry
    dispatcher: Dispatcher
    info: ServerInfo

    @staticmethod
    def from_config(config: HostConfig) -> "AppContext":
        tools = ToolRegistry()
        register_builtin_tools(tools, config)
        return AppContext(
            config=config,
            tools=tools,
            dispatcher=Dispatcher(tools),
            info=ServerInfo(name=config.server_name, version=config.server_version),
        )

    def server(self, **streams) -> StdioServer:
        return StdioServer(self.tools, self.dispatcher, self.info, **streams)
