from __future__ import annotations

from .registry import ToolRegistry
from ..config.models import HostConfig

from .builtin_tools.weather_tool import WeatherTool
from .builtin_tools.file_read import ReadFileTool

def register_builtin_tools(registry: ToolRegistry, config: HostConfig) -> None:
    registry.register(WeatherTool(config=config.weather))
    registry.register(ReadFileTool(files_dir=config.files_dir))
