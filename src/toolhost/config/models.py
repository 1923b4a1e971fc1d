from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .. import __version__

DEFAULT_WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"

# the sandbox shipped next to the program itself
DEFAULT_FILES_DIR = Path(__file__).resolve().parent.parent / "files"


@dataclass(frozen=True)
class WeatherConfig:
    api_key: str = ""
    base_url: str = DEFAULT_WEATHER_URL

    def __repr__(self) -> str:
        # keep the credential out of tracebacks and log lines
        masked = "***" if self.api_key else "''"
        return f"WeatherConfig(api_key={masked}, base_url={self.base_url!r})"


@dataclass(frozen=True)
class HostConfig:
    """Process-wide settings, built once at startup and handed to the tools."""

    files_dir: Path = DEFAULT_FILES_DIR
    weather: WeatherConfig = WeatherConfig()
    server_name: str = "toolhost"
    server_version: str = __version__
    log_level: str = "INFO"
    loaded_from: Path | None = None
