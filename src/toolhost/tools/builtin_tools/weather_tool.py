from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass, field
from typing import Any

from ..base import ToolResult, ToolSpec
from ..schema import ParamSpec
from ...config.models import WeatherConfig
from ...errors import UpstreamError

logger = logging.getLogger(__name__)


def _f_to_c(f: float) -> float:
    return (f - 32) * 5 / 9


def _number(obj: Any, *path: Any) -> float:
    v = _field(obj, *path)
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise TypeError(f"{'.'.join(map(str, path))} is not a number")
    return float(v)


def _field(obj: Any, *path: Any) -> Any:
    for key in path:
        obj = obj[key]
    if obj is None:
        raise KeyError(path[-1])
    return obj


def summarize_weather(data: Any) -> str:
    """Render a provider payload (imperial units) as a plain-text summary.

    Raises UpstreamError when a required field is missing or has the wrong type.
    """
    try:
        city = str(_field(data, "name"))
        country = str(_field(data, "sys", "country"))
        description = str(_field(data, "weather", 0, "description"))
        temp_f = _number(data, "main", "temp")
        feels_like_f = _number(data, "main", "feels_like")
        humidity = _field(data, "main", "humidity")
        wind = _number(data, "wind", "speed")
        visibility_m = data.get("visibility")
        visibility = "N/A" if visibility_m is None else f"{float(visibility_m) / 1000:.1f}"
    except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
        raise UpstreamError(f"malformed weather payload: {e}") from e

    return "\n".join([
        f"Weather for {city}, {country}",
        f"Condition:   {description}",
        f"Temperature: {_f_to_c(temp_f):.1f}°C / {temp_f:.1f}°F (feels like {feels_like_f:.1f}°F)",
        f"Humidity:    {humidity}%",
        f"Wind:        {wind:.1f} mph",
        f"Visibility:  {visibility} km",
    ])


@dataclass
class WeatherTool:
    """Current conditions for a location from OpenWeatherMap.

    One GET per call, no retries and no timeout of our own.
    """

    config: WeatherConfig
    spec: ToolSpec = field(default=ToolSpec(
        name="get_weather",
        description="Get the current weather for any city or location",
        parameters=(
            ParamSpec(
                "location", "string", "City name or location, e.g. 'Tampa' or 'London'",
                required=True, min_length=1,
            ),
        ),
    ))

    def build_url(self, location: str) -> str:
        query = urllib.parse.urlencode({"q": location, "appid": self.config.api_key, "units": "imperial"})
        return f"{self.config.base_url}?{query}"

    def execute(self, args: dict[str, Any]) -> ToolResult:
        location = args["location"]
        if not self.config.api_key:
            return ToolResult.failure("Weather API key is not configured")

        req = urllib.request.Request(self.build_url(location), headers={"User-Agent": "toolhost/1.0"})
        logger.debug("get_weather: requesting %r", location)
        try:
            with urllib.request.urlopen(req) as resp:
                status = getattr(resp, "status", 200)
                raw = resp.read()
        except urllib.error.HTTPError as e:
            e.close()
            logger.info("get_weather: provider returned HTTP %s for %r", e.code, location)
            return ToolResult.failure(f'Failed to fetch weather for "{location}": HTTP {e.code}')
        except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
            # the exception text may echo the request URL, and with it the key
            logger.warning("get_weather: provider unreachable (%s)", type(e).__name__)
            return ToolResult.failure(f'Failed to fetch weather for "{location}": provider unreachable')

        if not 200 <= status < 300:
            logger.info("get_weather: provider returned HTTP %s for %r", status, location)
            return ToolResult.failure(f'Failed to fetch weather for "{location}": HTTP {status}')

        try:
            data = json.loads(raw.decode("utf-8"))
            summary = summarize_weather(data)
        except (UnicodeDecodeError, json.JSONDecodeError, UpstreamError) as e:
            logger.warning("get_weather: bad payload for %r: %s", location, e)
            return ToolResult.failure(
                f'Failed to parse weather data for "{location}": unexpected response format'
            )
        return ToolResult.success(summary)
