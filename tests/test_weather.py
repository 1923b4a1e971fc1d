import urllib.error
import urllib.parse

import pytest

from toolhost.config.models import WeatherConfig
from toolhost.errors import UpstreamError
from toolhost.tools.builtin_tools.weather_tool import WeatherTool, summarize_weather

from conftest import TEST_API_KEY


def test_summary(ctx, provider, sample_weather):
    provider.respond_json(sample_weather)
    res = ctx.dispatcher.call("get_weather", {"location": "Tampa"})
    assert not res.is_error
    assert res.text.splitlines() == [
        "Weather for Tampa, US",
        "Condition:   clear sky",
        "Temperature: 20.0°C / 68.0°F (feels like 70.3°F)",
        "Humidity:    55%",
        "Wind:        5.8 mph",
        "Visibility:  10.0 km",
    ]


def test_request_shape(ctx, provider, sample_weather):
    provider.respond_json(sample_weather)
    ctx.dispatcher.call("get_weather", {"location": "São Paulo, BR"})
    assert len(provider.requests) == 1
    url = urllib.parse.urlsplit(provider.requests[0])
    q = urllib.parse.parse_qs(url.query)
    assert q["q"] == ["São Paulo, BR"]
    assert q["appid"] == [TEST_API_KEY]
    assert q["units"] == ["imperial"]
    assert url.path == "/data/2.5/weather"


def test_missing_visibility_is_na(ctx, provider, sample_weather):
    del sample_weather["visibility"]
    provider.respond_json(sample_weather)
    res = ctx.dispatcher.call("get_weather", {"location": "Tampa"})
    assert not res.is_error
    assert "Visibility:  N/A km" in res.text
    assert "20.0°C / 68.0°F" in res.text


def test_http_error(ctx, provider):
    provider.status = 404
    res = ctx.dispatcher.call("get_weather", {"location": "Nowhereville"})
    assert res.is_error
    assert "Nowhereville" in res.text
    assert "404" in res.text
    assert TEST_API_KEY not in res.text


def test_http_error_response_is_closed(ctx, provider):
    provider.status = 500
    assert ctx.dispatcher.call("get_weather", {"location": "Tampa"}).is_error
    assert len(provider.error_bodies) == 1
    assert provider.error_bodies[0].closed


def test_zero_visibility_is_reported(ctx, provider, sample_weather):
    sample_weather["visibility"] = 0
    provider.respond_json(sample_weather)
    res = ctx.dispatcher.call("get_weather", {"location": "Tampa"})
    assert not res.is_error
    assert "Visibility:  0.0 km" in res.text


def test_unreachable_provider_hides_details(ctx, provider):
    provider.error = urllib.error.URLError(f"cannot reach ...appid={TEST_API_KEY}")
    res = ctx.dispatcher.call("get_weather", {"location": "Tampa"})
    assert res.is_error
    assert res.text == 'Failed to fetch weather for "Tampa": provider unreachable'


@pytest.mark.parametrize("mutate", [
    lambda d: d.pop("name"),
    lambda d: d["sys"].pop("country"),
    lambda d: d.__setitem__("weather", []),
    lambda d: d["main"].__setitem__("temp", "hot"),
    lambda d: d.pop("wind"),
])
def test_malformed_payload(ctx, provider, sample_weather, mutate):
    mutate(sample_weather)
    provider.respond_json(sample_weather)
    res = ctx.dispatcher.call("get_weather", {"location": "Tampa"})
    assert res.is_error
    assert res.text == 'Failed to parse weather data for "Tampa": unexpected response format'


def test_non_json_body(ctx, provider):
    provider.body = b"<html>oops</html>"
    res = ctx.dispatcher.call("get_weather", {"location": "Tampa"})
    assert res.is_error
    assert "unexpected response format" in res.text


def test_missing_location_never_calls_provider(ctx, provider):
    for args in ({}, {"location": ""}, {"location": 7}):
        assert ctx.dispatcher.call("get_weather", args).is_error
    assert provider.requests == []


def test_no_api_key_configured(provider):
    tool = WeatherTool(config=WeatherConfig(api_key=""))
    res = tool.execute({"location": "Tampa"})
    assert res.is_error
    assert provider.requests == []


def test_config_repr_masks_key():
    assert TEST_API_KEY not in repr(WeatherConfig(api_key=TEST_API_KEY))


def test_summarize_rejects_non_mapping():
    with pytest.raises(UpstreamError):
        summarize_weather(["not", "a", "dict"])


@pytest.mark.parametrize("f, c", [(32.0, "0.0"), (212.0, "100.0"), (-40.0, "-40.0"), (50.0, "10.0")])
def test_celsius_conversion(sample_weather, f, c):
    sample_weather["main"]["temp"] = f
    assert f"Temperature: {c}°C / {f:.1f}°F" in summarize_weather(sample_weather)
