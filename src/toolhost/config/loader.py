from __future__ import annotations

import os
import re
from dataclasses import replace
from pathlib import Path
from typing import Any

import yaml
from platformdirs import user_config_dir

from .models import DEFAULT_WEATHER_URL, HostConfig, WeatherConfig
from ..errors import ConfigError

APP_NAME = "toolhost"
CONFIG_FILENAME = "toolhost.yaml"
API_KEY_ENV = "TOOLHOST_WEATHER_API_KEY"

_ENV_PATTERN = re.compile(r"\$\{(\w+)\}")


def _candidate_paths(cwd: Path) -> list[Path]:
    # global first, project overrides it
    return [
        Path(user_config_dir(APP_NAME)) / CONFIG_FILENAME,
        cwd / CONFIG_FILENAME,
    ]


def _load_yaml(p: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config {p}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config {p} must contain a mapping at the top level.")
    return data


def _merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge_dicts(out[k], v)
        else:
            out[k] = v
    return out


def _expand_env_placeholders(s: str) -> str:
    def repl(m: re.Match) -> str:
        var = m.group(1)
        val = os.getenv(var)
        if not val:
            raise ConfigError(f"Placeholder '${{{var}}}' not found in environment or is empty.")
        return val

    return _ENV_PATTERN.sub(repl, s)


def _get_str(obj: dict[str, Any], key: str, where: str) -> str | None:
    v = obj.get(key)
    if v is None:
        return None
    if not isinstance(v, (str, int, float)) or isinstance(v, bool):
        raise ConfigError(f"{where}{key} must be a string.")
    return str(v).strip()


def build_config(data: dict[str, Any], *, base_dir: Path, loaded_from: Path | None = None) -> HostConfig:
    """Turn a merged config mapping into a HostConfig.

    Relative `files_dir` values are taken relative to `base_dir` (the
    directory of the file that supplied them).
    """
    cfg = HostConfig(loaded_from=loaded_from)

    server = data.get("server") or {}
    if not isinstance(server, dict):
        raise ConfigError("server must be a mapping.")
    name = _get_str(server, "name", "server.")
    version = _get_str(server, "version", "server.")
    if name:
        cfg = replace(cfg, server_name=name)
    if version:
        cfg = replace(cfg, server_version=version)

    files_dir = _get_str(data, "files_dir", "")
    if files_dir:
        p = Path(_expand_env_placeholders(files_dir)).expanduser()
        if not p.is_absolute():
            p = base_dir / p
        cfg = replace(cfg, files_dir=Path(os.path.normpath(os.path.abspath(p))))

    level = _get_str(data, "log_level", "")
    if level:
        cfg = replace(cfg, log_level=level.upper())

    weather = data.get("weather") or {}
    if not isinstance(weather, dict):
        raise ConfigError("weather must be a mapping.")
    api_key = _get_str(weather, "api_key", "weather.") or ""
    api_key = _expand_env_placeholders(api_key) if api_key else os.getenv(API_KEY_ENV, "")
    base_url = _get_str(weather, "base_url", "weather.") or DEFAULT_WEATHER_URL
    cfg = replace(cfg, weather=WeatherConfig(api_key=api_key.strip(), base_url=base_url))
    return cfg


def load_config(*, cwd: Path | None = None, explicit_path: Path | None = None) -> HostConfig:
    """Load host config.

    Merge order: global < project < explicit_path. A missing explicit file is
    an error; missing global/project files are skipped.
    """
    cwd = cwd or Path.cwd()
    merged: dict[str, Any] = {}
    loaded_from: Path | None = None
    base_dir = cwd

    for p in _candidate_paths(cwd):
        if p.is_file():
            obj = _load_yaml(p)
            merged = _merge_dicts(merged, obj)
            loaded_from = p
            if "files_dir" in obj:
                base_dir = p.parent

    if explicit_path is not None:
        p = explicit_path.expanduser().resolve()
        if not p.is_file():
            raise ConfigError(f"Config file not found: {p}")
        obj = _load_yaml(p)
        merged = _merge_dicts(merged, obj)
        loaded_from = p
        if "files_dir" in obj:
            base_dir = p.parent

    return build_config(merged, base_dir=base_dir, loaded_from=loaded_from)
