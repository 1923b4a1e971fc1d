from __future__ import annotations

import json
import sys
from dataclasses import replace
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .app_context import AppContext
from .config.loader import load_config
from .config.models import HostConfig
from .errors import ConfigError
from .util.log import configure_logging, err_console

app = typer.Typer(add_completion=False, help="toolhost: a stdio tool server (get_weather, read_file).")
console = Console()


def _load(config: Path | None, files_dir: Path | None = None, log_level: str | None = None) -> HostConfig:
    try:
        cfg = load_config(cwd=Path.cwd(), explicit_path=config)
    except ConfigError as e:
        raise typer.BadParameter(str(e), param_hint="--config") from e
    if files_dir is not None:
        cfg = replace(cfg, files_dir=files_dir.expanduser().resolve())
    if log_level:
        cfg = replace(cfg, log_level=log_level.upper())
    return cfg


@app.command()
def serve(
    config: Path = typer.Option(None, "--config", help="YAML config path (default: ./toolhost.yaml if present)."),
    files_dir: Path = typer.Option(None, "--files-dir", help="Sandbox directory for read_file."),
    log_level: str = typer.Option(None, "--log-level", help="DEBUG/INFO/WARNING/ERROR (logs go to stderr)."),
):
    """Serve tools over stdin/stdout until stdin closes."""
    cfg = _load(config, files_dir, log_level)
    configure_logging(cfg.log_level)
    ctx = AppContext.from_config(cfg)
    if not cfg.files_dir.is_dir():
        err_console.print(f"[yellow]Warning[/yellow]: files directory does not exist: {cfg.files_dir}")
    ctx.server().serve_forever()


@app.command("tools")
def list_tools(
    config: Path = typer.Option(None, "--config", help="YAML config path."),
):
    """Show the registered tools and their parameters."""
    ctx = AppContext.from_config(_load(config))

    table = Table(title=f"{ctx.info.name} {ctx.info.version}")
    table.add_column("tool", style="bold green", no_wrap=True)
    table.add_column("description")
    table.add_column("parameters", style="bright_cyan")
    for spec in ctx.tools.list_specs():
        params = ", ".join(
            f"{p.name}: {p.kind}{'' if p.required else '?'}" for p in spec.parameters
        )
        table.add_row(spec.name, spec.description, params or "(none)")
    console.print(table)


@app.command()
def call(
    name: str = typer.Argument(..., help="Tool name, e.g. read_file."),
    args: str = typer.Option("{}", "--args", "-a", help="Tool arguments as a JSON object."),
    config: Path = typer.Option(None, "--config", help="YAML config path."),
    files_dir: Path = typer.Option(None, "--files-dir", help="Sandbox directory for read_file."),
):
    """Run one tool call locally and print its result."""
    try:
        arguments = json.loads(args)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"not valid JSON: {e}", param_hint="--args") from e

    cfg = _load(config, files_dir)
    configure_logging(cfg.log_level)
    ctx = AppContext.from_config(cfg)
    result = ctx.dispatcher.call(name, arguments)
    if result.is_error:
        err_console.print(f"[red]Error[/red]: {result.text}")
        raise typer.Exit(code=1)
    sys.stdout.write(result.text)
    if not result.text.endswith("\n"):
        sys.stdout.write("\n")


if __name__ == "__main__":
    app()
