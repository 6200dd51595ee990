"""CLI entrypoint for env-overlay — typer app with `names` and `apply` commands."""

import sys
from pathlib import Path

import structlog
import typer
from pydantic import TypeAdapter

from env_overlay.config.infrastructure.model_import import import_model
from env_overlay.config.infrastructure.observer import StructlogConfigObserver
from env_overlay.config.infrastructure.yaml_loader import YamlConfigLoader
from env_overlay.core.errors import EnvOverlayError
from env_overlay.overlay.application.catalog import variable_catalog
from env_overlay.overlay.application.engine import OverlayEngine
from env_overlay.overlay.domain.settings import OverlaySettings
from env_overlay.overlay.infrastructure.observer import StructlogOverlayObserver

app = typer.Typer(add_completion=False)

_LOG_LEVELS = {"debug": 10, "info": 20, "warning": 30, "error": 40}


def _configure_structlog(log_format: str, log_level: str) -> None:
    """Configure structlog based on the requested format.

    Logs go to stderr so that stdout carries only command output.
    """
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(
            f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.",
            err=True,
        )
        raise typer.Exit(code=1)

    level = _LOG_LEVELS.get(log_level)
    if level is None:
        typer.echo(
            f"Invalid log level: {log_level!r}. Must be one of {', '.join(_LOG_LEVELS)}.",
            err=True,
        )
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


@app.command()
def names(
    target: str = typer.Argument(..., help="Config model as 'module:Class'"),
    prefix: str = typer.Option("", "--prefix", "-p", help="Root variable prefix"),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Base config YAML (defaults if omitted)"
    ),
    log_format: str = typer.Option(
        "console", "--log-format", help="Log format: 'console' or 'json'"
    ),
    log_level: str = typer.Option("warning", "--log-level", help="Minimum log level"),
) -> None:
    """List the environment variables a config model reads."""
    _configure_structlog(log_format=log_format, log_level=log_level)
    try:
        model_type = import_model(target=target)
        loader = YamlConfigLoader(observer=StructlogConfigObserver())
        cfg = loader.load(model_type=model_type, path=config_path)
        for name in variable_catalog(value=cfg, prefix=prefix):
            typer.echo(name)
    except EnvOverlayError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc


@app.command()
def apply(
    target: str = typer.Argument(..., help="Config model as 'module:Class'"),
    prefix: str = typer.Option("", "--prefix", "-p", help="Root variable prefix"),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Base config YAML (defaults if omitted)"
    ),
    no_legacy: bool = typer.Option(
        False, "--no-legacy", help="Ignore single-underscore legacy variable names"
    ),
    log_format: str = typer.Option(
        "console", "--log-format", help="Log format: 'console' or 'json'"
    ),
    log_level: str = typer.Option("warning", "--log-level", help="Minimum log level"),
) -> None:
    """Load a base config, overlay the process environment and print it as JSON."""
    _configure_structlog(log_format=log_format, log_level=log_level)
    try:
        model_type = import_model(target=target)
        loader = YamlConfigLoader(observer=StructlogConfigObserver())
        cfg = loader.load(model_type=model_type, path=config_path)

        engine = OverlayEngine(
            observer=StructlogOverlayObserver(),
            settings=OverlaySettings(accept_legacy_names=not no_legacy),
        )
        engine.overlay(value=cfg, prefix=prefix)
    except EnvOverlayError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(TypeAdapter(model_type).dump_json(cfg, indent=2).decode("utf-8"))


if __name__ == "__main__":
    app()
