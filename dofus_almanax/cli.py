"""
Dofus almanax: CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Resolve preferences (stored values, then command-line overrides).
  4. Execute action.
  5. Report result to stdout.

Install and run::

    pip install -e .
    almanax --help
    almanax show
    almanax show --level 60 --language en --json
    almanax prefs set --level 200 --language de
    almanax validate-config
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="almanax",
    help="Upcoming Dofus almanax bonuses with the best available item images.",
    add_completion=False,
)
prefs_app = typer.Typer(help="Show or change the stored level / language.")
app.add_typer(prefs_app, name="prefs")


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from dofus_almanax.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except ValueError as exc:  # pydantic.ValidationError, TOMLDecodeError
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from dofus_almanax.utils.logging import configure_logging
    configure_logging(config.logging)


def _preference_store(config):
    from dofus_almanax.models.preferences import Preferences
    from dofus_almanax.preferences import JsonPreferenceStore

    defaults = Preferences(
        level=config.preferences.default_level,
        language=config.preferences.default_language,
    )
    return JsonPreferenceStore(config.preferences.store_path, defaults=defaults)


def _check_language_or_exit(config, language: str) -> None:
    supported = config.preferences.supported_languages
    if language not in supported:
        typer.echo(
            f"[ERROR] Unsupported language '{language}'. "
            f"Choose one of: {', '.join(supported)}.",
            err=True,
        )
        raise typer.Exit(code=1)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("show")
def show(
    level: Optional[int] = typer.Option(
        None, "--level", "-l", min=1, max=200,
        help="Character level (default: stored preference).",
    ),
    language: Optional[str] = typer.Option(
        None, "--language", "-L",
        help="Language code (default: stored preference).",
    ),
    as_json: bool = typer.Option(
        False, "--json", help="Print entries as JSON instead of a table.",
    ),
    images: bool = typer.Option(
        False, "--images", help="Show the resolved image URL under each day.",
    ),
    mode: str = typer.Option(
        "search", "--mode",
        help="Image matching: 'search' (per-item exact id) or 'index' (by position).",
    ),
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Path to TOML config file.",
    ),
) -> None:
    """Fetch and display the upcoming almanax days.

    On a fatal upstream error the (empty) list is still printed and the
    command exits with code 1.
    """
    from dofus_almanax.errors import AlmanaxError
    from dofus_almanax.pipeline.aggregator import AggregationMode, run_aggregation
    from dofus_almanax.reporting.formatters import entries_to_json, format_entries_table

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    try:
        agg_mode = AggregationMode(mode)
    except ValueError:
        typer.echo(f"[ERROR] Unknown mode '{mode}'. Use 'search' or 'index'.", err=True)
        raise typer.Exit(code=1)

    stored = _preference_store(config).read()
    level = level if level is not None else stored.level
    language = language or stored.language
    _check_language_or_exit(config, language)

    entries = []
    error: Optional[AlmanaxError] = None
    try:
        entries = run_aggregation(config, level, language, mode=agg_mode)
    except AlmanaxError as exc:
        error = exc

    if as_json:
        typer.echo(entries_to_json(entries))
    else:
        typer.echo(f"Almanax: level {level}, language {language}")
        typer.echo("")
        typer.echo(format_entries_table(entries, show_images=images))

    if error is not None:
        typer.echo(f"[ERROR] {error}", err=True)
        raise typer.Exit(code=1)


@prefs_app.command("show")
def prefs_show(
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Path to TOML config file.",
    ),
) -> None:
    """Print the stored level and language."""
    config = _load_config_or_exit(config_path)
    prefs = _preference_store(config).read()
    typer.echo(f"  Level:    {prefs.level}")
    typer.echo(f"  Language: {prefs.language}")


@prefs_app.command("set")
def prefs_set(
    level: Optional[int] = typer.Option(
        None, "--level", "-l", min=1, max=200, help="Character level to store.",
    ),
    language: Optional[str] = typer.Option(
        None, "--language", "-L", help="Language code to store.",
    ),
    config_path: Optional[str] = typer.Option(
        None, "--config", help="Path to TOML config file.",
    ),
) -> None:
    """Update the stored level and/or language."""
    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    if level is None and language is None:
        typer.echo("[ERROR] Nothing to set: pass --level and/or --language.", err=True)
        raise typer.Exit(code=1)
    if language is not None:
        _check_language_or_exit(config, language)

    store = _preference_store(config)
    current = store.read()
    updated = current.model_copy(
        update={
            k: v for k, v in (("level", level), ("language", language)) if v is not None
        }
    )
    store.write(updated)
    typer.echo(f"[OK] Preferences saved: level={updated.level} language={updated.language}")


@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Primary API:      {config.api.primary_base_url}")
    typer.echo(f"  Secondary API:    {config.api.secondary_base_url}")
    typer.echo(f"  Window size:      {config.api.range_size} days")
    typer.echo(f"  Default level:    {config.preferences.default_level}")
    typer.echo(f"  Default language: {config.preferences.default_language}")
    typer.echo(f"  Preferences file: {config.preferences.store_path}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


if __name__ == "__main__":
    app()
