"""Site settings CLI.

Command-line access to a store file: resolve settings for a URL or a
pattern, merge new settings, and validate configuration.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Final

import typer
import yaml

from sitesettings.errors import SiteSettingsError
from sitesettings.patterns.url import host_pattern_for_url
from sitesettings.persistence import load_store_file, save_store_file
from sitesettings.settings.user import UserSettings
from sitesettings.store import SiteSettingsStore, merge_setting

# ── CLI setup ────────────────────────────────────────────────────────────────
app = typer.Typer(help="Per-site settings keyed by URL patterns", add_completion=False)
config_app = typer.Typer(help="Config helpers")
app.add_typer(config_app, name="config")

logger: Final = logging.getLogger(__name__)  # Will be "sitesettings.cli"

CONFIG_OPTION = typer.Option(None, "--config", "-c", exists=True, dir_okay=False)
STORE_OPTION = typer.Option(None, "--store", "-s", dir_okay=False, help="Store file override")
DEBUG_OPTION = typer.Option(False, "--debug", help="Enable debug logging")
URL_ARGUMENT = typer.Argument(..., help="Absolute URL, e.g. https://www.brave.com/about")
PATTERN_ARGUMENT = typer.Argument(..., help="Pattern, e.g. https?://*.brave.com:*")


def _fail(message: str) -> typer.Exit:
    typer.secho(message, fg=typer.colors.RED, err=True)
    return typer.Exit(code=1)


def _setup(config: Path | None, debug: bool) -> UserSettings:
    try:
        settings = UserSettings.load_or_default(config)
    except (FileNotFoundError, RuntimeError) as exc:
        raise _fail(str(exc)) from exc

    logging.basicConfig(
        level=logging.DEBUG if debug else settings.logging_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )
    return settings


def _open_store(settings: UserSettings, store: Path | None) -> tuple[Path, SiteSettingsStore]:
    path = store or settings.store_file
    try:
        return path, load_store_file(path)
    except SiteSettingsError as exc:
        raise _fail(str(exc)) from exc


def _echo_yaml(data: Any) -> None:
    typer.echo(yaml.safe_dump(data, sort_keys=False, allow_unicode=True).rstrip())


@app.command()
def url(
    target: str = URL_ARGUMENT,
    config: Path | None = CONFIG_OPTION,
    store: Path | None = STORE_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Show the effective settings for a URL."""
    settings = _setup(config, debug)
    _, site_settings = _open_store(settings, store)

    record = site_settings.resolve_for_url(target)
    if record is None:
        raise _fail(f"No settings apply to {target}")
    _echo_yaml(record)


@app.command()
def pattern(
    target: str = PATTERN_ARGUMENT,
    config: Path | None = CONFIG_OPTION,
    store: Path | None = STORE_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Show the settings for a pattern, including broader patterns beneath it."""
    settings = _setup(config, debug)
    _, site_settings = _open_store(settings, store)

    record = site_settings.resolve_for_host_pattern(target)
    if record is None:
        raise _fail(f"No settings stored for {target}")
    _echo_yaml(record)


@app.command("set")
def set_setting(
    target: str = PATTERN_ARGUMENT,
    key: str = typer.Argument(..., help="Setting name"),
    value: str = typer.Argument(..., help="Value, parsed as a YAML scalar"),
    config: Path | None = CONFIG_OPTION,
    store: Path | None = STORE_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Merge one setting into a pattern and save the store."""
    settings = _setup(config, debug)
    path, site_settings = _open_store(settings, store)

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError:
        parsed_value = value

    site_settings = merge_setting(site_settings, target, key, parsed_value)
    try:
        save_store_file(site_settings, path, ranked=settings.sort_patterns)
    except SiteSettingsError as exc:
        raise _fail(str(exc)) from exc
    typer.secho(f"{target}: {key} = {parsed_value!r}", fg=typer.colors.GREEN)


@app.command("list")
def list_patterns(
    config: Path | None = CONFIG_OPTION,
    store: Path | None = STORE_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """List every stored pattern, most specific first."""
    settings = _setup(config, debug)
    _, site_settings = _open_store(settings, store)

    if not len(site_settings):
        typer.echo("No patterns stored")
        return
    _echo_yaml({p: site_settings.get(p) for p in site_settings.patterns()})


@app.command()
def origin(target: str = URL_ARGUMENT) -> None:
    """Print the site-level pattern for a URL."""
    host_pattern = host_pattern_for_url(target)
    if host_pattern is None:
        raise _fail(f"Not an absolute URL: {target}")
    typer.echo(host_pattern)


# ───────────────────────── config sub-commands ───────────────────────────────
@config_app.command("validate")
def validate_config(file: Path):
    """Validate a YAML config file against the schema."""
    try:
        UserSettings.load(file)
        typer.echo("✅ Config valid")
    except (FileNotFoundError, RuntimeError) as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


# ───────────────────────── module entrypoint ────────────────────────────────
if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        sys.exit(0)
