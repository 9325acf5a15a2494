"""
Typer-based CLI for configninja.

Builds a config directory the same way the library does and prints the
result, which is handy when checking what a deployment will actually see:

- show: the merged config (optionally flattened, optionally with meta)
- raw: one raw file as it was parsed
- files: the file plan and which files were found
"""

import json
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from configninja.core.builder import ConfigBuilder
from configninja.core.errors import ConfigError
from configninja.core.merge import flatten
from configninja.utils.logger import DEFAULT_LOG_LEVEL, setup_logging

from .exit_codes import CliExit

app = typer.Typer(
    name="configninja",
    help="configninja - inspect environment-aware JSON config directories",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()

CLI_CONFIG_ID = "cli"


@app.callback()
def main(
    log_level: str = typer.Option(
        DEFAULT_LOG_LEVEL,
        "--log-level",
        envvar="CONFIGNINJA_LOG_LEVEL",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    ),
):
    """configninja - inspect environment-aware JSON config directories"""
    setup_logging(level=log_level)


def _build(
    directory: Path,
    environment: Optional[str],
    local: Optional[List[str]],
    short: bool,
    single: Optional[str],
    require_local: bool,
) -> ConfigBuilder:
    options: dict[str, Any] = {
        "short_filenames": short,
        "require_local_config": require_local,
        "single": single,
    }
    if local:
        options["local_config_files"] = local
    try:
        return ConfigBuilder(CLI_CONFIG_ID, directory, environment, options)
    except ConfigError as err:
        raise CliExit.config_error(err) from err


def _print_json(data: Any) -> None:
    console.print_json(json.dumps(data, default=str))


DirectoryArg = typer.Argument(Path("./config"), help="Config directory")
EnvOption = typer.Option(None, "--env", "-e", help="Environment to load (defaults to $APP_ENV)")
LocalOption = typer.Option(
    None, "--local", "-l", help="Local config file to merge (repeat for each file)"
)
ShortOption = typer.Option(False, "--short", help="Filenames omit the .config infix")
SingleOption = typer.Option(None, "--single", help="Load exactly one named file")
RequireLocalOption = typer.Option(
    False, "--require-local", help="Fail when a local config file is missing"
)


@app.command()
def show(
    directory: Path = DirectoryArg,
    environment: Optional[str] = EnvOption,
    local: Optional[List[str]] = LocalOption,
    short: bool = ShortOption,
    single: Optional[str] = SingleOption,
    require_local: bool = RequireLocalOption,
    flat: bool = typer.Option(False, "--flat", help="Print dotted paths instead of nested JSON"),
    meta: bool = typer.Option(False, "--meta", help="Also print load metadata"),
):
    """Print the merged config."""
    builder = _build(directory, environment, local, short, single, require_local)
    values = builder.get_values()
    _print_json(flatten(values) if flat else values)
    if meta:
        _print_json(builder.get_meta().to_dict())


@app.command()
def raw(
    name: str = typer.Argument(..., help="Logical name of the file, e.g. production"),
    directory: Path = DirectoryArg,
    environment: Optional[str] = EnvOption,
    local: Optional[List[str]] = LocalOption,
    short: bool = ShortOption,
    single: Optional[str] = SingleOption,
    require_local: bool = RequireLocalOption,
):
    """Print one raw config file as it was parsed."""
    builder = _build(directory, environment, local, short, single, require_local)
    raw_files = builder.get_raw()
    if name not in raw_files:
        raise CliExit.config_error(ConfigError(f'There is no raw config named "{name}".'))
    _print_json(raw_files[name])


@app.command()
def files(
    directory: Path = DirectoryArg,
    environment: Optional[str] = EnvOption,
    local: Optional[List[str]] = LocalOption,
    short: bool = ShortOption,
    single: Optional[str] = SingleOption,
    require_local: bool = RequireLocalOption,
):
    """List the files the config is built from."""
    builder = _build(directory, environment, local, short, single, require_local)
    raw_files = builder.get_raw()

    table = Table(title=f"{builder.options.directory} ({builder.options.environment})")
    table.add_column("Type")
    table.add_column("File")
    table.add_column("Loaded")
    for item in builder.get_meta().loaded_files:
        loaded = "[green]yes[/green]" if item.filename in raw_files else "[dim]missing[/dim]"
        table.add_row(item.type, item.filename, loaded)
    console.print(table)


if __name__ == "__main__":
    app()
