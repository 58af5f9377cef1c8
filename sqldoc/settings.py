"""
Run settings parsed from the command line and an optional config file.
"""

import sys
import tomllib
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import click
import sqlglot
import typer

from sqldoc.converter.file_discovery import FileDiscovery
from sqldoc.logger import Logger, LogLevel
from sqldoc.shared.constants import CONFIG_KEYS, DEFAULT_CONFIG_FILE, DEFAULT_OUTPUT_FOLDER
from sqldoc.shared.exceptions import SettingsError

PROG_NAME = "sqldoc"

# Config keys holding paths; relative values are resolved against the config file
_PATH_KEYS = ("out", "json")
_LIST_KEYS = ("inputs", "exclude")
_STRING_KEYS = ("out", "json", "name", "dialect")


class Settings:
    """
    Settings of one documentation run.

    Values come from, in increasing priority: built-in defaults, the config
    file (``--config`` or ``sqldoc.toml`` in the working directory) and the
    command line.
    """

    def __init__(self) -> None:
        self.input_files: list[str] = []
        self.out: str = DEFAULT_OUTPUT_FOLDER
        self.json: str | None = None
        self.name: str | None = None
        self.dialect: str | None = None
        self.exclude: list[str] = []
        self.verbose = False
        self.should_print_version_only = False
        self.needs_help = False
        self.config: str | None = None

    def parse_command_line(self, app: Logger, args: Sequence[str] | None = None) -> bool:
        """
        Parse command-line arguments into this settings object.

        Problems are printed to stderr and never go through ``app``, so they
        do not count as run errors.

        Args:
            app: Logger used for informational messages
            args: Arguments without the program name (defaults to sys.argv)

        Returns:
            False if the arguments or the config file are invalid
        """
        command = self._build_command()
        try:
            options = command.main(
                args=list(args) if args is not None else None,
                prog_name=PROG_NAME,
                standalone_mode=False,
            )
        except self._usage_errors(command) as e:
            e.show()
            return False

        try:
            self._apply(options)
        except SettingsError as e:
            error_prefix = typer.style("Error: ", fg=typer.colors.RED, bold=True)
            typer.echo(f"{error_prefix}{e}", err=True)
            return False

        if self.config:
            app.log(f"Loaded configuration from {self.config}", LogLevel.VERBOSE)
        return True

    def expand_input_files(self) -> None:
        """Replace input folders with the SQL files they contain."""
        self.input_files = FileDiscovery(self.exclude).expand(self.input_files)

    def usage(self) -> str:
        command = self._build_command()
        with command.make_context(PROG_NAME, [], resilient_parsing=True) as ctx:
            return command.get_help(ctx)

    def load_config(self, config_path: str | None) -> dict[str, Any]:
        """
        Load the config file.

        An explicit path must exist; without one, ``sqldoc.toml`` in the
        working directory is used when present.

        Raises:
            SettingsError: If the file is missing, invalid TOML or has
                unknown keys or wrongly typed values
        """
        if config_path is None:
            default_path = Path(DEFAULT_CONFIG_FILE)
            if not default_path.is_file():
                return {}
            path = default_path
        else:
            path = Path(config_path)
            if not path.is_file():
                raise SettingsError(f"Config file not found: {config_path}")

        try:
            with open(path, "rb") as f:
                config = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise SettingsError(f"Invalid config file {path}: {e}") from e

        unknown = sorted(set(config) - CONFIG_KEYS)
        if unknown:
            raise SettingsError(f"Unknown option(s) in {path}: {', '.join(unknown)}")
        self._validate_config_types(config, path)

        base = path.resolve().parent
        for key in _PATH_KEYS:
            if key in config:
                config[key] = str(base / config[key])
        if "inputs" in config:
            config["inputs"] = [str(base / p) for p in config["inputs"]]

        self.config = str(path)
        return config

    def _apply(self, options: dict[str, Any]) -> None:
        values = self.load_config(options["config"])
        for key in _STRING_KEYS:
            if options[key] is not None:
                values[key] = options[key]
        for key in _LIST_KEYS:
            if options[key]:
                values[key] = list(options[key])

        self.input_files = list(values.get("inputs", []))
        self.out = values.get("out", DEFAULT_OUTPUT_FOLDER)
        self.json = values.get("json")
        self.name = values.get("name")
        self.dialect = values.get("dialect")
        self.exclude = list(values.get("exclude", []))
        self.verbose = options["verbose"] or bool(values.get("verbose", False))
        self.should_print_version_only = options["version"]
        self.needs_help = options["help"]

        if self.dialect:
            try:
                sqlglot.Dialect.get_or_raise(self.dialect)
            except ValueError as e:
                raise SettingsError(f"Unsupported SQL dialect '{self.dialect}'.") from e

    @staticmethod
    def _validate_config_types(config: dict[str, Any], path: Path) -> None:
        for key in _LIST_KEYS:
            value = config.get(key)
            if value is not None and not (
                isinstance(value, list) and all(isinstance(item, str) for item in value)
            ):
                raise SettingsError(f"'{key}' in {path} must be a list of strings")
        for key in _STRING_KEYS:
            if key in config and not isinstance(config[key], str):
                raise SettingsError(f"'{key}' in {path} must be a string")
        if "verbose" in config and not isinstance(config["verbose"], bool):
            raise SettingsError(f"'verbose' in {path} must be true or false")

    @staticmethod
    def _usage_errors(command: click.Command) -> tuple[type[Exception], ...]:
        """
        Return the usage error base classes raised by ``command``.

        Newer typer releases build commands from their own copy of click,
        whose exceptions do not derive from ``click.ClickException``.
        """
        errors: list[type[Exception]] = [click.ClickException]
        for cls in type(command).__mro__:
            if cls.__name__ != "Command":
                continue
            package = cls.__module__.rpartition(".")[0]
            for module_name in (cls.__module__, f"{package}.exceptions"):
                error = getattr(sys.modules.get(module_name), "ClickException", None)
                if isinstance(error, type) and error not in errors:
                    errors.append(error)
        return tuple(errors)

    @staticmethod
    def _build_command() -> click.Command:
        cli = typer.Typer(add_completion=False, rich_markup_mode=None)

        @cli.command(
            help="Generate HTML documentation for a project of SQL models.",
            context_settings={"help_option_names": []},
        )
        def sqldoc(
            inputs: list[str] | None = typer.Argument(
                None, help="SQL files or folders to document.", show_default=False
            ),
            out: str | None = typer.Option(
                None, "-o", "--out", help=f"Output folder (default: {DEFAULT_OUTPUT_FOLDER})."
            ),
            json_path: str | None = typer.Option(
                None, "--json", help="Also write the project model as JSON to this file."
            ),
            name: str | None = typer.Option(None, "--name", help="Project title."),
            dialect: str | None = typer.Option(
                None, "--dialect", help="sqlglot dialect used to read the SQL files."
            ),
            exclude: list[str] | None = typer.Option(
                None, "--exclude", help="Glob pattern of files to skip (repeatable)."
            ),
            config: str | None = typer.Option(
                None, "-c", "--config", help=f"Config file (default: ./{DEFAULT_CONFIG_FILE})."
            ),
            verbose: bool = typer.Option(False, "-v", "--verbose", help="Enable verbose output."),
            version: bool = typer.Option(False, "--version", help="Print the version and exit."),
            help_: bool = typer.Option(False, "-h", "--help", help="Show this message and exit."),
        ) -> dict[str, Any]:
            return {
                "inputs": inputs,
                "out": out,
                "json": json_path,
                "name": name,
                "dialect": dialect,
                "exclude": exclude,
                "config": config,
                "verbose": verbose,
                "version": version,
                "help": help_,
            }

        return typer.main.get_command(cli)
