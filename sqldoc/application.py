"""
The sqldoc application.

The ``Application`` class holds the core logic of the command-line tool. A run
first hands the input files to the converter, which builds a ``ProjectModel``
(tables, views and queries plus their dependencies) and reports problems
through the application's logger. The model is then optionally dumped as JSON
and finally passed to the renderer, which writes the documentation site.
"""

import importlib.metadata
import json
import os
import re
from collections.abc import Sequence
from enum import Enum

import sqlglot
import typer

from sqldoc.converter.converter import Converter
from sqldoc.logger import ConsoleLogger, LogLevel, setup_logging
from sqldoc.output.renderer import Renderer
from sqldoc.settings import Settings
from sqldoc.shared.constants import TOOLCHAIN_DISTRIBUTION
from sqldoc.shared.exceptions import ToolchainVersionError
from sqldoc.shared.file_emitter import SafeFileEmitter
from sqldoc.shared.types import ProjectConverter, ProjectRenderer, WriteErrorHandler

VERSION = "0.1.0"

_RELEASE_VERSION = re.compile(r"^\d+(\.\d+)*")


class ApplicationState(Enum):
    """Lifecycle of one run."""

    IDLE = "idle"
    CONVERTING = "converting"
    RENDERING = "rendering"
    DONE = "done"
    ABORTED = "aborted"


def _ignore_write_error(message: str) -> None:
    """Default handler for secondary artifacts: failures are not reported."""


class Application:
    """
    The default sqldoc application.

    Owns the settings, the logger, the converter and the renderer of one run.
    Converter and renderer can be replaced by anything implementing
    ``ProjectConverter`` / ``ProjectRenderer``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        converter: ProjectConverter | None = None,
        renderer: ProjectRenderer | None = None,
        on_secondary_write_error: WriteErrorHandler | None = None,
    ) -> None:
        """
        Create a new Application instance.

        Args:
            settings: The settings used by the converter and the renderer
            converter: Converter building the project model
            renderer: Renderer writing the documentation
            on_secondary_write_error: Called when the JSON dump cannot be
                written; failures are ignored by default
        """
        self.settings = settings or Settings()
        self.logger = ConsoleLogger(self.settings)
        self.emitter = SafeFileEmitter()
        self.converter = converter or Converter(self.logger)
        self.renderer = renderer or Renderer(self.logger, self.emitter)
        self.on_secondary_write_error = on_secondary_write_error or _ignore_write_error
        self.state = ApplicationState.IDLE
        self.settings_accepted: bool | None = None

    @property
    def has_errors(self) -> bool:
        """Has an error been raised through the log method?"""
        return self.logger.has_errors

    def log(self, message: str, level: LogLevel = LogLevel.INFO) -> None:
        """
        Print a log message.

        Args:
            message: The message itself
            level: The urgency of the log message
        """
        self.logger.log(message, level)

    def run_from_command_line(self, args: Sequence[str] | None = None) -> None:
        """
        Run sqldoc from the command line.

        Args:
            args: Command-line arguments without the program name
        """
        self.settings_accepted = self.settings.parse_command_line(self, args)
        if not self.settings_accepted:
            self.state = ApplicationState.ABORTED
            return

        setup_logging(self.settings.verbose)

        if self.settings.should_print_version_only:
            self.print_version()
            self.state = ApplicationState.ABORTED
            return
        if not self.settings.input_files or self.settings.needs_help:
            typer.echo(self.settings.usage())
            self.state = ApplicationState.ABORTED
            return

        self.log(self._toolchain_description(), LogLevel.VERBOSE)

        self.settings.expand_input_files()
        self.settings.out = os.path.abspath(self.settings.out)
        self.generate(self.settings.input_files, self.settings.out)

        if not self.has_errors:
            self.log(f"Documentation generated at {self.settings.out}")

    def generate(self, input_files: Sequence[str], output_directory: str) -> None:
        """
        Run the documentation generator for the given set of files.

        Rendering always happens, even when the converter reported errors.

        Args:
            input_files: A list of SQL files whose documentation should be generated
            output_directory: Absolute path of the directory the documentation is written to
        """
        self.state = ApplicationState.CONVERTING
        result = self.converter.convert(input_files, self.settings)

        if self.settings.json:
            self.emitter.write_file(
                self.settings.json,
                json.dumps(result.project.to_object(), indent="\t"),
                False,
                on_error=self.on_secondary_write_error,
            )

        self.state = ApplicationState.RENDERING
        self.renderer.render(result.project, output_directory)
        self.state = ApplicationState.DONE

    def get_toolchain_version(self) -> str:
        """
        Return the version number of the installed sqlglot package.

        Raises:
            ToolchainVersionError: If the package metadata is missing or
                holds no usable version
        """
        try:
            version = importlib.metadata.version(TOOLCHAIN_DISTRIBUTION)
        except importlib.metadata.PackageNotFoundError as e:
            raise ToolchainVersionError(f"{TOOLCHAIN_DISTRIBUTION} is not installed") from e

        if not version or not _RELEASE_VERSION.match(version):
            raise ToolchainVersionError(
                f"Invalid {TOOLCHAIN_DISTRIBUTION} version in package metadata: {version!r}"
            )
        return version

    def get_toolchain_path(self) -> str:
        return os.path.dirname(os.path.abspath(sqlglot.__file__))

    def print_version(self) -> None:
        typer.echo(f"sqldoc {VERSION}")
        typer.echo(self._toolchain_description())

    def _toolchain_description(self) -> str:
        try:
            version = self.get_toolchain_version()
        except ToolchainVersionError as e:
            return f"Using {TOOLCHAIN_DISTRIBUTION} (version unknown: {e})"
        return f"Using {TOOLCHAIN_DISTRIBUTION} {version} from {self.get_toolchain_path()}"
