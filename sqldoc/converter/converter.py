"""
Conversion of SQL source files into a project model.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from sqldoc.converter.dependency_graph import DependencyGraphBuilder
from sqldoc.converter.metadata import MetadataLoader
from sqldoc.converter.sql_parser import SQLParser
from sqldoc.logger import Logger, LogLevel
from sqldoc.models.project import ConversionResult, Diagnostic, ModelReflection, ProjectModel
from sqldoc.shared.constants import DEFAULT_PROJECT_NAME
from sqldoc.shared.exceptions import ConversionError

if TYPE_CHECKING:
    from sqldoc.settings import Settings


class Converter:
    """
    Builds a ``ProjectModel`` from SQL files.

    Problems are recorded as diagnostics and logged through the shared logger
    as soon as they are found. A broken file never stops the conversion of
    the remaining files.
    """

    def __init__(self, logger: Logger) -> None:
        self.logger = logger
        self.dependency_builder = DependencyGraphBuilder()
        self.metadata_loader = MetadataLoader()

    def convert(self, input_files: Sequence[str], settings: "Settings") -> ConversionResult:
        """
        Convert the given SQL files into a project model.

        Args:
            input_files: SQL files to document
            settings: Run settings (dialect and project name are used)

        Returns:
            ConversionResult with the project and every diagnostic reported
        """
        diagnostics: list[Diagnostic] = []
        models: dict[str, ModelReflection] = {}
        parser = SQLParser(dialect=settings.dialect)

        self.logger.log(f"Converting {len(input_files)} file(s)", LogLevel.VERBOSE)
        for file_name in input_files:
            for model in self._convert_file(file_name, parser, diagnostics):
                if model.name in models:
                    self._report(
                        diagnostics,
                        Diagnostic(
                            LogLevel.WARN,
                            f"Model '{model.name}' is also defined in "
                            f"{models[model.name].file_path}; using this definition.",
                            file_path=file_name,
                        ),
                    )
                models[model.name] = model

        graph = self.dependency_builder.build_graph(models)
        for cycle in graph["cycles"]:
            self._report(
                diagnostics,
                Diagnostic(LogLevel.WARN, f"Circular dependency: {' -> '.join(cycle)}"),
            )

        if not models:
            self._report(
                diagnostics, Diagnostic(LogLevel.ERROR, "No SQL models found in the input files.")
            )
        else:
            self.logger.log(f"Found {len(models)} model(s)", LogLevel.VERBOSE)

        project = ProjectModel(
            name=settings.name or DEFAULT_PROJECT_NAME,
            models=models,
            dependencies=graph["dependencies"],
            dependents=graph["dependents"],
            execution_order=graph["execution_order"],
            cycles=graph["cycles"],
        )
        return ConversionResult(project=project, diagnostics=diagnostics)

    def _convert_file(
        self, file_name: str, parser: SQLParser, diagnostics: list[Diagnostic]
    ) -> list[ModelReflection]:
        try:
            content = Path(file_name).read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            self._report(
                diagnostics,
                Diagnostic(LogLevel.ERROR, f"Could not read file: {e}", file_path=file_name),
            )
            return []

        try:
            parsed = parser.parse(content, file_name)
        except ConversionError as e:
            self._report(
                diagnostics,
                Diagnostic(LogLevel.ERROR, str(e), file_path=file_name, line=e.line),
            )
            return []

        for statement in parsed.skipped:
            self.logger.log(f"{file_name} Skipping {statement} statement", LogLevel.VERBOSE)
        for warning in parsed.warnings:
            self._report(diagnostics, Diagnostic(LogLevel.WARN, warning, file_path=file_name))

        if parsed.models:
            self._apply_metadata(file_name, parsed.models, diagnostics)
        return parsed.models

    def _apply_metadata(
        self, file_name: str, models: list[ModelReflection], diagnostics: list[Diagnostic]
    ) -> None:
        metadata_file = self.metadata_loader.find(file_name)
        if metadata_file is None:
            return

        try:
            metadata = self.metadata_loader.load(metadata_file)
        except ConversionError as e:
            self._report(
                diagnostics,
                Diagnostic(LogLevel.ERROR, str(e), file_path=str(metadata_file), line=e.line),
            )
            return

        self.logger.log(f"Using metadata from {metadata_file}", LogLevel.VERBOSE)
        for model in models:
            for column in self.metadata_loader.apply(model, metadata):
                self._report(
                    diagnostics,
                    Diagnostic(
                        LogLevel.WARN,
                        f"Column '{column}' is documented but not produced by {model.name}",
                        file_path=str(metadata_file),
                    ),
                )

    def _report(self, diagnostics: list[Diagnostic], diagnostic: Diagnostic) -> None:
        diagnostics.append(diagnostic)
        self.logger.log(diagnostic.format(), diagnostic.level)
