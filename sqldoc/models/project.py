"""
Project model produced by the converter and consumed by the renderer.
"""

from dataclasses import dataclass, field
from typing import Any

from sqldoc.logger import LogLevel


@dataclass
class ColumnReflection:
    """A column of a documented model."""

    name: str
    datatype: str = ""
    description: str | None = None

    def to_object(self) -> dict[str, Any]:
        return {"name": self.name, "datatype": self.datatype, "description": self.description}


@dataclass
class ModelReflection:
    """A table, view or query defined in one of the project's SQL files."""

    name: str
    table: str
    schema: str | None = None
    kind: str = "query"
    file_path: str | None = None
    description: str | None = None
    columns: list[ColumnReflection] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    sql: str = ""

    def to_object(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "schema": self.schema,
            "table": self.table,
            "kind": self.kind,
            "file_path": self.file_path,
            "description": self.description,
            "columns": [column.to_object() for column in self.columns],
            "sources": list(self.sources),
            "sql": self.sql,
        }


@dataclass
class ProjectModel:
    """
    Structured representation of a SQL project.

    ``dependencies`` maps every model to the sources it reads (project models
    and external tables alike); ``dependents`` maps every model to the
    project models reading it.
    """

    name: str
    models: dict[str, ModelReflection] = field(default_factory=dict)
    dependencies: dict[str, list[str]] = field(default_factory=dict)
    dependents: dict[str, list[str]] = field(default_factory=dict)
    execution_order: list[str] = field(default_factory=list)
    cycles: list[list[str]] = field(default_factory=list)

    def to_object(self) -> dict[str, Any]:
        """Return the project as plain JSON-compatible data."""
        return {
            "name": self.name,
            "models": [self.models[name].to_object() for name in sorted(self.models)],
            "dependencies": {name: list(deps) for name, deps in self.dependencies.items()},
            "dependents": {name: list(deps) for name, deps in self.dependents.items()},
            "execution_order": list(self.execution_order),
            "cycles": [list(cycle) for cycle in self.cycles],
        }


@dataclass
class Diagnostic:
    """A warning or error found while converting the project."""

    level: LogLevel
    message: str
    file_path: str | None = None
    line: int | None = None

    def format(self) -> str:
        location = self.file_path or ""
        if location and self.line is not None:
            location = f"{location}:{self.line}"
        return f"{location} {self.message}" if location else self.message


@dataclass
class ConversionResult:
    """Project model and the diagnostics recorded while building it."""

    project: ProjectModel
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(d.level == LogLevel.ERROR for d in self.diagnostics)
