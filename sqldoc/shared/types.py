"""
Collaborator contracts used by the application orchestrator.
"""

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from sqldoc.models.project import ConversionResult, ProjectModel
    from sqldoc.settings import Settings

# Called with a failure message when a secondary artifact cannot be written
WriteErrorHandler = Callable[[str], None]


class ProjectConverter(Protocol):
    """Turns a list of source files into a project model."""

    def convert(self, input_files: Sequence[str], settings: "Settings") -> "ConversionResult":
        """Parse the given files; diagnostics are logged by the converter itself."""
        ...


class ProjectRenderer(Protocol):
    """Turns a project model into documentation files."""

    def render(self, project: "ProjectModel", output_directory: str) -> None:
        """Write the documentation for ``project`` below ``output_directory``."""
        ...
