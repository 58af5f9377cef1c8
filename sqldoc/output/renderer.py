"""
Documentation site renderer for sqldoc projects.
"""

import json
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from sqldoc.logger import Logger, LogLevel
from sqldoc.models.project import ModelReflection, ProjectModel
from sqldoc.shared.constants import OUTPUT_FILES
from sqldoc.shared.exceptions import OutputGenerationError
from sqldoc.shared.file_emitter import SafeFileEmitter

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]')


class Renderer:
    """Generates a static HTML documentation site from a project model."""

    def __init__(self, logger: Logger, emitter: SafeFileEmitter | None = None) -> None:
        """
        Initialize the renderer.

        Args:
            logger: Logger receiving rendering errors
            emitter: File emitter used for every output file
        """
        self.logger = logger
        self.emitter = emitter or SafeFileEmitter()

        # Set up Jinja2 template environment
        templates_dir = Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html"]),
        )

    def render(self, project: ProjectModel, output_directory: str) -> None:
        """
        Render ``project`` into ``output_directory``.

        Each page is rendered and written on its own; a failing page is
        logged as an error and the remaining pages are still written.
        """
        output_path = Path(output_directory)
        pages = page_filenames(project.models)
        self.logger.log(f"Rendering {len(project.models)} model page(s)", LogLevel.VERBOSE)

        index_context = self._index_context(project, pages)
        self._render_page("index.html", output_path / OUTPUT_FILES["index"], index_context)
        for name, model in sorted(project.models.items()):
            target = output_path / OUTPUT_FILES["models_folder"] / pages[name]
            self._render_page("model.html", target, self._model_context(project, model, pages))

        self._write(
            output_path / OUTPUT_FILES["graph_data"],
            json.dumps(self._graph_data(project), indent=2),
        )

    def _render_page(self, template_name: str, target: Path, context: dict[str, Any]) -> None:
        try:
            html = self._render_template(template_name, context)
        except OutputGenerationError as e:
            self.logger.log(str(e), LogLevel.ERROR)
            return
        self._write(target, html)

    def _render_template(self, template_name: str, context: dict[str, Any]) -> str:
        try:
            return self.env.get_template(template_name).render(**context)
        except TemplateError as e:
            raise OutputGenerationError(f"Failed to render {template_name}: {e}") from e

    def _write(self, target: Path, content: str) -> None:
        self.emitter.write_file(
            target,
            content,
            False,
            on_error=lambda message: self.logger.log(
                f"Could not write {target}: {message}", LogLevel.ERROR
            ),
        )

    def _index_context(self, project: ProjectModel, pages: dict[str, str]) -> dict[str, Any]:
        models = [
            {
                "name": name,
                "href": f"{OUTPUT_FILES['models_folder']}/{pages[name]}",
                "kind": model.kind,
                "summary": (model.description or "").split("\n")[0],
                "columns_count": len(model.columns),
            }
            for name, model in sorted(project.models.items())
        ]
        return {
            "project_name": project.name,
            "models": models,
            "execution_order": project.execution_order,
            "cycles": project.cycles,
        }

    def _model_context(
        self, project: ProjectModel, model: ModelReflection, pages: dict[str, str]
    ) -> dict[str, Any]:
        def link(name: str) -> dict[str, Any]:
            return {
                "name": name,
                "href": pages.get(name),
                "is_model": name in pages,
            }

        return {
            "project_name": project.name,
            "model": model,
            "dependencies": [link(dep) for dep in project.dependencies.get(model.name, [])],
            "dependents": [link(dep) for dep in project.dependents.get(model.name, [])],
        }

    def _graph_data(self, project: ProjectModel) -> dict[str, Any]:
        referenced = {dep for deps in project.dependencies.values() for dep in deps}
        nodes = sorted(set(project.models) | referenced)
        edges = [
            [dep, name] for name, deps in sorted(project.dependencies.items()) for dep in deps
        ]
        return {
            "nodes": nodes,
            "edges": edges,
            "dependencies": project.dependencies,
            "dependents": project.dependents,
            "execution_order": project.execution_order,
            "cycles": project.cycles,
        }


def safe_filename(name: str) -> str:
    """Convert a model name to a safe file name."""
    return _UNSAFE_FILENAME_CHARS.sub("_", name)


def page_filenames(names: Iterable[str]) -> dict[str, str]:
    """
    Map model names to unique page file names.

    Names whose safe file names clash, ignoring case, get a numeric suffix
    in sorted name order.
    """
    pages: dict[str, str] = {}
    taken: set[str] = set()
    for name in sorted(names):
        stem = candidate = safe_filename(name)
        counter = 2
        while candidate.lower() in taken:
            candidate = f"{stem}-{counter}"
            counter += 1
        taken.add(candidate.lower())
        pages[name] = f"{candidate}.html"
    return pages
