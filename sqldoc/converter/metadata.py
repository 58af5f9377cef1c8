"""
YAML metadata files documenting SQL models.

A metadata file sits next to a SQL file and shares its stem
(``orders.sql`` -> ``orders.yml``)::

    description: All orders placed in the web shop.
    columns:
      - name: id
        description: Primary key.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from sqldoc.models.project import ModelReflection
from sqldoc.shared.constants import METADATA_EXTENSIONS
from sqldoc.shared.exceptions import ConversionError

logger = logging.getLogger(__name__)


class MetadataLoader:
    """Loads and applies the metadata file of a SQL file."""

    def find(self, sql_file: str | Path) -> Path | None:
        """Return the metadata file belonging to ``sql_file``, if any."""
        sql_path = Path(sql_file)
        for ext in METADATA_EXTENSIONS:
            candidate = sql_path.with_suffix(ext)
            if candidate.is_file():
                return candidate
        return None

    def load(self, metadata_file: Path) -> dict[str, Any]:
        """
        Load and validate a metadata file.

        Args:
            metadata_file: Path to the YAML file

        Returns:
            Dict with an optional ``description`` and a ``columns`` mapping
            of column name to description

        Raises:
            ConversionError: If the file is not valid YAML or has the wrong shape
        """
        try:
            with metadata_file.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            raise ConversionError(
                f"Invalid YAML in {metadata_file.name}: {getattr(e, 'problem', None) or e}",
                line=mark.line + 1 if mark is not None else None,
            ) from e
        except OSError as e:
            raise ConversionError(f"Could not read {metadata_file.name}: {e}") from e

        if data is None:
            return {"description": None, "columns": {}}
        if not isinstance(data, dict):
            raise ConversionError(f"{metadata_file.name} is not a valid YAML dictionary")

        description = data.get("description")
        if description is not None and not isinstance(description, str):
            raise ConversionError(f"'description' in {metadata_file.name} must be a string")

        columns: dict[str, str | None] = {}
        for column in data.get("columns") or []:
            if not isinstance(column, dict) or not isinstance(column.get("name"), str):
                raise ConversionError(
                    f"Every entry of 'columns' in {metadata_file.name} needs a 'name'"
                )
            columns[column["name"]] = column.get("description")

        logger.debug(f"Loaded metadata for {len(columns)} columns from {metadata_file}")
        return {"description": description, "columns": columns}

    def apply(self, model: ModelReflection, metadata: dict[str, Any]) -> list[str]:
        """
        Copy descriptions from ``metadata`` onto ``model``.

        The metadata description replaces the one taken from the SQL
        comments.

        Returns:
            Names of documented columns the model does not have
        """
        if metadata["description"]:
            model.description = metadata["description"].strip()

        known = {column.name: column for column in model.columns}
        unknown = []
        for name, description in metadata["columns"].items():
            if name in known:
                known[name].description = description
            else:
                unknown.append(name)
        return unknown
