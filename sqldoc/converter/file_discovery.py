"""
Expansion of input paths into the list of SQL files to document.
"""

import logging
from collections.abc import Iterable
from fnmatch import fnmatch
from pathlib import Path

from sqldoc.shared.constants import SUPPORTED_SQL_EXTENSIONS

# Configure logging
logger = logging.getLogger(__name__)


class FileDiscovery:
    """Finds SQL files below the given input paths."""

    def __init__(self, exclude: Iterable[str] | None = None):
        """
        Initialize the file discovery.

        Args:
            exclude: Glob patterns matched against file names and full paths
        """
        self.exclude = list(exclude or [])

    def expand(self, input_paths: Iterable[str]) -> list[str]:
        """
        Replace directories with the SQL files they contain.

        Files are kept as given, even when their extension is unusual or they
        do not exist, so that the converter can report them. Duplicates are
        dropped while preserving order.

        Args:
            input_paths: Files and directories from the command line

        Returns:
            List of file paths
        """
        files: list[str] = []
        for input_path in input_paths:
            path = Path(input_path)
            if path.is_dir():
                discovered = self.discover_sql_files(path)
                logger.debug(f"Discovered {len(discovered)} SQL files in {path}")
                files.extend(str(f) for f in discovered)
            elif not self.is_excluded(path):
                files.append(str(path))
        return list(dict.fromkeys(files))

    def discover_sql_files(self, folder: Path) -> list[Path]:
        sql_files = []
        for ext in SUPPORTED_SQL_EXTENSIONS:
            sql_files.extend(f for f in folder.rglob(f"*{ext}") if f.is_file())

        # Sort for consistent ordering
        return sorted(f for f in sql_files if not self.is_excluded(f))

    def is_excluded(self, path: Path) -> bool:
        return any(
            fnmatch(path.name, pattern) or fnmatch(path.as_posix(), pattern)
            for pattern in self.exclude
        )
