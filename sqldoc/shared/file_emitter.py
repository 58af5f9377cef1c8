"""
Best-effort file writing with on-demand creation of parent directories.
"""

import codecs
import logging
import os
from pathlib import Path

from sqldoc.shared.types import WriteErrorHandler

logger = logging.getLogger(__name__)


class SafeFileEmitter:
    """
    Writes files, creating any missing ancestor directories first.

    Directories observed to exist are remembered in ``existing_directories``
    so repeated writes into the same tree skip the filesystem check. Entries
    are never removed; a directory deleted by someone else mid-run is not
    noticed.
    """

    def __init__(self) -> None:
        self.existing_directories: dict[str, bool] = {}

    def write_file(
        self,
        file_name: str | Path,
        data: str | bytes,
        write_byte_order_mark: bool,
        on_error: WriteErrorHandler | None = None,
    ) -> None:
        """
        Write ``data`` to ``file_name``.

        Failures are never raised. They are passed to ``on_error`` when a
        handler is given and dropped otherwise.

        Args:
            file_name: Target file path
            data: Text (encoded as UTF-8) or raw bytes (written verbatim)
            write_byte_order_mark: Prefix text data with a UTF-8 BOM
            on_error: Optional callback receiving the failure message
        """
        try:
            target = os.path.abspath(os.fspath(file_name))
            self.ensure_directories_exist(os.path.dirname(target))
            with open(target, "wb") as f:
                f.write(self._encode(data, write_byte_order_mark))
        except (OSError, ValueError) as e:
            logger.debug(f"Failed to write {file_name}: {e}")
            if on_error:
                on_error(str(e))

    def ensure_directories_exist(self, directory_path: str) -> None:
        """Create ``directory_path`` and any missing parents, top-down."""
        if len(directory_path) > self._root_length(directory_path) and not self.directory_exists(
            directory_path
        ):
            self.ensure_directories_exist(os.path.dirname(directory_path))
            self._create_directory(directory_path)
            self.existing_directories[directory_path] = True

    def directory_exists(self, directory_path: str) -> bool:
        if directory_path in self.existing_directories:
            return True
        if os.path.isdir(directory_path):
            self.existing_directories[directory_path] = True
            return True
        return False

    def _create_directory(self, directory_path: str) -> None:
        logger.debug(f"Creating directory {directory_path}")
        os.mkdir(directory_path)

    @staticmethod
    def _root_length(path: str) -> int:
        return len(Path(path).anchor)

    @staticmethod
    def _encode(data: str | bytes, write_byte_order_mark: bool) -> bytes:
        if isinstance(data, bytes):
            return data
        encoded = data.encode("utf-8")
        if write_byte_order_mark:
            return codecs.BOM_UTF8 + encoded
        return encoded
