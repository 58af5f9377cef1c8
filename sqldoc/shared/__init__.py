"""
Shared utilities, contracts and exceptions.
"""

from .exceptions import (
    ConversionError,
    OutputGenerationError,
    SettingsError,
    SqldocError,
    ToolchainVersionError,
)
from .file_emitter import SafeFileEmitter
from .types import ProjectConverter, ProjectRenderer, WriteErrorHandler

__all__ = [
    "SqldocError",
    "SettingsError",
    "ConversionError",
    "ToolchainVersionError",
    "OutputGenerationError",
    "SafeFileEmitter",
    "ProjectConverter",
    "ProjectRenderer",
    "WriteErrorHandler",
]
