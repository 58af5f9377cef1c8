"""
Custom exceptions for sqldoc.
"""


class SqldocError(Exception):
    """Base exception for all sqldoc errors."""

    pass


class SettingsError(SqldocError):
    """Raised when command-line options or the config file are invalid."""

    pass


class ConversionError(SqldocError):
    """Raised when a SQL source file cannot be turned into models."""

    def __init__(self, message: str, line: int | None = None) -> None:
        super().__init__(message)
        self.line = line


class ToolchainVersionError(SqldocError):
    """Raised when the installed sqlglot version cannot be determined."""

    pass


class OutputGenerationError(SqldocError):
    """Raised when a documentation page cannot be generated."""

    pass
