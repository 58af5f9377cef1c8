"""
sqldoc

A documentation generator for projects of SQL models.
"""

from .application import VERSION, Application, ApplicationState
from .converter import Converter
from .logger import ConsoleLogger, Logger, LogLevel
from .models import ConversionResult, Diagnostic, ModelReflection, ProjectModel
from .output import Renderer
from .settings import Settings
from .shared import SafeFileEmitter

__version__ = VERSION

__all__ = [
    "Application",
    "ApplicationState",
    "Settings",
    "Converter",
    "Renderer",
    "SafeFileEmitter",
    "ConsoleLogger",
    "Logger",
    "LogLevel",
    "ProjectModel",
    "ModelReflection",
    "ConversionResult",
    "Diagnostic",
    "__version__",
]
