"""
Project model types.
"""

from .project import (
    ColumnReflection,
    ConversionResult,
    Diagnostic,
    ModelReflection,
    ProjectModel,
)

__all__ = [
    "ColumnReflection",
    "ModelReflection",
    "ProjectModel",
    "Diagnostic",
    "ConversionResult",
]
