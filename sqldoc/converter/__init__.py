"""
Converter Module

Parses SQL files with sqlglot and builds the project model.
"""

from .converter import Converter
from .dependency_graph import DependencyGraphBuilder
from .file_discovery import FileDiscovery
from .metadata import MetadataLoader
from .sql_parser import ParsedFile, SQLParser

__all__ = [
    "Converter",
    "DependencyGraphBuilder",
    "FileDiscovery",
    "MetadataLoader",
    "ParsedFile",
    "SQLParser",
]
