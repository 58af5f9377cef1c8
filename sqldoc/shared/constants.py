"""
Constants shared across sqldoc.
"""

# Supported file extensions
SUPPORTED_SQL_EXTENSIONS = [".sql"]
METADATA_EXTENSIONS = [".yml", ".yaml"]

# Distribution whose version is reported as the parser toolchain
TOOLCHAIN_DISTRIBUTION = "sqlglot"

# Default settings
DEFAULT_OUTPUT_FOLDER = "docs"
DEFAULT_CONFIG_FILE = "sqldoc.toml"
DEFAULT_PROJECT_NAME = "SQL Project"

# Top-level keys accepted in the config file
CONFIG_KEYS = {"inputs", "out", "json", "name", "dialect", "exclude", "verbose"}

# Files written by the renderer
OUTPUT_FILES = {
    "index": "index.html",
    "graph_data": "graph_data.json",
    "models_folder": "models",
}
