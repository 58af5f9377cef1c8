"""
Pytest configuration and shared fixtures for sqldoc tests.
"""

from pathlib import Path

import pytest

from sqldoc.logger import LogLevel
from sqldoc.settings import Settings


class RecordingLogger:
    """Logger collecting messages instead of printing them."""

    def __init__(self):
        self.messages: list[tuple[str, LogLevel]] = []
        self.has_errors = False

    def log(self, message: str, level: LogLevel = LogLevel.INFO) -> None:
        if level == LogLevel.ERROR:
            self.has_errors = True
        self.messages.append((message, level))

    def at(self, level: LogLevel) -> list[str]:
        return [message for message, message_level in self.messages if message_level == level]


@pytest.fixture
def recording_logger():
    """Create a logger that records messages."""
    return RecordingLogger()


@pytest.fixture
def settings():
    """Create default settings."""
    return Settings()


@pytest.fixture
def sql_project(tmp_path) -> Path:
    """Create a small SQL project and return its models folder."""
    models = tmp_path / "models" / "analytics"
    models.mkdir(parents=True)
    (models / "orders.sql").write_text(
        "-- All orders placed in the web shop.\n"
        "CREATE TABLE analytics.orders AS\n"
        "SELECT o.id, o.customer_id, CAST(o.amount AS DECIMAL(10, 2)) AS amount\n"
        "FROM raw.orders AS o\n"
    )
    (models / "customers.sql").write_text(
        "-- One row per customer.\n"
        "SELECT c.id, c.name FROM raw.customers AS c\n"
    )
    (models / "customer_orders.sql").write_text(
        "CREATE VIEW analytics.customer_orders AS\n"
        "SELECT c.name, COUNT(*) AS order_count\n"
        "FROM analytics.customers AS c JOIN orders AS o ON o.customer_id = c.id\n"
        "GROUP BY c.name\n"
    )
    return tmp_path / "models"
