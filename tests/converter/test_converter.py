"""
Tests for the converter.
"""

from sqldoc.converter.converter import Converter
from sqldoc.logger import LogLevel


class TestConverter:
    """Test conversion of SQL files into a project model."""

    def test_converts_project(self, sql_project, settings, recording_logger):
        files = sorted(str(p) for p in sql_project.rglob("*.sql"))

        result = Converter(recording_logger).convert(files, settings)

        project = result.project
        assert sorted(project.models) == [
            "analytics.customer_orders",
            "analytics.customers",
            "analytics.orders",
        ]
        assert result.diagnostics == []
        assert recording_logger.has_errors is False

    def test_dependencies_are_resolved(self, sql_project, settings, recording_logger):
        files = sorted(str(p) for p in sql_project.rglob("*.sql"))

        project = Converter(recording_logger).convert(files, settings).project

        assert sorted(project.dependencies["analytics.customer_orders"]) == [
            "analytics.customers",
            "analytics.orders",
        ]
        assert project.dependencies["analytics.orders"] == ["raw.orders"]
        assert project.dependents["analytics.orders"] == ["analytics.customer_orders"]
        order = project.execution_order
        assert order.index("analytics.orders") < order.index("analytics.customer_orders")
        assert order.index("analytics.customers") < order.index("analytics.customer_orders")

    def test_description_and_columns(self, sql_project, settings, recording_logger):
        files = [str(sql_project / "analytics" / "orders.sql")]

        model = Converter(recording_logger).convert(files, settings).project.models[
            "analytics.orders"
        ]

        assert model.description == "All orders placed in the web shop."
        assert [(c.name, c.datatype) for c in model.columns] == [
            ("id", ""),
            ("customer_id", ""),
            ("amount", "DECIMAL(10, 2)"),
        ]

    def test_project_name_from_settings(self, sql_project, settings, recording_logger):
        settings.name = "Shop"

        result = Converter(recording_logger).convert(
            [str(sql_project / "analytics" / "orders.sql")], settings
        )

        assert result.project.name == "Shop"

    def test_parse_error_is_logged_and_conversion_continues(
        self, sql_project, settings, recording_logger
    ):
        broken = sql_project / "analytics" / "broken.sql"
        broken.write_text("SELECT (1")
        files = [str(broken), str(sql_project / "analytics" / "orders.sql")]

        result = Converter(recording_logger).convert(files, settings)

        assert "analytics.orders" in result.project.models
        assert result.has_errors
        errors = recording_logger.at(LogLevel.ERROR)
        assert len(errors) == 1
        assert errors[0].startswith(str(broken))

    def test_deeply_nested_file_does_not_stop_conversion(
        self, sql_project, settings, recording_logger
    ):
        depth = 3000
        deep = sql_project / "analytics" / "deep.sql"
        deep.write_text("SELECT " + "(" * depth + "1" + ")" * depth)
        files = [str(deep), str(sql_project / "analytics" / "orders.sql")]

        result = Converter(recording_logger).convert(files, settings)

        assert "analytics.orders" in result.project.models
        assert "analytics.deep" not in result.project.models
        errors = recording_logger.at(LogLevel.ERROR)
        assert len(errors) == 1
        assert errors[0].startswith(str(deep))

    def test_missing_file_is_an_error(self, tmp_path, settings, recording_logger):
        missing = tmp_path / "missing.sql"

        result = Converter(recording_logger).convert([str(missing)], settings)

        messages = recording_logger.at(LogLevel.ERROR)
        assert any("Could not read file" in m for m in messages)
        assert any("No SQL models found" in m for m in messages)
        assert result.project.models == {}

    def test_duplicate_model_warns(self, tmp_path, settings, recording_logger):
        first = tmp_path / "first.sql"
        second = tmp_path / "second.sql"
        first.write_text("CREATE TABLE s.t (id INT)")
        second.write_text("CREATE TABLE s.t (id INT, name TEXT)")

        result = Converter(recording_logger).convert([str(first), str(second)], settings)

        assert len(result.project.models["s.t"].columns) == 2
        warnings = recording_logger.at(LogLevel.WARN)
        assert len(warnings) == 1
        assert "s.t" in warnings[0]

    def test_cycle_warns(self, tmp_path, settings, recording_logger):
        (tmp_path / "a.sql").write_text("CREATE VIEW s.a AS SELECT * FROM s.b")
        (tmp_path / "b.sql").write_text("CREATE VIEW s.b AS SELECT * FROM s.a")

        result = Converter(recording_logger).convert(
            [str(tmp_path / "a.sql"), str(tmp_path / "b.sql")], settings
        )

        assert result.project.cycles
        assert result.project.execution_order == []
        assert any("Circular dependency" in m for m in recording_logger.at(LogLevel.WARN))
        assert recording_logger.has_errors is False

    def test_skipped_statements_are_verbose(self, tmp_path, settings, recording_logger):
        source = tmp_path / "load.sql"
        source.write_text("CREATE TABLE s.t (id INT); INSERT INTO s.t VALUES (1)")

        Converter(recording_logger).convert([str(source)], settings)

        assert any("Skipping INSERT" in m for m in recording_logger.at(LogLevel.VERBOSE))
