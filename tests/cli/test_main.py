"""
Tests for the sqldoc console entry point.
"""

import pytest

from sqldoc.cli.main import main


class TestMain:
    """Test exit codes of the entry point."""

    @pytest.fixture(autouse=True)
    def isolated_cwd(self, tmp_path, monkeypatch):
        """Run outside any folder holding a sqldoc.toml."""
        monkeypatch.chdir(tmp_path)

    def test_usage_exits_with_zero(self, capsys):
        assert main([]) == 0
        assert "Usage" in capsys.readouterr().out

    def test_version_exits_with_zero(self, capsys):
        assert main(["--version"]) == 0
        assert "sqldoc" in capsys.readouterr().out

    def test_invalid_option_exits_with_one(self, capsys):
        assert main(["--bogus"]) == 1
        assert "--bogus" in capsys.readouterr().err

    def test_project_exits_with_zero(self, sql_project, tmp_path):
        assert main([str(sql_project), "-o", str(tmp_path / "site")]) == 0
        assert (tmp_path / "site" / "index.html").is_file()

    def test_broken_sql_exits_with_one(self, tmp_path, capsys):
        (tmp_path / "broken.sql").write_text("SELECT (1")

        assert main(["broken.sql", "-o", "site"]) == 1
        assert "Documentation generated" not in capsys.readouterr().out
        assert (tmp_path / "site" / "index.html").is_file()

    def test_warnings_do_not_fail_the_run(self, tmp_path):
        (tmp_path / "load.sql").write_text("CREATE TABLE s.t (id INT); SELECT 1; SELECT 2")

        assert main(["load.sql"]) == 0
