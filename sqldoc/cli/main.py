"""
sqldoc CLI Main Module

Console entry point wrapping ``Application.run_from_command_line``.
"""

from collections.abc import Sequence

from sqldoc.application import Application


def main(args: Sequence[str] | None = None) -> int:
    """
    Run sqldoc and return the process exit code.

    Returns 1 when the command line was rejected or errors were logged;
    printing help or the version exits with 0.
    """
    app = Application()
    app.run_from_command_line(args)

    if app.settings_accepted is False or app.has_errors:
        return 1
    return 0
