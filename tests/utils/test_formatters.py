"""Tests for output formatters."""

from datetime import datetime

from simpletasks.utils.exit_codes import ERROR_NOT_FOUND, get_exit_code_name
from simpletasks.utils.ui.formatters import (
    format_due,
    format_error,
    format_task,
    format_tasks_table,
)
from tests.fakes import make_task


def test_format_due_unspecified():
    assert format_due(None) == "Unspecified"


def test_format_due_uses_local_date():
    stamp = int(datetime(2030, 1, 2, 12, 0).timestamp())
    assert format_due(stamp) == "Jan 02, 2030"


def test_tasks_table(capsys):
    format_tasks_table([make_task(1, "Buy milk"), make_task(2, "Walk dog")])

    out = capsys.readouterr().out
    assert "Buy milk" in out
    assert "Walk dog" in out


def test_empty_table(capsys):
    format_tasks_table([])
    assert "No tasks" in capsys.readouterr().out


def test_bracketed_title_is_not_markup(capsys):
    format_tasks_table([make_task(1, "[urgent] call mom"), make_task(2, "fix [/] bug")])

    out = capsys.readouterr().out
    assert "[urgent] call mom" in out
    assert "fix [/] bug" in out


def test_task_details(capsys):
    format_task(make_task(7, "[b]bold?[/b]", due_by=None))

    out = capsys.readouterr().out
    assert "[b]bold?[/b] (#7)" in out
    assert "Due:      Unspecified" in out


def test_error_message_is_not_markup(capsys):
    format_error("closing tag '[/]' has nothing to close")

    assert "Error: closing tag '[/]' has nothing to close" in capsys.readouterr().out


def test_exit_code_names():
    assert get_exit_code_name(ERROR_NOT_FOUND) == "ERROR_NOT_FOUND"
    assert get_exit_code_name(99) == "UNKNOWN(99)"
