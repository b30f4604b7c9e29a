"""Tests for the config commands."""

import json

from typer.testing import CliRunner

from simpletasks.config import get_config_manager
from simpletasks.main import app
from simpletasks.utils.exit_codes import ERROR_INVALID_ARGS

runner = CliRunner()


def test_view():
    result = runner.invoke(app, ["config", "view"])

    assert result.exit_code == 0
    assert json.loads(result.output)["api"]["timeout"] == 30


def test_get():
    result = runner.invoke(app, ["config", "get", "auth.service"])

    assert result.exit_code == 0
    assert "com.simpletasks" in result.output


def test_get_unknown_key():
    result = runner.invoke(app, ["config", "get", "api.missing"])

    assert result.exit_code == ERROR_INVALID_ARGS
    assert "not found" in result.output


def test_set_parses_types():
    result = runner.invoke(app, ["config", "set", "api.timeout", "5"])
    assert result.exit_code == 0, result.output
    result = runner.invoke(app, ["config", "set", "auth.logout_on_unauthorized", "false"])
    assert result.exit_code == 0, result.output

    manager = get_config_manager()
    assert manager.get("api.timeout") == 5
    assert manager.get("auth.logout_on_unauthorized") is False


def test_set_digits_on_a_text_field():
    result = runner.invoke(app, ["config", "set", "auth.service", "12345"])

    assert result.exit_code == 0, result.output
    assert get_config_manager().get("auth.service") == "12345"


def test_set_invalid_value():
    result = runner.invoke(app, ["config", "set", "api.timeout", "soon"])

    assert result.exit_code == ERROR_INVALID_ARGS
    assert "Invalid value" in result.output


def test_reset_key():
    runner.invoke(app, ["config", "set", "api.timeout", "5"])
    result = runner.invoke(app, ["config", "reset", "api.timeout", "--yes"])

    assert result.exit_code == 0
    assert get_config_manager().get("api.timeout") == 30


def test_reset_cancelled():
    runner.invoke(app, ["config", "set", "api.timeout", "5"])
    result = runner.invoke(app, ["config", "reset"], input="n\n")

    assert result.exit_code == 0
    assert get_config_manager().get("api.timeout") == 5
