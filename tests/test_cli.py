# File: tests/test_cli.py
"""Tests for the Typer entry points."""

import runpy
import sys

import pytest
from typer.testing import CliRunner

from cli import doctor as doctor_cli
from cli import main as main_cli
from core.config import write_user_env_vars
from tests.fakes import BANNER, INVALID_LOGIN, OK, FakeTransport, FakeTransportFactory

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep user/project .env files and TS3QUERY_* variables out of the tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    for name in ("SERVER", "PORT", "SERVER_ID"):
        monkeypatch.delenv(f"TS3QUERY_DEFAULT_{name}", raising=False)


def _install_factory(monkeypatch: pytest.MonkeyPatch, module, factory: FakeTransportFactory) -> None:
    monkeypatch.setattr(module, "build_transport_factory", lambda settings=None: factory)


class TestLoginCommand:
    """Test `ts3query-login`."""

    def test_success_exit_zero(self, monkeypatch: pytest.MonkeyPatch) -> None:
        factory = FakeTransportFactory(FakeTransport([BANNER, OK, OK]))
        _install_factory(monkeypatch, main_cli, factory)

        result = runner.invoke(main_cli.app, ["serveradmin", "secret", "--server", "ts.example", "--sid", "1"])

        assert result.exit_code == 0, result.output
        assert factory.calls == [("ts.example", 10011)]
        assert factory.transport.commands == ["login serveradmin secret\n\r", "use 1\n\r"]

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        factory = FakeTransportFactory(FakeTransport([BANNER, OK, OK]))
        _install_factory(monkeypatch, main_cli, factory)

        result = runner.invoke(main_cli.app, ["serveradmin", "secret"])

        assert result.exit_code == 0, result.output
        assert factory.calls == [("localhost", 10011)]
        assert factory.transport.commands[-1] == "use 0\n\r"

    def test_bad_port_falls_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        factory = FakeTransportFactory(FakeTransport([BANNER, OK, OK]))
        _install_factory(monkeypatch, main_cli, factory)

        result = runner.invoke(main_cli.app, ["serveradmin", "secret", "--port", "abc"])

        assert result.exit_code == 0, result.output
        assert factory.calls == [("localhost", 10011)]

    def test_bad_port_ignores_configured_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TS3QUERY_DEFAULT_PORT", "10022")
        factory = FakeTransportFactory(FakeTransport([BANNER, OK, OK]))
        _install_factory(monkeypatch, main_cli, factory)

        result = runner.invoke(main_cli.app, ["serveradmin", "secret", "--port", "abc", "--quiet"])

        assert result.exit_code == 0, result.output
        assert factory.calls == [("localhost", 10011)]
        assert "WARNING" in result.output
        assert "abc" in result.output

    def test_configured_port_used_without_flag(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TS3QUERY_DEFAULT_PORT", "10022")
        factory = FakeTransportFactory(FakeTransport([BANNER, OK, OK]))
        _install_factory(monkeypatch, main_cli, factory)

        result = runner.invoke(main_cli.app, ["serveradmin", "secret", "--quiet"])

        assert result.exit_code == 0, result.output
        assert factory.calls == [("localhost", 10022)]

    def test_custom_port(self, monkeypatch: pytest.MonkeyPatch) -> None:
        factory = FakeTransportFactory(FakeTransport([BANNER, OK, OK]))
        _install_factory(monkeypatch, main_cli, factory)

        result = runner.invoke(main_cli.app, ["serveradmin", "secret", "--port", "10022"])

        assert result.exit_code == 0, result.output
        assert factory.calls == [("localhost", 10022)]

    def test_bad_sid_is_fatal(self, monkeypatch: pytest.MonkeyPatch) -> None:
        factory = FakeTransportFactory(FakeTransport([BANNER, OK, OK]))
        _install_factory(monkeypatch, main_cli, factory)

        result = runner.invoke(main_cli.app, ["serveradmin", "secret", "--sid", "abc"])

        assert result.exit_code == 1
        assert "sid" in result.output
        assert factory.transport.writes == []

    def test_login_rejected_exit_one(self, monkeypatch: pytest.MonkeyPatch) -> None:
        factory = FakeTransportFactory(FakeTransport([BANNER, INVALID_LOGIN]))
        _install_factory(monkeypatch, main_cli, factory)

        result = runner.invoke(main_cli.app, ["serveradmin", "wrong"])

        assert result.exit_code == 1
        assert "LOGIN_FAILED" in result.output
        assert len(factory.transport.writes) == 1

    def test_connect_refused_exit_one(self, monkeypatch: pytest.MonkeyPatch) -> None:
        factory = FakeTransportFactory(error=ConnectionRefusedError(111, "Connection refused"))
        _install_factory(monkeypatch, main_cli, factory)

        result = runner.invoke(main_cli.app, ["serveradmin", "secret"])

        assert result.exit_code == 1
        assert "CONNECT_ERROR" in result.output

    def test_settings_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TS3QUERY_DEFAULT_SERVER", "env.example")
        monkeypatch.setenv("TS3QUERY_DEFAULT_SERVER_ID", "5")
        factory = FakeTransportFactory(FakeTransport([BANNER, OK, OK]))
        _install_factory(monkeypatch, main_cli, factory)

        result = runner.invoke(main_cli.app, ["serveradmin", "secret", "--quiet"])

        assert result.exit_code == 0, result.output
        assert factory.calls == [("env.example", 10011)]
        assert factory.transport.commands[-1] == "use 5\n\r"

    def test_missing_password_is_usage_error(self) -> None:
        result = runner.invoke(main_cli.app, ["serveradmin"])
        assert result.exit_code == 2


class TestDoctor:
    """Test `ts3query-doctor`."""

    def test_check_reports_banner(self, monkeypatch: pytest.MonkeyPatch) -> None:
        factory = FakeTransportFactory(FakeTransport([BANNER]))
        _install_factory(monkeypatch, doctor_cli, factory)

        result = runner.invoke(doctor_cli.app, ["check", "--server", "ts.example"])

        assert result.exit_code == 0, result.output
        assert "TS3" in result.output
        assert factory.calls == [("ts.example", 10011)]
        assert factory.transport.closed

    def test_check_unreachable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        factory = FakeTransportFactory(error=ConnectionRefusedError(111, "Connection refused"))
        _install_factory(monkeypatch, doctor_cli, factory)

        result = runner.invoke(doctor_cli.app, ["check"])

        assert result.exit_code == 1
        assert "FAIL" in result.output

    def test_set_defaults_writes_user_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
        env_file = tmp_path / "user.env"
        monkeypatch.setattr(doctor_cli, "write_user_env_vars", lambda values: write_user_env_vars(values, env_file))

        result = runner.invoke(doctor_cli.app, ["set-defaults", "--server", "ts.example", "--sid", "2"])

        assert result.exit_code == 0, result.output
        content = env_file.read_text(encoding="utf-8")
        assert "TS3QUERY_DEFAULT_SERVER=ts.example" in content
        assert "TS3QUERY_DEFAULT_SERVER_ID=2" in content

    def test_set_defaults_requires_a_value(self) -> None:
        result = runner.invoke(doctor_cli.app, ["set-defaults"])
        assert result.exit_code == 2


class TestModuleEntryPoint:
    """Test `python -m cli`."""

    def test_help_exits_zero(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
        monkeypatch.setattr(sys, "argv", ["ts3query-login", "--help"])

        with pytest.raises(SystemExit) as exc_info:
            runpy.run_module("cli", run_name="__main__")

        assert exc_info.value.code == 0
        assert "--sid" in capsys.readouterr().out
