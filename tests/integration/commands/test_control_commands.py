import json
import socket
from typing import Any

import httpx
import pytest
from pytest_mock import MockerFixture

from devpair.cli._commands._shared import ExitCode
from tests.integration.commands.conftest import RunCLI


def unused_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        port: int = sock.getsockname()[1]
    return port


def respond(mocker: MockerFixture, status_code: int, body: dict[str, Any]) -> Any:
    request = httpx.Request("GET", "http://127.0.0.1:6280/devpair")
    return mocker.patch(
        "devpair.cli._commands._control.httpx.request",
        return_value=httpx.Response(status_code, json=body, request=request),
    )


class TestControlCommands:
    def test_not_running(self, devpair_cli: RunCLI, capsys: pytest.CaptureFixture[str]) -> None:
        code = devpair_cli("status", "--control-port", str(unused_port()))

        assert code == ExitCode.NOT_RUNNING
        assert "not running" in capsys.readouterr().err

    def test_status_json(
        self, devpair_cli: RunCLI, mocker: MockerFixture, capsys: pytest.CaptureFixture[str]
    ) -> None:
        body = {
            "sessions": {},
            "health": {"frontend": "running", "backend": "crashed"},
            "auto_restart": True,
            "has_last_error": False,
        }
        request = respond(mocker, 200, body)

        code = devpair_cli("status", "--json")

        assert code == ExitCode.SUCCESS
        assert json.loads(capsys.readouterr().out) == body
        assert request.call_args.args == ("GET", "http://127.0.0.1:6280/devpair/status")

    def test_status_text(
        self, devpair_cli: RunCLI, mocker: MockerFixture, capsys: pytest.CaptureFixture[str]
    ) -> None:
        _ = respond(
            mocker,
            200,
            {
                "sessions": {
                    "Backend": {
                        "name": "Backend",
                        "active": True,
                        "kind": "backend",
                        "command": "npm run dev",
                        "cwd": "/srv/api",
                        "crash_count": 2,
                    }
                },
                "health": {"frontend": "none", "backend": "running"},
                "auto_restart": False,
                "has_last_error": False,
            },
        )

        code = devpair_cli("status")

        out = capsys.readouterr().out
        assert code == ExitCode.SUCCESS
        assert "auto-restart: off" in out
        assert "health backend: running" in out
        assert "crashes=2" in out

    def test_control_port_from_environment(
        self, devpair_cli: RunCLI, mocker: MockerFixture, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("DEVPAIR_CONTROL_PORT", "7001")
        request = respond(mocker, 200, {"message": "Shutdown requested"})

        assert devpair_cli("stop") == ExitCode.SUCCESS
        assert request.call_args.args == ("POST", "http://127.0.0.1:7001/devpair/shutdown")

    def test_stop_one_session(
        self, devpair_cli: RunCLI, mocker: MockerFixture, capsys: pytest.CaptureFixture[str]
    ) -> None:
        request = respond(mocker, 200, {"message": "Session 'Backend' stopped"})

        code = devpair_cli("stop", "Backend")

        assert code == ExitCode.SUCCESS
        assert request.call_args.args[1].endswith("/devpair/sessions/Backend/stop")
        assert "Session 'Backend' stopped" in capsys.readouterr().out

    def test_stop_unknown_session(self, devpair_cli: RunCLI, mocker: MockerFixture) -> None:
        _ = respond(mocker, 404, {"detail": "Session 'Database' not found"})

        assert devpair_cli("stop", "Database") == ExitCode.NOT_FOUND

    def test_auto_restart_off(self, devpair_cli: RunCLI, mocker: MockerFixture) -> None:
        request = respond(mocker, 200, {"message": "Auto-restart disabled"})

        assert devpair_cli("auto-restart", "off") == ExitCode.SUCCESS
        assert request.call_args.kwargs["json"] == {"enabled": False}

    def test_copy_error_capture(self, devpair_cli: RunCLI, mocker: MockerFixture) -> None:
        request = respond(mocker, 200, {"message": "Error captured"})

        assert devpair_cli("copy-error", "--capture") == ExitCode.SUCCESS
        assert request.call_args.args[1].endswith("/devpair/errors/capture")

    def test_server_error(self, devpair_cli: RunCLI, mocker: MockerFixture) -> None:
        _ = respond(mocker, 409, {"detail": "Clipboard is empty"})

        assert devpair_cli("copy-error", "--capture") == ExitCode.INTERNAL_ERROR
