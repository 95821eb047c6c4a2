import json
import tomllib
from pathlib import Path

import pytest

from devpair.cli._commands._shared import ExitCode
from tests.integration.commands.conftest import RunCLI


def make_services(root: Path) -> tuple[Path, Path]:
    frontend = root / "client"
    frontend.mkdir()
    (frontend / "package.json").write_text('{"dependencies": {"vite": "5", "react": "18"}}')
    backend = root / "server"
    backend.mkdir()
    (backend / "requirements.txt").write_text("fastapi\nuvicorn\n")
    return frontend, backend


class TestConfigInit:
    def test_writes_detected_frameworks(
        self, tmp_path: Path, devpair_cli: RunCLI, capsys: pytest.CaptureFixture[str]
    ) -> None:
        frontend, backend = make_services(tmp_path)

        code = devpair_cli(
            "--workspace", str(tmp_path), "config", "init", str(frontend), str(backend)
        )

        assert code == ExitCode.SUCCESS
        saved = tomllib.loads((tmp_path / "devpair.toml").read_text())
        assert saved["frontend"] == {"path": "client", "framework": "react-vite"}
        assert saved["backend"] == {"path": "server", "framework": "fastapi"}
        assert "Configuration saved to" in capsys.readouterr().out

    def test_unknown_project_with_script_becomes_custom(
        self, tmp_path: Path, devpair_cli: RunCLI
    ) -> None:
        frontend, backend = make_services(tmp_path)
        (backend / "requirements.txt").unlink()
        (backend / "package.json").write_text('{"scripts": {"start": "node index.js"}}')

        code = devpair_cli(
            "--workspace", str(tmp_path), "config", "init", str(frontend), str(backend)
        )

        assert code == ExitCode.SUCCESS
        saved = tomllib.loads((tmp_path / "devpair.toml").read_text())
        assert saved["backend"] == {
            "path": "server",
            "framework": "custom",
            "custom_command": "npm run start",
        }

    def test_refuses_to_overwrite(self, tmp_path: Path, devpair_cli: RunCLI) -> None:
        frontend, backend = make_services(tmp_path)
        (tmp_path / "devpair.toml").write_text("auto_restart = true\n")

        code = devpair_cli(
            "--workspace", str(tmp_path), "config", "init", str(frontend), str(backend)
        )

        assert code == ExitCode.IO_ERROR
        assert (tmp_path / "devpair.toml").read_text() == "auto_restart = true\n"

    def test_force_overwrites(self, tmp_path: Path, devpair_cli: RunCLI) -> None:
        frontend, backend = make_services(tmp_path)
        (tmp_path / "devpair.toml").write_text("auto_restart = true\n")

        code = devpair_cli(
            "--workspace",
            str(tmp_path),
            "config",
            "init",
            str(frontend),
            str(backend),
            "--force",
        )

        assert code == ExitCode.SUCCESS
        assert "auto_restart" not in tomllib.loads((tmp_path / "devpair.toml").read_text())

    def test_missing_directory(self, tmp_path: Path, devpair_cli: RunCLI) -> None:
        frontend, _ = make_services(tmp_path)

        code = devpair_cli(
            "--workspace", str(tmp_path), "config", "init", str(frontend), str(tmp_path / "nope")
        )

        assert code == ExitCode.NOT_FOUND
        assert not (tmp_path / "devpair.toml").exists()


class TestConfigSet:
    def test_sets_nested_value(self, tmp_path: Path, devpair_cli: RunCLI) -> None:
        code = devpair_cli(
            "--workspace", str(tmp_path), "config", "set", "supervisor.restart_limit", "5"
        )

        assert code == ExitCode.SUCCESS
        saved = tomllib.loads((tmp_path / "devpair.toml").read_text())
        assert saved == {"supervisor": {"restart_limit": 5}}

    def test_invalid_value_is_not_written(self, tmp_path: Path, devpair_cli: RunCLI) -> None:
        code = devpair_cli(
            "--workspace", str(tmp_path), "config", "set", "supervisor.shutdown_timeout", "0"
        )

        assert code == ExitCode.VALIDATION_ERROR
        assert not (tmp_path / "devpair.toml").exists()


class TestConfigShow:
    def test_json_section(
        self, tmp_path: Path, devpair_cli: RunCLI, capsys: pytest.CaptureFixture[str]
    ) -> None:
        (tmp_path / "devpair.toml").write_text('[frontend]\npath = "web"\nframework = "vue"\n')

        code = devpair_cli(
            "--workspace", str(tmp_path), "config", "show", "--format", "json", "--section", "frontend"
        )

        assert code == ExitCode.SUCCESS
        assert json.loads(capsys.readouterr().out) == {
            "path": "web",
            "framework": "vue",
            "custom_command": "",
        }

    def test_toml_defaults(
        self, tmp_path: Path, devpair_cli: RunCLI, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = devpair_cli("--workspace", str(tmp_path), "config", "show")

        assert code == ExitCode.SUCCESS
        shown = tomllib.loads(capsys.readouterr().out)
        assert shown["supervisor"]["restart_limit"] == 3
        assert shown["backend"]["framework"] == "express"

    def test_unknown_section(self, tmp_path: Path, devpair_cli: RunCLI) -> None:
        code = devpair_cli("--workspace", str(tmp_path), "config", "show", "--section", "database")

        assert code == ExitCode.NOT_FOUND
