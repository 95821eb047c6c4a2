from pathlib import Path

import pytest

from devpair.cli._commands._shared import ExitCode
from tests.integration.commands.conftest import RunCLI


class TestDetectCommand:
    def test_reports_framework_and_script(
        self, tmp_path: Path, devpair_cli: RunCLI, capsys: pytest.CaptureFixture[str]
    ) -> None:
        (tmp_path / "package.json").write_text(
            '{"scripts": {"dev": "vite"}, "dependencies": {"vite": "5", "react": "18"}}'
        )

        code = devpair_cli("detect", str(tmp_path), "--slot", "frontend")

        out = capsys.readouterr().out
        assert code == ExitCode.SUCCESS
        assert "frontend: react-vite" in out
        assert "port:    5173" in out
        assert "install: npm install" in out
        assert "recommended script: npm run dev" in out

    def test_nothing_detected(
        self, tmp_path: Path, devpair_cli: RunCLI, capsys: pytest.CaptureFixture[str]
    ) -> None:
        code = devpair_cli("detect", str(tmp_path))

        assert code == ExitCode.SUCCESS
        assert "No known framework detected." in capsys.readouterr().out

    def test_missing_directory(self, tmp_path: Path, devpair_cli: RunCLI) -> None:
        assert devpair_cli("detect", str(tmp_path / "missing")) == ExitCode.NOT_FOUND
