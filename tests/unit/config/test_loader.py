# pyright: reportAny=false
import tomllib
from pathlib import Path

import pytest

from devpair.config import (
    deep_merge,
    parse_env_vars,
    parse_string_value,
    read_toml_file,
    set_nested_key,
    write_config_value,
)
from devpair.exceptions import ConfigLoadError


class TestDeepMerge:
    def test_nested_dicts_are_merged(self) -> None:
        base = {"frontend": {"path": "web", "framework": "vue"}}
        override = {"frontend": {"framework": "svelte"}}

        assert deep_merge(base, override) == {"frontend": {"path": "web", "framework": "svelte"}}

    def test_lists_are_replaced(self) -> None:
        assert deep_merge({"a": [1, 2]}, {"a": [3]}) == {"a": [3]}

    def test_inputs_are_not_modified(self) -> None:
        base = {"frontend": {"path": "web"}}
        override = {"frontend": {"path": "app"}}

        merged = deep_merge(base, override)
        merged["frontend"]["path"] = "changed"

        assert base == {"frontend": {"path": "web"}}
        assert override == {"frontend": {"path": "app"}}


class TestParseStringValue:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("true", True),
            ("FALSE", False),
            ("5173", 5173),
            ("2.5", 2.5),
            ('["a", "b"]', ["a", "b"]),
            ('{"dev": "x"}', {"dev": "x"}),
            ("npm run dev", "npm run dev"),
            ("1.2.3", "1.2.3"),
            ("[broken", "[broken"),
        ],
    )
    def test_infers_types(self, raw: str, expected: object) -> None:
        assert parse_string_value(raw) == expected


class TestSetNestedKey:
    def test_creates_intermediate_tables(self) -> None:
        data: dict[str, object] = {}

        set_nested_key(data, "profiles.dev.backend", "make run")

        assert data == {"profiles": {"dev": {"backend": "make run"}}}

    def test_replaces_scalar_on_the_path(self) -> None:
        data: dict[str, object] = {"profiles": "oops"}

        set_nested_key(data, "profiles.dev.frontend", "x")

        assert data == {"profiles": {"dev": {"frontend": "x"}}}


class TestParseEnvVars:
    def test_maps_double_underscores_to_dots(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEVPAIR_BACKEND__FRAMEWORK", "django")
        monkeypatch.setenv("DEVPAIR_AUTO_RESTART", "true")
        monkeypatch.setenv("DEVPAIR_SUPERVISOR__RESTART_LIMIT", "5")

        values = parse_env_vars()

        assert values["backend"] == {"framework": "django"}
        assert values["auto_restart"] is True
        assert values["supervisor"] == {"restart_limit": 5}

    @pytest.mark.parametrize("name", ["DEVPAIR_DEBUG", "DEVPAIR_LOG_LEVEL", "DEVPAIR_CONTROL_PORT"])
    def test_reserved_variables_are_skipped(
        self, monkeypatch: pytest.MonkeyPatch, name: str
    ) -> None:
        monkeypatch.setenv(name, "1")

        values = parse_env_vars()

        assert name.removeprefix("DEVPAIR_").lower() not in values


class TestReadTomlFile:
    def test_invalid_toml_reports_location(self, tmp_path: Path) -> None:
        path = tmp_path / "devpair.toml"
        path.write_text("[frontend\npath = 'web'\n")

        with pytest.raises(ConfigLoadError) as exc_info:
            _ = read_toml_file(path)

        assert exc_info.value.path == path


class TestWriteConfigValue:
    def test_creates_file_and_parents(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "devpair.toml"

        _ = write_config_value(path, "auto_restart", True)

        assert tomllib.loads(path.read_text()) == {"auto_restart": True}

    def test_preserves_existing_keys(self, tmp_path: Path) -> None:
        path = tmp_path / "devpair.toml"
        path.write_text('[frontend]\npath = "web"\nframework = "vue"\n')

        written = write_config_value(path, "profiles.prod.backend", "gunicorn app:app")

        assert written == tomllib.loads(path.read_text())
        assert written["frontend"] == {"path": "web", "framework": "vue"}
        assert written["profiles"] == {"prod": {"backend": "gunicorn app:app"}}

    def test_overwrites_existing_value(self, tmp_path: Path) -> None:
        path = tmp_path / "devpair.toml"
        path.write_text("auto_restart = true\n")

        _ = write_config_value(path, "auto_restart", False)

        assert tomllib.loads(path.read_text()) == {"auto_restart": False}
