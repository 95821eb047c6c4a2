from pathlib import Path

import pytest
from pyfakefs.fake_filesystem import FakeFilesystem

from devpair.launch import has_dependencies, install_command_for

SERVICE = Path("/work/service")


class TestHasDependencies:
    def test_missing_directory_is_satisfied(self, fs: FakeFilesystem) -> None:
        assert has_dependencies(Path("/work/nowhere"), "react-vite") is True

    def test_empty_directory_is_satisfied(self, fs: FakeFilesystem) -> None:
        fs.create_dir(SERVICE)

        assert has_dependencies(SERVICE, "express") is True

    def test_package_json_without_node_modules_is_missing(self, fs: FakeFilesystem) -> None:
        fs.create_file(SERVICE / "package.json", contents="{}")

        assert has_dependencies(SERVICE, "react-vite") is False

    def test_node_modules_is_installed(self, fs: FakeFilesystem) -> None:
        fs.create_file(SERVICE / "package.json", contents="{}")
        fs.create_dir(SERVICE / "node_modules")

        assert has_dependencies(SERVICE, "express") is True

    def test_pom_without_target_is_missing(self, fs: FakeFilesystem) -> None:
        fs.create_file(SERVICE / "pom.xml", contents="<project />")

        assert has_dependencies(SERVICE, "spring-boot") is False

    def test_target_directory_is_installed(self, fs: FakeFilesystem) -> None:
        fs.create_file(SERVICE / "pom.xml", contents="<project />")
        fs.create_dir(SERVICE / "target")

        assert has_dependencies(SERVICE, "spring-boot") is True

    @pytest.mark.parametrize("framework", ["django", "flask", "fastapi"])
    def test_requirements_without_venv_is_missing(
        self, fs: FakeFilesystem, framework: str
    ) -> None:
        fs.create_file(SERVICE / "requirements.txt", contents="django\n")

        assert has_dependencies(SERVICE, framework) is False

    @pytest.mark.parametrize("venv", ["venv", ".venv"])
    def test_virtualenv_is_installed(self, fs: FakeFilesystem, venv: str) -> None:
        fs.create_file(SERVICE / "requirements.txt", contents="flask\n")
        fs.create_dir(SERVICE / venv)

        assert has_dependencies(SERVICE, "flask") is True

    def test_unknown_framework_checks_node_modules(self, fs: FakeFilesystem) -> None:
        fs.create_file(SERVICE / "package.json", contents="{}")

        assert has_dependencies(SERVICE, "custom") is False


class TestInstallCommandFor:
    @pytest.mark.parametrize("framework", ["react-vite", "vue", "express", "nestjs"])
    def test_node_frameworks_use_npm(self, framework: str) -> None:
        assert install_command_for(framework) == "npm install"

    def test_python_frameworks_create_virtualenv(self) -> None:
        command = install_command_for("django")

        assert command.startswith("python -m venv venv && ")
        assert command.endswith("pip install -r requirements.txt")

    def test_spring_boot_uses_maven_wrapper(self) -> None:
        assert install_command_for("spring-boot").endswith("mvnw install")

    def test_unknown_framework_defaults_to_npm(self) -> None:
        assert install_command_for("custom") == "npm install"
