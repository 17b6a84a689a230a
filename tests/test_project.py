"""Tests for project directory checks and manifest updates."""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from mvpgen.config.catalog import ProjectConfig
from mvpgen.errors import (
    DirectoryExistsError,
    DirectoryNotEmptyError,
    PackageManifestError,
)
from mvpgen.project import (
    install_dependencies,
    next_steps,
    resolve_target_directory,
    update_package_json,
)


class TestResolveTargetDirectory:
    """Tests for target directory resolution."""

    def test_new_directory(self, tmp_path: Path) -> None:
        """Test that a new name resolves under the cwd."""
        target, name = resolve_target_directory("my-app", tmp_path)

        assert target == (tmp_path / "my-app").resolve()
        assert name == "my-app"

    def test_existing_directory_rejected(self, tmp_path: Path) -> None:
        """Test that an existing target directory is an error."""
        (tmp_path / "my-app").mkdir()

        with pytest.raises(DirectoryExistsError):
            resolve_target_directory("my-app", tmp_path)

    @pytest.mark.parametrize("name", [".", "./"])
    def test_current_directory_with_allowed_files(self, tmp_path: Path, name: str) -> None:
        """Test that allow-listed files do not block the current directory."""
        cwd = tmp_path / "project-x"
        cwd.mkdir()
        for allowed in (".git", "README.md", "mvp-gen.yml", "templates.json"):
            (cwd / allowed).write_text("")

        target, project_name = resolve_target_directory(name, cwd)

        assert target == cwd
        assert project_name == "project-x"

    def test_current_directory_not_empty(self, tmp_path: Path) -> None:
        """Test that other files in the current directory are reported."""
        (tmp_path / "README.md").write_text("")
        (tmp_path / "main.py").write_text("")
        (tmp_path / "config").mkdir()

        with pytest.raises(DirectoryNotEmptyError) as exc_info:
            resolve_target_directory(".", tmp_path)

        assert exc_info.value.files == ["config", "main.py"]
        assert "main.py" in str(exc_info.value)


class TestUpdatePackageJson:
    """Tests for manifest customization."""

    def _write(self, target: Path, data: dict) -> Path:
        path = target / "package.json"
        path.write_text(json.dumps(data))
        return path

    def test_sets_name_only(self, tmp_path: Path) -> None:
        """Test that a plain JS project only gets its name changed."""
        path = self._write(tmp_path, {"name": "template", "scripts": {"start": "node ."}})

        assert update_package_json(tmp_path, "my-app", ProjectConfig()) is True

        data = json.loads(path.read_text())
        assert data["name"] == "my-app"
        assert data["scripts"] == {"start": "node ."}
        assert "devDependencies" not in data

    def test_typescript_and_esbuild(self, tmp_path: Path) -> None:
        """Test that tooling dependencies and scripts are merged in."""
        path = self._write(
            tmp_path,
            {"name": "t", "devDependencies": {"jest": "^29.0.0"}, "scripts": {"test": "jest"}},
        )

        update_package_json(tmp_path, "app", ProjectConfig(typescript=True, esbuild=True))

        data = json.loads(path.read_text())
        assert data["devDependencies"] == {
            "jest": "^29.0.0",
            "typescript": "^5.0.0",
            "@types/node": "^20.0.0",
            "ts-node": "^10.9.0",
            "esbuild": "^0.19.0",
        }
        assert data["scripts"]["test"] == "jest"
        assert data["scripts"]["build"] == "tsc"
        assert data["scripts"]["dev"] == "ts-node src/index.ts"
        assert data["scripts"]["build:fast"].startswith("esbuild src/index.ts")

    def test_missing_manifest(self, tmp_path: Path) -> None:
        """Test that a template without package.json is skipped."""
        assert update_package_json(tmp_path, "app", ProjectConfig()) is False

    @pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
    def test_malformed_manifest(self, tmp_path: Path, content: str) -> None:
        """Test that an unparseable package.json raises a domain error."""
        (tmp_path / "package.json").write_text(content)

        with pytest.raises(PackageManifestError) as exc_info:
            update_package_json(tmp_path, "app", ProjectConfig())

        assert exc_info.value.path == tmp_path / "package.json"


class TestInstallAndNextSteps:
    """Tests for dependency install and next-step hints."""

    def test_install_runs_npm(self, tmp_path: Path) -> None:
        """Test that npm install runs in the project directory."""
        with patch("mvpgen.project.subprocess") as mock:
            mock.run.return_value = MagicMock(returncode=0)
            assert install_dependencies(tmp_path) is True

        mock.run.assert_called_once_with(["npm", "install"], cwd=tmp_path)

    def test_install_failure_is_reported(self, tmp_path: Path) -> None:
        """Test that a failed install returns False instead of raising."""
        with patch("mvpgen.project.subprocess") as mock:
            mock.run.return_value = MagicMock(returncode=1)
            assert install_dependencies(tmp_path) is False

    def test_install_without_npm(self, tmp_path: Path) -> None:
        """Test that a missing npm binary is not fatal."""
        with patch("mvpgen.project.subprocess") as mock:
            mock.run.side_effect = FileNotFoundError("npm")
            assert install_dependencies(tmp_path) is False

    def test_next_steps(self) -> None:
        """Test suggested commands for new and current directories."""
        assert next_steps("app", ProjectConfig()) == ["cd app", "npm install", "npm start"]
        assert next_steps(
            "app", ProjectConfig(typescript=True, npm_install=True), in_current_dir=True
        ) == ["npm run dev", "npm run build"]
