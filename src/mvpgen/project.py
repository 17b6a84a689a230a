"""Project directory checks and manifest customization."""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path

from rich.markup import escape

from mvpgen.config.catalog import ProjectConfig
from mvpgen.console import console
from mvpgen.errors import (
    DirectoryExistsError,
    DirectoryNotEmptyError,
    PackageManifestError,
)

logger = logging.getLogger(__name__)

CURRENT_DIR_NAMES: tuple[str, ...] = (".", "./")

# Files tolerated when initializing into the current directory
ALLOWED_EXISTING_FILES: frozenset[str] = frozenset(
    {
        ".git",
        ".gitignore",
        "README.md",
        ".DS_Store",
        "Thumbs.db",
        "mvp-gen.yml",
        "mvp-gen.yaml",
        ".mvp-gen.yml",
        ".mvp-gen.yaml",
        "templates.json",
        ".templates.json",
    }
)

TYPESCRIPT_DEV_DEPENDENCIES: dict[str, str] = {
    "typescript": "^5.0.0",
    "@types/node": "^20.0.0",
    "ts-node": "^10.9.0",
}
TYPESCRIPT_SCRIPTS: dict[str, str] = {
    "build": "tsc",
    "dev": "ts-node src/index.ts",
}
ESBUILD_DEV_DEPENDENCIES: dict[str, str] = {"esbuild": "^0.19.0"}
ESBUILD_SCRIPTS: dict[str, str] = {
    "build:fast": "esbuild src/index.ts --bundle --platform=node --outfile=dist/index.js",
}


def is_current_directory(project_name: str) -> bool:
    return project_name in CURRENT_DIR_NAMES


def resolve_target_directory(project_name: str, cwd: Path | None = None) -> tuple[Path, str]:
    """Return (target_dir, actual_project_name) for `init`.

    "." and "./" target the current directory, which may only contain
    allow-listed files. Any other name must not exist yet.

    Raises:
        DirectoryNotEmptyError: The current directory holds other files.
        DirectoryExistsError: The named directory already exists.
    """
    cwd = cwd or Path.cwd()

    if is_current_directory(project_name):
        unexpected = sorted(
            item.name for item in cwd.iterdir() if item.name not in ALLOWED_EXISTING_FILES
        )
        if unexpected:
            raise DirectoryNotEmptyError(cwd, unexpected)
        return cwd, cwd.resolve().name

    target = (cwd / project_name).resolve()
    if target.exists():
        raise DirectoryExistsError(target)
    return target, project_name


def update_package_json(target_dir: Path, project_name: str, config: ProjectConfig) -> bool:
    """Set the project name and add TypeScript/ESBuild tooling to package.json.

    Returns False when the template ships no package.json.

    Raises:
        PackageManifestError: The manifest is not a JSON object.
    """
    manifest_path = target_dir / "package.json"
    if not manifest_path.is_file():
        logger.warning("No package.json in %s, skipping manifest update", target_dir)
        return False

    try:
        manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise PackageManifestError(manifest_path, str(e)) from e
    if not isinstance(manifest, dict):
        raise PackageManifestError(manifest_path, "expected a JSON object")
    manifest["name"] = project_name

    dev_dependencies = dict(manifest.get("devDependencies") or {})
    scripts = dict(manifest.get("scripts") or {})
    if config.typescript:
        dev_dependencies.update(TYPESCRIPT_DEV_DEPENDENCIES)
        scripts.update(TYPESCRIPT_SCRIPTS)
    if config.esbuild:
        dev_dependencies.update(ESBUILD_DEV_DEPENDENCIES)
        scripts.update(ESBUILD_SCRIPTS)
    if dev_dependencies:
        manifest["devDependencies"] = dev_dependencies
    if scripts:
        manifest["scripts"] = scripts

    manifest_path.write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")
    return True


def install_dependencies(target_dir: Path) -> bool:
    """Run `npm install` in the project. Returns False on failure."""
    console.print("\n[cyan]Installing dependencies...[/cyan]")
    try:
        result = subprocess.run(["npm", "install"], cwd=target_dir)
    except FileNotFoundError:
        console.print("[yellow]npm not found, skipping dependency installation[/yellow]")
        return False
    if result.returncode != 0:
        console.print(
            "[yellow]Failed to install dependencies. "
            "Run 'npm install' manually.[/yellow]"
        )
        return False
    console.print("[green]Dependencies installed[/green]")
    return True


def next_steps(project_name: str, config: ProjectConfig, in_current_dir: bool = False) -> list[str]:
    """Shell commands suggested after generation."""
    steps: list[str] = []
    if not in_current_dir:
        steps.append(f"cd {project_name}")
    if not config.npm_install:
        steps.append("npm install")
    steps.append("npm run dev" if config.typescript or config.esbuild else "npm start")
    if config.esbuild:
        steps.append("npm run build:fast")
    elif config.typescript:
        steps.append("npm run build")
    return steps


def print_next_steps(project_name: str, config: ProjectConfig, in_current_dir: bool = False) -> None:
    console.print(f"\n[green]Project \"{escape(project_name)}\" created successfully![/green]")
    console.print("\n[cyan]Next steps:[/cyan]")
    for step in next_steps(project_name, config, in_current_dir):
        console.print(f"  {escape(step)}")
    console.print()
