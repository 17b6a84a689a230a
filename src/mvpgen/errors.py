"""Exception hierarchy for mvp-gen."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mvpgen.config.schema import FieldError


class MvpGenError(Exception):
    """Base exception for all mvp-gen failures."""


class ConfigError(MvpGenError):
    """Raised when a configuration document cannot be loaded."""


class ConfigNotFoundError(ConfigError):
    """Raised when a configuration document does not exist."""

    def __init__(self, kind: str, location: str) -> None:
        self.kind = kind
        self.location = location
        super().__init__(f"{kind.capitalize()} configuration not found: {location}")


class ConfigParseError(ConfigError):
    """Raised when a configuration document is not valid YAML/JSON."""

    def __init__(self, kind: str, detail: str) -> None:
        self.kind = kind
        super().__init__(f"Invalid {kind} configuration: {detail}")


class ConfigValidationError(ConfigError):
    """Raised when a configuration document fails schema validation."""

    def __init__(self, kind: str, errors: Sequence[FieldError]) -> None:
        self.kind = kind
        self.errors = list(errors)
        lines = [f"{kind.capitalize()} configuration validation failed:"]
        lines.extend(f"  {e.path}: {e.message}" for e in self.errors)
        super().__init__("\n".join(lines))


class AcquisitionError(MvpGenError):
    """Raised when template files cannot be acquired."""


class TemplateNotFoundError(AcquisitionError):
    """Raised when a template cannot be found in any attempted location."""

    def __init__(self, template: str, attempted: Sequence[str]) -> None:
        self.template = template
        self.attempted = list(attempted)
        tried = "\n".join(f"  - {loc}" for loc in self.attempted)
        super().__init__(f'Template "{template}" not found. Tried:\n{tried}')


class RepositoryCheckoutError(AcquisitionError):
    """Raised when cloning a template repository fails."""

    def __init__(self, repo_url: str, detail: str, hint: str | None = None) -> None:
        self.repo_url = repo_url
        self.hint = hint
        message = f"Failed to clone {repo_url}: {detail}"
        if hint:
            message += f"\n{hint}"
        super().__init__(message)


class ProjectDirectoryError(MvpGenError):
    """Raised when the target directory violates a precondition."""


class DirectoryExistsError(ProjectDirectoryError):
    """Raised when the target project directory already exists."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f'Directory "{path}" already exists!')


class DirectoryNotEmptyError(ProjectDirectoryError):
    """Raised when the current directory holds files outside the allow-list."""

    def __init__(self, path: Path, files: Sequence[str]) -> None:
        self.path = path
        self.files = list(files)
        super().__init__(
            f"Current directory is not empty! Found files: {', '.join(self.files)}\n"
            "Please use an empty directory or specify a new project name."
        )


class PackageManifestError(MvpGenError):
    """Raised when a template's package.json cannot be parsed."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        super().__init__(f"Invalid package.json at {path}: {detail}")


class PromptConfigurationError(MvpGenError):
    """Raised when a workflow step cannot be turned into a prompt."""


class PostProcessScriptError(MvpGenError):
    """Raised when a post-processing script exits non-zero."""

    def __init__(self, script: str, returncode: int) -> None:
        self.script = script
        self.returncode = returncode
        super().__init__(f"Script failed (exit {returncode}): {script}")
