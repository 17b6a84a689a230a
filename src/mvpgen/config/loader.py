"""Workflow and templates document discovery and loading."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

import yaml
from rich.markup import escape

from mvpgen.config.defaults import (
    create_default_templates_config,
    create_default_workflow_config,
)
from mvpgen.config.schema import (
    DocumentKind,
    TemplatesConfig,
    WorkflowConfig,
    validate_document,
)
from mvpgen.console import console
from mvpgen.errors import (
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
)
from mvpgen.remote.github import DEFAULT_BRANCH, RawContentFetcher, is_supported_host

if TYPE_CHECKING:
    from mvpgen.prompts.registry import FunctionRegistries

logger = logging.getLogger(__name__)

WORKFLOW_CANDIDATES: tuple[str, ...] = (
    "mvp-gen.yml",
    "mvp-gen.yaml",
    ".mvp-gen.yml",
    ".mvp-gen.yaml",
    "config/workflow.yml",
    "config/workflow.yaml",
)

TEMPLATES_CANDIDATES: tuple[str, ...] = (
    "templates.json",
    ".templates.json",
    "config/templates.json",
    "templates/config.json",
)

CANDIDATES: dict[DocumentKind, tuple[str, ...]] = {
    "workflow": WORKFLOW_CANDIDATES,
    "templates": TEMPLATES_CANDIDATES,
}


def _parse_yaml(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigParseError("workflow", str(e)) from e


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigParseError("templates", str(e)) from e


def parse_workflow_text(
    text: str, registries: FunctionRegistries | None = None
) -> WorkflowConfig:
    """Parse and validate workflow YAML.

    Function names referenced by steps are checked against the registries
    here, so a typo fails at load time instead of mid-prompt.
    """
    from mvpgen.prompts.engine import validate_workflow_references

    result = validate_document(_parse_yaml(text), "workflow")
    if not result.ok:
        raise ConfigValidationError("workflow", result.errors)
    workflow = cast(WorkflowConfig, result.value)

    reference_errors = validate_workflow_references(workflow, registries)
    if reference_errors:
        raise ConfigValidationError("workflow", reference_errors)
    return workflow


def parse_templates_text(text: str) -> TemplatesConfig:
    """Parse and validate templates JSON."""
    result = validate_document(_parse_json(text), "templates")
    if not result.ok:
        raise ConfigValidationError("templates", result.errors)
    return cast(TemplatesConfig, result.value)


def _read_text(path: Path, kind: DocumentKind) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ConfigParseError(kind, f"{path} is not valid UTF-8: {e.reason}") from e
    except OSError as e:
        raise ConfigParseError(kind, f"cannot read {path}: {e.strerror or e}") from e


def _read_local(path: Path, kind: DocumentKind) -> str:
    if not path.is_file():
        raise ConfigNotFoundError(kind, str(path))
    return _read_text(path, kind)


def load_workflow_config(
    path: Path, registries: FunctionRegistries | None = None
) -> WorkflowConfig:
    """Load a workflow document from a local YAML file."""
    return parse_workflow_text(_read_local(path, "workflow"), registries)


def load_templates_config(path: Path) -> TemplatesConfig:
    """Load a templates document from a local JSON file."""
    return parse_templates_text(_read_local(path, "templates"))


def find_local_config_file(root_dir: Path, kind: DocumentKind) -> Path | None:
    """Return the first existing candidate for `kind` under `root_dir`."""
    for candidate in CANDIDATES[kind]:
        path = root_dir / candidate
        logger.debug("Checking %s path: %s", kind, path)
        if path.is_file():
            logger.debug("Found %s config: %s", kind, path)
            return path
    return None


@dataclass(frozen=True)
class DiscoveredConfig:
    """Local configuration files found by discovery."""

    workflow: Path | None = None
    templates: Path | None = None


def find_local_config_files(root_dir: Path) -> DiscoveredConfig:
    """Search the standard locations under `root_dir`."""
    return DiscoveredConfig(
        workflow=find_local_config_file(root_dir, "workflow"),
        templates=find_local_config_file(root_dir, "templates"),
    )


@dataclass(frozen=True)
class ResolvedConfig:
    """Documents resolved for one invocation. None means not found/invalid."""

    workflow: WorkflowConfig | None = None
    templates: TemplatesConfig | None = None
    workflow_source: str | None = None
    templates_source: str | None = None


@dataclass(frozen=True)
class _Loaded:
    text: str
    source: str


class ConfigResolver:
    """Finds and loads workflow/templates documents from local or remote sources.

    Without an explicit path, discovery probes the candidate list on the
    remote repository first and the local root second; `prefer_local`
    reverses that order. Remote probing needs a supported repository URL.
    """

    def __init__(
        self,
        root_dir: Path,
        fetcher: RawContentFetcher | None = None,
        repo: str | None = None,
        branch: str = DEFAULT_BRANCH,
        prefer_local: bool = False,
        registries: FunctionRegistries | None = None,
    ) -> None:
        self.root_dir = root_dir
        self.fetcher = fetcher
        self.repo = repo
        self.branch = branch or DEFAULT_BRANCH
        self.prefer_local = prefer_local
        self.registries = registries

    @property
    def remote_enabled(self) -> bool:
        return self._remote() is not None

    def _remote(self) -> tuple[RawContentFetcher, str] | None:
        if self.fetcher is None or not self.repo or not is_supported_host(self.repo):
            return None
        return self.fetcher, self.repo

    def _remote_label(self, path: str) -> str:
        return f"{self.repo}@{self.branch}:{path}"

    def _load_explicit(self, kind: DocumentKind, path: str) -> _Loaded:
        remote = self._remote()
        if remote is not None:
            fetcher, repo = remote
            text = fetcher.fetch(repo, path, self.branch)
            if text is None:
                raise ConfigNotFoundError(kind, self._remote_label(path))
            return _Loaded(text, self._remote_label(path))

        local = Path(path)
        if not local.is_absolute():
            local = self.root_dir / local
        return _Loaded(_read_local(local, kind), str(local))

    def _discover_local(self, kind: DocumentKind) -> _Loaded | None:
        path = find_local_config_file(self.root_dir, kind)
        if path is None:
            return None
        return _Loaded(_read_text(path, kind), str(path))

    def _discover_remote(self, kind: DocumentKind) -> _Loaded | None:
        remote = self._remote()
        if remote is None:
            return None
        fetcher, repo = remote
        # Probe every candidate at once; precedence still follows list order
        results = fetcher.fetch_many(repo, list(CANDIDATES[kind]), self.branch)
        for candidate, text in results.items():
            if text is not None:
                return _Loaded(text, self._remote_label(candidate))
        return None

    def discover(self, kind: DocumentKind) -> _Loaded | None:
        """Probe sources in precedence order; first hit wins."""
        sources: list[Callable[[DocumentKind], _Loaded | None]] = [
            self._discover_remote,
            self._discover_local,
        ]
        if self.prefer_local:
            sources.reverse()
        for source in sources:
            loaded = source(kind)
            if loaded is not None:
                return loaded
        return None

    def _parse(self, kind: DocumentKind, text: str) -> WorkflowConfig | TemplatesConfig:
        if kind == "workflow":
            return parse_workflow_text(text, self.registries)
        return parse_templates_text(text)

    def load(
        self, kind: DocumentKind, explicit_path: str | None = None
    ) -> tuple[WorkflowConfig | TemplatesConfig | None, str | None]:
        """Load one document kind. Failures are reported and yield (None, None)."""
        try:
            if explicit_path:
                loaded: _Loaded | None = self._load_explicit(kind, explicit_path)
            else:
                loaded = self.discover(kind)
            if loaded is None:
                logger.debug("No %s configuration found", kind)
                return None, None
            document = self._parse(kind, loaded.text)
        except ConfigValidationError as e:
            console.print(f"[red]Invalid {kind} configuration:[/red]")
            for error in e.errors:
                console.print(f"[red]  - {escape(str(error))}[/red]")
            return None, None
        except ConfigError as e:
            console.print(f"[yellow]Failed to load {kind} config: {escape(str(e))}[/yellow]")
            return None, None

        logger.debug("Loaded %s config: %s", kind, loaded.source)
        return document, loaded.source

    def resolve(
        self,
        workflow_path: str | None = None,
        templates_path: str | None = None,
    ) -> ResolvedConfig:
        """Load both documents independently."""
        workflow, workflow_source = self.load("workflow", workflow_path)
        templates, templates_source = self.load("templates", templates_path)
        return ResolvedConfig(
            workflow=workflow if isinstance(workflow, WorkflowConfig) else None,
            templates=templates if isinstance(templates, TemplatesConfig) else None,
            workflow_source=workflow_source,
            templates_source=templates_source,
        )


def resolve_config(
    resolver: ConfigResolver,
    workflow_path: str | None = None,
    templates_path: str | None = None,
) -> tuple[WorkflowConfig, TemplatesConfig]:
    """Resolve both documents, substituting built-in defaults for failures."""
    resolved = resolver.resolve(workflow_path, templates_path)
    workflow = resolved.workflow or create_default_workflow_config()
    templates = resolved.templates or create_default_templates_config()
    if resolved.workflow is None and resolved.templates is None:
        logger.debug("No configuration files loaded, using defaults")
    return workflow, templates
