"""The `init` pipeline: resolve config, prompt, acquire, customize."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from rich.markup import escape

from mvpgen.cache import CacheManager
from mvpgen.config.catalog import (
    ProjectConfig,
    derive_project_config,
    get_template_config,
    legacy_template_name,
)
from mvpgen.config.loader import ConfigResolver, resolve_config
from mvpgen.config.schema import TemplatesConfig, WorkflowConfig
from mvpgen.console import console
from mvpgen.errors import (
    AcquisitionError,
    PostProcessScriptError,
    PromptConfigurationError,
    TemplateNotFoundError,
)
from mvpgen.project import (
    install_dependencies,
    is_current_directory,
    print_next_steps,
    resolve_target_directory,
    update_package_json,
)
from mvpgen.prompts.engine import PromptBackend, execute_workflow_prompts
from mvpgen.prompts.postprocess import execute_post_processing
from mvpgen.prompts.questions import (
    confirm_esbuild,
    confirm_npm_install,
    confirm_typescript,
    determine_template,
)
from mvpgen.prompts.registry import FunctionRegistries, PromptAnswers
from mvpgen.remote.github import (
    ARCHIVE_TIMEOUT,
    DEFAULT_BRANCH,
    FETCH_TIMEOUT,
    RawContentFetcher,
)
from mvpgen.templates.acquisition import (
    TEMPLATES_DIRNAME,
    AcquisitionMode,
    TemplateAcquirer,
)

logger = logging.getLogger(__name__)

# CLI/settings mode names
MODES: dict[str, AcquisitionMode] = {
    "local": AcquisitionMode.LOCAL,
    "repo": AcquisitionMode.REPO_CHECKOUT,
    "archive": AcquisitionMode.DIRECT_ARCHIVE,
}


@dataclass
class GenerateOptions:
    """Everything `init` needs, after CLI flags and settings are merged."""

    project_name: str
    template: str | None = None
    typescript: bool | None = None
    esbuild: bool | None = None
    install: bool | None = None
    workflow_path: str | None = None
    templates_path: str | None = None
    repo: str | None = None
    branch: str = DEFAULT_BRANCH
    prefer_local: bool = False
    mode: str = "repo"
    use_cache: bool = True
    fetch_timeout: float = FETCH_TIMEOUT
    archive_timeout: float = ARCHIVE_TIMEOUT

    @property
    def non_interactive(self) -> bool:
        """True when any answer was supplied as a flag."""
        return bool(self.template) or any(
            value is not None for value in (self.typescript, self.esbuild, self.install)
        )


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a successful run."""

    target_dir: Path
    project_name: str
    project_config: ProjectConfig
    template_source: str
    answers: PromptAnswers = field(default_factory=dict)


class ProjectGenerator:
    """Runs one project generation.

    Collaborators are injectable so the pipeline can be driven without a
    terminal or network.
    """

    def __init__(
        self,
        cwd: Path | None = None,
        backend: PromptBackend | None = None,
        registries: FunctionRegistries | None = None,
        fetcher: RawContentFetcher | None = None,
        acquirer: TemplateAcquirer | None = None,
        cache: CacheManager | None = None,
    ) -> None:
        self.cwd = cwd or Path.cwd()
        self.backend = backend
        self.registries = registries
        self.fetcher = fetcher
        self.acquirer = acquirer
        self.cache = cache

    def load_config(
        self, options: GenerateOptions, fetcher: RawContentFetcher
    ) -> tuple[WorkflowConfig, TemplatesConfig]:
        resolver = ConfigResolver(
            root_dir=self.cwd,
            fetcher=fetcher,
            repo=options.repo,
            branch=options.branch,
            prefer_local=options.prefer_local,
            registries=self.registries,
        )
        return resolve_config(resolver, options.workflow_path, options.templates_path)

    def _fallback_answers(self, templates: TemplatesConfig) -> PromptAnswers:
        return {
            "template": determine_template(self.backend, templates),
            "typescript": confirm_typescript(self.backend),
            "esbuild": confirm_esbuild(self.backend),
            "npmInstall": confirm_npm_install(self.backend),
        }

    def collect_answers(
        self,
        options: GenerateOptions,
        workflow: WorkflowConfig,
        templates: TemplatesConfig,
    ) -> PromptAnswers:
        """Answers from CLI flags (asking only for gaps) or the workflow."""
        if options.non_interactive:
            console.print("\n[cyan]Using CLI options (non-interactive mode)[/cyan]")
            return {
                "template": options.template or determine_template(self.backend, templates),
                "typescript": (
                    options.typescript
                    if options.typescript is not None
                    else confirm_typescript(self.backend)
                ),
                "esbuild": (
                    options.esbuild
                    if options.esbuild is not None
                    else confirm_esbuild(self.backend)
                ),
                "npmInstall": (
                    options.install
                    if options.install is not None
                    else confirm_npm_install(self.backend)
                ),
            }

        try:
            answers = execute_workflow_prompts(
                workflow,
                templates=templates,
                backend=self.backend,
                registries=self.registries,
            )
        except PromptConfigurationError as e:
            console.print(f"[yellow]Workflow execution failed: {escape(str(e))}[/yellow]")
            console.print("[dim]Falling back to default prompts...[/dim]")
            return self._fallback_answers(templates)

        if not answers.get("template"):
            # Custom workflows may omit the template step
            answers["template"] = determine_template(self.backend, templates)
        return answers

    def acquire_template(
        self,
        acquirer: TemplateAcquirer,
        locator: str,
        target_dir: Path,
        options: GenerateOptions,
        fallback_name: str | None = None,
    ) -> str:
        """Try the configured remote mode first, then bundled templates."""
        attempted: list[str] = []
        mode = MODES.get(options.mode, AcquisitionMode.REPO_CHECKOUT)

        if options.repo and mode is not AcquisitionMode.LOCAL:
            console.print("[dim]Downloading template from Git repository...[/dim]")
            try:
                return acquirer.acquire(
                    locator,
                    target_dir,
                    repo=options.repo,
                    branch=options.branch,
                    mode=mode,
                )
            except AcquisitionError as e:
                console.print(
                    f"[yellow]Git template download failed: {escape(str(e))}[/yellow]"
                )
                console.print("[dim]Falling back to local templates...[/dim]")
                attempted.append(
                    f"{options.repo}@{options.branch}: {TEMPLATES_DIRNAME}/{locator}"
                )

        try:
            return acquirer.acquire(
                locator, target_dir, mode=AcquisitionMode.LOCAL, fallback_name=fallback_name
            )
        except TemplateNotFoundError as e:
            raise TemplateNotFoundError(locator, attempted + e.attempted) from e

    def generate(self, options: GenerateOptions) -> GenerationResult:
        """Run the whole pipeline.

        Raises:
            ProjectDirectoryError: The target directory is unusable.
            TemplateNotFoundError: No source could provide the template.
        """
        target_dir, project_name = resolve_target_directory(options.project_name, self.cwd)

        owns_fetcher = self.fetcher is None
        fetcher = self.fetcher or RawContentFetcher(
            timeout=options.fetch_timeout, archive_timeout=options.archive_timeout
        )
        try:
            workflow, templates = self.load_config(options, fetcher)
            answers = self.collect_answers(options, workflow, templates)

            template_name = str(answers["template"])
            selected = get_template_config(templates, template_name)
            project_config = derive_project_config(selected, answers)
            if selected is not None:
                locator = selected.path
                logger.debug(
                    "Template %s (%s), options: %s",
                    selected.name,
                    selected.path,
                    ", ".join(selected.options),
                )
            else:
                locator = legacy_template_name(template_name, project_config)
                logger.debug("Template config not found, using fallback: %s", locator)
            logger.debug("Project config: %s", project_config)

            if not is_current_directory(options.project_name):
                target_dir.mkdir(parents=True, exist_ok=True)

            acquirer = self.acquirer or TemplateAcquirer(
                cache=self.cache,
                fetcher=fetcher,
                use_cache=options.use_cache,
            )
            source = self.acquire_template(
                acquirer, locator, target_dir, options, fallback_name=template_name
            )
            logger.debug("Template source: %s", source)
        finally:
            if owns_fetcher:
                fetcher.close()

        post = workflow.post_process
        if post is None or post.update_package_json:
            update_package_json(target_dir, project_name, project_config)

        if project_config.npm_install or (post is not None and post.install_dependencies):
            install_dependencies(target_dir)

        try:
            execute_post_processing(workflow, answers, target_dir)
        except PostProcessScriptError as e:
            console.print(f"[yellow]Post-processing failed: {escape(str(e))}[/yellow]")

        print_next_steps(
            project_name,
            project_config,
            in_current_dir=is_current_directory(options.project_name),
        )
        return GenerationResult(
            target_dir=target_dir,
            project_name=project_name,
            project_config=project_config,
            template_source=source,
            answers=answers,
        )
