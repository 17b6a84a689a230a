"""Fixed fallback questions used outside a workflow."""

from __future__ import annotations

from mvpgen.config.catalog import get_template_choices
from mvpgen.config.defaults import create_default_templates_config
from mvpgen.config.schema import TemplatesConfig
from mvpgen.prompts.engine import ClickPromptBackend, PromptBackend, Question


def determine_template(
    backend: PromptBackend | None = None, templates: TemplatesConfig | None = None
) -> str:
    """Ask which template to use, offering the catalog's active templates."""
    backend = backend or ClickPromptBackend()
    catalog = templates or create_default_templates_config()
    choices = tuple(get_template_choices(catalog))
    if not choices:
        choices = tuple(get_template_choices(create_default_templates_config()))
    answer: str = backend.ask(
        Question(
            type="list",
            name="template",
            message="Select a project template:",
            choices=choices,
        )
    )
    return answer


def _confirm(
    backend: PromptBackend | None, name: str, message: str, default: bool
) -> bool:
    backend = backend or ClickPromptBackend()
    return bool(
        backend.ask(Question(type="confirm", name=name, message=message, default=default))
    )


def confirm_typescript(backend: PromptBackend | None = None) -> bool:
    return _confirm(backend, "typescript", "Add TypeScript support?", True)


def confirm_esbuild(backend: PromptBackend | None = None) -> bool:
    return _confirm(backend, "esbuild", "Add ESBuild for fast compilation?", False)


def confirm_npm_install(backend: PromptBackend | None = None) -> bool:
    return _confirm(backend, "npmInstall", "Install dependencies automatically?", True)
