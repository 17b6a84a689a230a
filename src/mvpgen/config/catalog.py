"""Queries over the templates catalog."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from mvpgen.config.schema import (
    Choice,
    DisplayOptions,
    TemplateConfig,
    TemplatesConfig,
)

EXPERIMENTAL_MARKER = "🧪 "

OPTION_LABELS: dict[str, str] = {
    "ts": "TypeScript",
    "esbuild": "ESBuild",
    "nextjs": "Next.js",
    "react": "React",
    "vue": "Vue",
    "docker": "Docker",
    "mongodb": "MongoDB",
    "postgresql": "PostgreSQL",
}

# Used when the template step carries no templateDisplay block
DEFAULT_DISPLAY = DisplayOptions.model_validate({"maxWidth": 200})


@dataclass(frozen=True)
class ProjectConfig:
    """Per-invocation project settings derived from template and answers."""

    typescript: bool = False
    esbuild: bool = False
    npm_install: bool = False


def get_template_config(
    templates: TemplatesConfig, name_or_path: str | None
) -> TemplateConfig | None:
    """Find a template by display name or locator path."""
    if not name_or_path:
        return None
    for template in templates.templates:
        if template.name == name_or_path or template.path == name_or_path:
            return template
    return None


def filter_templates_by_options(
    templates: TemplatesConfig, required_options: Iterable[str]
) -> list[TemplateConfig]:
    """Return templates supporting every option in `required_options`."""
    required = list(required_options)
    return [
        t for t in templates.templates if all(opt in t.options for opt in required)
    ]


def _truncate(text: str, width: int) -> str:
    if width <= 1 or len(text) <= width:
        return text
    return text[: width - 1] + "…"


def format_template_label(
    template: TemplateConfig, display: DisplayOptions = DEFAULT_DISPLAY
) -> str:
    """Build the one-line label shown for a template in a selection menu."""
    label = f"{EXPERIMENTAL_MARKER if template.experimental else ''}{template.name}"

    if display.show_category and template.category:
        label = f"[{template.category.upper()}] {label}"

    if display.show_options and template.options:
        summary = " + ".join(OPTION_LABELS.get(opt, opt) for opt in template.options)
        label = f"{label} ({summary})"

    if display.show_description and template.description:
        label = f"{label}{display.separator}{template.description}"

    return _truncate(label, display.max_width)


def get_template_choices(
    templates: TemplatesConfig, display: DisplayOptions | None = None
) -> list[Choice]:
    """Build selection choices from the catalog.

    Deprecated templates are excluded; the rest are ordered by descending
    priority. `sorted` is stable, so equal priorities keep catalog order.
    """
    display = display or DEFAULT_DISPLAY
    active = [t for t in templates.templates if not t.deprecated]
    ordered = sorted(active, key=lambda t: t.priority, reverse=True)
    return [
        Choice(
            name=format_template_label(t, display),
            value=t.path,
            description=t.description,
        )
        for t in ordered
    ]


def derive_project_config(
    template: TemplateConfig | None, answers: Mapping[str, Any]
) -> ProjectConfig:
    """Compute the ProjectConfig for this run.

    A selected template's `ts`/`esbuild` options win over any answer.
    """
    if template is not None:
        typescript = "ts" in template.options
        esbuild = "esbuild" in template.options
    else:
        typescript = bool(answers.get("typescript", False))
        esbuild = bool(answers.get("esbuild", False))
    return ProjectConfig(
        typescript=typescript,
        esbuild=esbuild,
        npm_install=bool(answers.get("npmInstall", False)),
    )


def legacy_template_name(template: str, config: ProjectConfig) -> str:
    """Map a bare template name to the `<lang>-<build>-<name>` directory layout."""
    lang = "ts" if config.typescript else "js"
    build = "esbuild" if config.esbuild else "default"
    return f"{lang}-{build}-{template}"
