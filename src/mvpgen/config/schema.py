"""Schema and validation for workflow and templates documents."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
)

DocumentKind = Literal["workflow", "templates"]
StepType = Literal["list", "confirm", "input", "checkbox", "password"]
TemplateOption = Literal[
    "ts", "esbuild", "nextjs", "react", "vue", "docker", "mongodb", "postgresql"
]

CHOICE_STEP_TYPES: frozenset[str] = frozenset({"list", "checkbox"})
ROOT_PATH = "<root>"

NonEmptyStr = Annotated[StrictStr, Field(min_length=1)]


class _Document(BaseModel):
    """Base for all document models: immutable, camelCase on the wire."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Choice(_Document):
    """A single selectable entry of a list/checkbox step."""

    name: StrictStr
    value: Any = None
    description: StrictStr | None = None


class DisplayOptions(_Document):
    """How template choices are rendered in the template step."""

    show_description: StrictBool = Field(True, alias="showDescription")
    show_category: StrictBool = Field(False, alias="showCategory")
    show_options: StrictBool = Field(True, alias="showOptions")
    max_width: StrictInt = Field(80, alias="maxWidth")
    separator: StrictStr = " - "


class PromptStep(_Document):
    """One declarative interactive step of a workflow."""

    type: StepType
    name: NonEmptyStr
    message: NonEmptyStr
    choices: list[Choice] | None = None
    default: Any = None
    validate_name: StrictStr | None = Field(None, alias="validate")
    when: StrictStr | None = None
    filter: StrictStr | None = None
    required: StrictBool = False
    page_size: StrictInt | None = Field(None, alias="pageSize")
    loop: StrictBool | None = None
    template_display: DisplayOptions | None = Field(None, alias="templateDisplay")

    @property
    def is_choice_step(self) -> bool:
        return self.type in CHOICE_STEP_TYPES


class PostProcessConfig(_Document):
    """Actions run after the template has been copied."""

    update_package_json: StrictBool = Field(True, alias="updatePackageJson")
    install_dependencies: StrictBool = Field(False, alias="installDependencies")
    custom_scripts: list[StrictStr] = Field(
        default_factory=list, alias="customScripts"
    )


class WorkflowConfig(_Document):
    """Workflow document (YAML): prompt steps plus post-processing."""

    version: StrictStr = "1.0.0"
    name: NonEmptyStr
    description: StrictStr | None = None
    steps: list[PromptStep]
    post_process: PostProcessConfig | None = Field(None, alias="postProcess")

    def get_step(self, name: str) -> PromptStep | None:
        for step in self.steps:
            if step.name == name:
                return step
        return None


class TemplateConfig(_Document):
    """A single catalog entry of the templates document."""

    path: NonEmptyStr
    name: NonEmptyStr
    description: StrictStr | None = None
    options: list[TemplateOption] = Field(default_factory=list)
    category: StrictStr | None = None
    priority: Annotated[StrictInt, Field(ge=0)] = 0
    deprecated: StrictBool = False
    experimental: StrictBool = False


class DefaultOptions(_Document):
    typescript: StrictBool = True
    esbuild: StrictBool = True
    npm_install: StrictBool = Field(True, alias="npmInstall")


class TemplatesConfig(_Document):
    """Templates document (JSON): the catalog of available templates."""

    version: StrictStr = "1.0.0"
    templates: list[TemplateConfig]
    default_options: DefaultOptions | None = Field(None, alias="defaultOptions")


@dataclass(frozen=True)
class FieldError:
    """A single validation failure located by a dotted field path."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass
class ValidationResult:
    """Outcome of validating a document: a typed value or field errors."""

    value: WorkflowConfig | TemplatesConfig | None = None
    errors: list[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors and self.value is not None


def _format_loc(loc: tuple[int | str, ...]) -> str:
    if not loc:
        return ROOT_PATH
    return ".".join(str(part) for part in loc)


def field_errors_from(exc: ValidationError) -> list[FieldError]:
    """Convert a pydantic ValidationError into FieldErrors."""
    return [
        FieldError(path=_format_loc(err["loc"]), message=err["msg"])
        for err in exc.errors()
    ]


def _duplicate_step_errors(workflow: WorkflowConfig) -> list[FieldError]:
    counts = Counter(step.name for step in workflow.steps)
    errors: list[FieldError] = []
    seen: set[str] = set()
    for index, step in enumerate(workflow.steps):
        if counts[step.name] > 1 and step.name in seen:
            errors.append(
                FieldError(
                    path=f"steps.{index}.name",
                    message=f"Duplicate step name '{step.name}'",
                )
            )
        seen.add(step.name)
    return errors


def validate_workflow(data: Any) -> ValidationResult:
    """Validate parsed YAML data as a workflow document."""
    try:
        workflow = WorkflowConfig.model_validate(data)
    except ValidationError as e:
        return ValidationResult(errors=field_errors_from(e))

    duplicates = _duplicate_step_errors(workflow)
    if duplicates:
        return ValidationResult(errors=duplicates)
    return ValidationResult(value=workflow)


def validate_templates(data: Any) -> ValidationResult:
    """Validate parsed JSON data as a templates document."""
    try:
        return ValidationResult(value=TemplatesConfig.model_validate(data))
    except ValidationError as e:
        return ValidationResult(errors=field_errors_from(e))


def validate_document(data: Any, kind: DocumentKind) -> ValidationResult:
    """Validate arbitrary parsed data against the schema for `kind`."""
    if kind == "workflow":
        return validate_workflow(data)
    if kind == "templates":
        return validate_templates(data)
    raise ValueError(f"Unknown document kind: {kind}")
