"""Drive interactive prompts from declarative workflow steps."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

import click
from rich.markup import escape

from mvpgen.config.catalog import get_template_choices
from mvpgen.config.schema import (
    Choice,
    FieldError,
    PromptStep,
    StepType,
    TemplatesConfig,
    WorkflowConfig,
)
from mvpgen.console import console
from mvpgen.errors import PromptConfigurationError
from mvpgen.prompts.registry import (
    ConditionFn,
    FilterFn,
    FunctionRegistries,
    PromptAnswers,
    ValidationFn,
    validate_required,
)

logger = logging.getLogger(__name__)

TEMPLATE_STEP = "template"


@dataclass(frozen=True)
class Question:
    """A single prompt, ready to be asked by a backend."""

    type: StepType
    name: str
    message: str
    choices: tuple[Choice, ...] = ()
    default: Any = None
    page_size: int | None = None
    loop: bool | None = None


class PromptBackend(Protocol):
    """Asks one question and returns the raw answer."""

    def ask(self, question: Question) -> Any: ...

    def show_error(self, message: str) -> None: ...


class ClickPromptBackend:
    """Terminal backend built on click prompts."""

    def _print_choices(self, question: Question) -> None:
        console.print(f"[bold]{escape(question.message)}[/bold]")
        for i, choice in enumerate(question.choices, 1):
            console.print(f"  {i}. {escape(choice.name)}")

    def _default_index(self, question: Question) -> int:
        for i, choice in enumerate(question.choices, 1):
            if choice.value == question.default:
                return i
        return 1

    def _ask_list(self, question: Question) -> Any:
        self._print_choices(question)
        index: int = click.prompt(
            "Select",
            type=click.IntRange(1, len(question.choices)),
            default=self._default_index(question),
        )
        return question.choices[index - 1].value

    def _ask_checkbox(self, question: Question) -> list[Any]:
        self._print_choices(question)
        defaults = question.default if isinstance(question.default, list) else []
        default_numbers = ",".join(
            str(i)
            for i, choice in enumerate(question.choices, 1)
            if choice.value in defaults
        )
        while True:
            raw: str = click.prompt(
                "Select (comma-separated numbers)",
                default=default_numbers,
                show_default=bool(default_numbers),
            )
            try:
                numbers = [int(part) for part in raw.split(",") if part.strip()]
            except ValueError:
                self.show_error("Enter numbers separated by commas")
                continue
            if all(1 <= n <= len(question.choices) for n in numbers):
                return [question.choices[n - 1].value for n in numbers]
            self.show_error(f"Choose numbers between 1 and {len(question.choices)}")

    def ask(self, question: Question) -> Any:
        if question.type == "list":
            return self._ask_list(question)
        if question.type == "checkbox":
            return self._ask_checkbox(question)
        if question.type == "confirm":
            return click.confirm(question.message, default=bool(question.default))
        default = "" if question.default is None else str(question.default)
        return click.prompt(
            question.message,
            default=default,
            show_default=bool(default),
            hide_input=question.type == "password",
        )

    def show_error(self, message: str) -> None:
        console.print(f"[red]>> {escape(message)}[/red]")


@dataclass(frozen=True)
class CompiledStep:
    """A workflow step with its named functions resolved."""

    step: PromptStep
    condition: ConditionFn | None = None
    validator: ValidationFn | None = None
    filter: FilterFn | None = None


def validate_prompt_step(
    step: PromptStep, registries: FunctionRegistries | None = None
) -> list[str]:
    """Check a step in isolation. Returns human-readable problems."""
    registries = registries or FunctionRegistries()
    errors: list[str] = []

    if not step.name:
        errors.append("Step name is required")
    if not step.message:
        errors.append("Step message is required")
    if step.is_choice_step and not step.choices:
        errors.append(f'Step type "{step.type}" requires choices')
    if step.validate_name and step.validate_name not in registries.validators:
        errors.append(f'Validation function "{step.validate_name}" not found')
    if step.when and step.when not in registries.conditions:
        errors.append(f'Condition function "{step.when}" not found')
    if step.filter and step.filter not in registries.filters:
        errors.append(f'Filter function "{step.filter}" not found')

    return errors


def validate_workflow_references(
    workflow: WorkflowConfig, registries: FunctionRegistries | None = None
) -> list[FieldError]:
    """Report validate/when/filter names that are not registered."""
    registries = registries or FunctionRegistries()
    errors: list[FieldError] = []
    for index, step in enumerate(workflow.steps):
        refs = (
            ("validate", step.validate_name, registries.validators),
            ("when", step.when, registries.conditions),
            ("filter", step.filter, registries.filters),
        )
        for key, name, registry in refs:
            if name and name not in registry:
                errors.append(
                    FieldError(
                        path=f"steps.{index}.{key}",
                        message=(
                            f'Unknown {registry.kind} function "{name}" '
                            f"(available: {', '.join(registry.names())})"
                        ),
                    )
                )
    return errors


class PromptEngine:
    """Runs the steps of a workflow and collects the answers."""

    def __init__(
        self,
        backend: PromptBackend | None = None,
        registries: FunctionRegistries | None = None,
        templates: TemplatesConfig | None = None,
    ) -> None:
        self.backend = backend or ClickPromptBackend()
        self.registries = registries or FunctionRegistries()
        self.templates = templates

    def compile_step(self, step: PromptStep) -> CompiledStep:
        """Resolve the named functions of a step.

        Raises PromptConfigurationError for unregistered names.
        """

        def lookup(name: str | None, registry: Any) -> Any:
            if not name:
                return None
            fn = registry.get(name)
            if fn is None:
                raise PromptConfigurationError(
                    f'Step "{step.name}": {registry.kind} function "{name}" not found'
                )
            return fn

        validator = lookup(step.validate_name, self.registries.validators)
        if validator is None and step.required:
            validator = validate_required

        return CompiledStep(
            step=step,
            condition=lookup(step.when, self.registries.conditions),
            validator=validator,
            filter=lookup(step.filter, self.registries.filters),
        )

    def resolve_choices(self, step: PromptStep) -> tuple[Choice, ...]:
        """Pick the choice list for a list/checkbox step.

        The template step draws from the templates catalog whenever one is
        loaded, ignoring any static choices.
        """
        if not step.is_choice_step:
            return ()

        if step.name == TEMPLATE_STEP and self.templates is not None:
            choices = get_template_choices(self.templates, step.template_display)
            logger.debug(
                "Template choices: %d of %d templates",
                len(choices),
                len(self.templates.templates),
            )
            if not choices:
                raise PromptConfigurationError(
                    "Template step requires choices, but the templates "
                    "configuration has no active templates"
                )
            return tuple(choices)

        if step.choices:
            return tuple(step.choices)

        if step.name == TEMPLATE_STEP:
            raise PromptConfigurationError(
                "Template step requires choices: define static choices in the "
                "workflow config or load a templates configuration"
            )
        raise PromptConfigurationError(
            f'Step "{step.name}" of type "{step.type}" requires choices'
        )

    def _ask(self, compiled: CompiledStep, question: Question) -> Any:
        while True:
            value = self.backend.ask(question)
            if compiled.filter is not None:
                value = compiled.filter(value)
            if compiled.validator is None:
                return value
            outcome = compiled.validator(value)
            if outcome is True:
                return value
            self.backend.show_error(
                outcome if isinstance(outcome, str) else "Invalid value"
            )

    def execute_step(self, compiled: CompiledStep) -> Any:
        step = compiled.step
        question = Question(
            type=step.type,
            name=step.name,
            message=step.message,
            choices=self.resolve_choices(step),
            default=step.default,
            page_size=step.page_size,
            loop=step.loop,
        )
        return self._ask(compiled, question)

    def run(self, steps: Sequence[PromptStep]) -> PromptAnswers:
        """Execute steps in order and return the collected answers.

        Steps whose `when` condition is false are skipped and leave no key.
        """
        compiled_steps = [self.compile_step(step) for step in steps]
        answers: PromptAnswers = {}

        for compiled in compiled_steps:
            if compiled.condition is not None and not compiled.condition(answers):
                logger.debug("Skipping step %s", compiled.step.name)
                continue
            try:
                answers[compiled.step.name] = self.execute_step(compiled)
            except PromptConfigurationError:
                console.print(
                    f'[red]Error in step "{escape(compiled.step.name)}"[/red]'
                )
                raise

        return answers


def execute_workflow_prompts(
    workflow: WorkflowConfig,
    templates: TemplatesConfig | None = None,
    backend: PromptBackend | None = None,
    registries: FunctionRegistries | None = None,
) -> PromptAnswers:
    """Announce and run a workflow's prompt steps."""
    console.print(f"\n[cyan]Starting workflow: {escape(workflow.name)}[/cyan]")
    if workflow.description:
        console.print(f"[dim]{escape(workflow.description)}[/dim]")
    console.print()

    engine = PromptEngine(backend=backend, registries=registries, templates=templates)
    return engine.run(workflow.steps)
