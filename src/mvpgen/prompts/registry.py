"""Named validation, condition and filter functions for workflow steps.

Workflow documents are data, so steps refer to behavior by name. Each
registry maps those names to plain callables and can be extended at runtime.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

PromptAnswers = dict[str, Any]

ValidationFn = Callable[[Any], bool | str]
ConditionFn = Callable[[Mapping[str, Any]], bool]
FilterFn = Callable[[Any], Any]

F = TypeVar("F", bound=Callable[..., Any])

PROJECT_NAME_PATTERN = re.compile(r"^[a-z0-9_-]+$", re.IGNORECASE)


class FunctionRegistry(Generic[F]):
    """A name -> function mapping."""

    def __init__(self, kind: str, functions: Mapping[str, F] | None = None) -> None:
        self.kind = kind
        self._functions: dict[str, F] = dict(functions or {})

    def register(self, name: str, fn: F) -> None:
        """Register or replace a function under `name`."""
        if not name:
            raise ValueError(f"{self.kind} function name cannot be empty")
        self._functions[name] = fn

    def get(self, name: str) -> F | None:
        return self._functions.get(name)

    def names(self) -> list[str]:
        return list(self._functions)

    def copy(self) -> FunctionRegistry[F]:
        return FunctionRegistry(self.kind, self._functions)

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)

    def __len__(self) -> int:
        return len(self._functions)


# Built-in validators return True or an error message


def validate_required(value: Any) -> bool | str:
    # A confirm answer of False is still an answer
    if isinstance(value, bool):
        return True
    if value is None or value == [] or value == "":
        return "This field is required"
    if isinstance(value, str) and not value.strip():
        return "This field is required"
    return True


def validate_project_name(value: Any) -> bool | str:
    if not isinstance(value, str) or not PROJECT_NAME_PATTERN.match(value):
        return (
            "Project name can only contain letters, numbers, hyphens, "
            "and underscores"
        )
    return True


def min_length_validator(minimum: int) -> ValidationFn:
    """Build a validator rejecting strings shorter than `minimum`."""

    def validate(value: Any) -> bool | str:
        if len(str(value or "")) < minimum:
            return f"Minimum length is {minimum} characters"
        return True

    return validate


def _has_database(answers: Mapping[str, Any]) -> bool:
    features = answers.get("features") or []
    return "database" in features


def _is_express_template(answers: Mapping[str, Any]) -> bool:
    return answers.get("template") in ("express-hbs", "express-api")


def _to_kebab_case(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    return re.sub(r"\s+", "-", value.strip().lower())


def _str_method(method: str) -> FilterFn:
    def apply(value: Any) -> Any:
        if isinstance(value, str):
            return getattr(value, method)()
        return value

    return apply


VALIDATORS: FunctionRegistry[ValidationFn] = FunctionRegistry(
    "validation",
    {
        "required": validate_required,
        "isValidProjectName": validate_project_name,
    },
)

CONDITIONS: FunctionRegistry[ConditionFn] = FunctionRegistry(
    "condition",
    {
        "hasTypeScript": lambda answers: answers.get("typescript") is True,
        "hasESBuild": lambda answers: answers.get("esbuild") is True,
        "hasDatabase": _has_database,
        "isExpressTemplate": _is_express_template,
    },
)

FILTERS: FunctionRegistry[FilterFn] = FunctionRegistry(
    "filter",
    {
        "trim": _str_method("strip"),
        "toLowerCase": _str_method("lower"),
        "toKebabCase": _to_kebab_case,
    },
)


@dataclass
class FunctionRegistries:
    """The three registries a prompt engine resolves step names against."""

    validators: FunctionRegistry[ValidationFn] = field(
        default_factory=lambda: VALIDATORS
    )
    conditions: FunctionRegistry[ConditionFn] = field(
        default_factory=lambda: CONDITIONS
    )
    filters: FunctionRegistry[FilterFn] = field(default_factory=lambda: FILTERS)

    def isolated(self) -> FunctionRegistries:
        """Return copies so registrations do not leak into the globals."""
        return FunctionRegistries(
            validators=self.validators.copy(),
            conditions=self.conditions.copy(),
            filters=self.filters.copy(),
        )


def register_validation_function(name: str, fn: ValidationFn) -> None:
    VALIDATORS.register(name, fn)


def register_condition_function(name: str, fn: ConditionFn) -> None:
    CONDITIONS.register(name, fn)


def register_filter_function(name: str, fn: FilterFn) -> None:
    FILTERS.register(name, fn)


def get_available_validation_functions() -> list[str]:
    return VALIDATORS.names()


def get_available_condition_functions() -> list[str]:
    return CONDITIONS.names()


def get_available_filter_functions() -> list[str]:
    return FILTERS.names()
