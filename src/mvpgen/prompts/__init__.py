"""Declarative prompt workflows."""

from mvpgen.prompts.engine import (
    ClickPromptBackend,
    PromptBackend,
    PromptEngine,
    Question,
    execute_workflow_prompts,
    validate_prompt_step,
    validate_workflow_references,
)
from mvpgen.prompts.postprocess import execute_post_processing
from mvpgen.prompts.registry import (
    CONDITIONS,
    FILTERS,
    VALIDATORS,
    FunctionRegistries,
    FunctionRegistry,
    PromptAnswers,
    get_available_condition_functions,
    get_available_filter_functions,
    get_available_validation_functions,
    min_length_validator,
    register_condition_function,
    register_filter_function,
    register_validation_function,
)

__all__ = [
    "CONDITIONS",
    "ClickPromptBackend",
    "FILTERS",
    "FunctionRegistries",
    "FunctionRegistry",
    "PromptAnswers",
    "PromptBackend",
    "PromptEngine",
    "Question",
    "VALIDATORS",
    "execute_post_processing",
    "execute_workflow_prompts",
    "get_available_condition_functions",
    "get_available_filter_functions",
    "get_available_validation_functions",
    "min_length_validator",
    "register_condition_function",
    "register_filter_function",
    "register_validation_function",
    "validate_prompt_step",
    "validate_workflow_references",
]
