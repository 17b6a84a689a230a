"""Workflow and templates configuration documents."""

from mvpgen.config.catalog import (
    ProjectConfig,
    derive_project_config,
    filter_templates_by_options,
    get_template_choices,
    get_template_config,
    legacy_template_name,
)
from mvpgen.config.defaults import (
    create_default_templates_config,
    create_default_workflow_config,
)
from mvpgen.config.loader import (
    ConfigResolver,
    ResolvedConfig,
    find_local_config_files,
    load_templates_config,
    load_workflow_config,
    resolve_config,
)
from mvpgen.config.schema import (
    FieldError,
    PromptStep,
    TemplateConfig,
    TemplatesConfig,
    ValidationResult,
    WorkflowConfig,
    validate_document,
)

__all__ = [
    "ConfigResolver",
    "FieldError",
    "ProjectConfig",
    "PromptStep",
    "ResolvedConfig",
    "TemplateConfig",
    "TemplatesConfig",
    "ValidationResult",
    "WorkflowConfig",
    "create_default_templates_config",
    "create_default_workflow_config",
    "derive_project_config",
    "filter_templates_by_options",
    "find_local_config_files",
    "get_template_choices",
    "get_template_config",
    "legacy_template_name",
    "load_templates_config",
    "load_workflow_config",
    "resolve_config",
    "validate_document",
]
