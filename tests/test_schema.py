"""Tests for workflow and templates schema validation."""

import pytest
from pydantic import ValidationError

from mvpgen.config.schema import (
    ROOT_PATH,
    TemplatesConfig,
    WorkflowConfig,
    validate_document,
)


def _workflow(**overrides):
    data = {
        "name": "Custom",
        "steps": [
            {"type": "input", "name": "projectName", "message": "Name?"},
            {"type": "confirm", "name": "typescript", "message": "TS?"},
        ],
    }
    data.update(overrides)
    return data


def _templates(*entries):
    return {"templates": list(entries) or [{"path": "basic-node", "name": "Basic"}]}


def _paths(result):
    return [e.path for e in result.errors]


class TestWorkflowValidation:
    """Tests for workflow documents."""

    def test_minimal_workflow_applies_defaults(self) -> None:
        """Test that absent optional fields get their defaults."""
        result = validate_document(_workflow(), "workflow")

        assert result.ok
        workflow = result.value
        assert isinstance(workflow, WorkflowConfig)
        assert workflow.version == "1.0.0"
        assert workflow.post_process is None
        assert workflow.steps[0].required is False

    def test_camel_case_fields_are_read(self) -> None:
        """Test that wire names like postProcess and pageSize map to fields."""
        data = _workflow(
            postProcess={"customScripts": ["echo hi"], "installDependencies": True}
        )
        data["steps"][0]["pageSize"] = 5
        data["steps"][0]["validate"] = "required"
        result = validate_document(data, "workflow")

        assert result.ok
        workflow = result.value
        assert workflow.post_process.custom_scripts == ["echo hi"]
        assert workflow.post_process.install_dependencies is True
        assert workflow.post_process.update_package_json is True
        assert workflow.steps[0].page_size == 5
        assert workflow.steps[0].validate_name == "required"

    def test_missing_name_is_reported(self) -> None:
        """Test that a missing required field produces a field error."""
        data = _workflow()
        del data["name"]
        result = validate_document(data, "workflow")

        assert not result.ok
        assert result.value is None
        assert "name" in _paths(result)

    def test_unknown_step_type_is_rejected(self) -> None:
        """Test that step types outside the enum fail validation."""
        data = _workflow()
        data["steps"][1]["type"] = "slider"
        result = validate_document(data, "workflow")

        assert "steps.1.type" in _paths(result)

    def test_wrong_primitive_type_is_not_coerced(self) -> None:
        """Test that a string is not accepted where a bool is required."""
        data = _workflow()
        data["steps"][0]["required"] = "yes"
        result = validate_document(data, "workflow")

        assert "steps.0.required" in _paths(result)

    def test_empty_message_is_rejected(self) -> None:
        """Test that step messages must be non-empty."""
        data = _workflow()
        data["steps"][0]["message"] = ""
        result = validate_document(data, "workflow")

        assert "steps.0.message" in _paths(result)

    def test_duplicate_step_names_are_rejected(self) -> None:
        """Test that step names must be unique since they key the answers."""
        data = _workflow()
        data["steps"].append({"type": "input", "name": "projectName", "message": "Again?"})
        result = validate_document(data, "workflow")

        assert not result.ok
        assert _paths(result) == ["steps.2.name"]
        assert "Duplicate" in result.errors[0].message

    def test_non_mapping_document_reports_root(self) -> None:
        """Test that a document that is not an object fails at the root."""
        result = validate_document(["not", "a", "mapping"], "workflow")

        assert _paths(result) == [ROOT_PATH]

    def test_models_are_immutable(self) -> None:
        """Test that validated documents cannot be mutated."""
        workflow = validate_document(_workflow(), "workflow").value

        with pytest.raises(ValidationError):
            workflow.name = "changed"  # type: ignore[misc]


class TestTemplatesValidation:
    """Tests for templates documents."""

    def test_defaults_applied(self) -> None:
        """Test that template entries get default option values."""
        result = validate_document(_templates(), "templates")

        assert result.ok
        templates = result.value
        assert isinstance(templates, TemplatesConfig)
        entry = templates.templates[0]
        assert entry.priority == 0
        assert entry.options == []
        assert entry.deprecated is False
        assert entry.experimental is False

    def test_negative_priority_rejected(self) -> None:
        """Test that priority must be >= 0."""
        data = _templates(
            {"path": "a", "name": "A"},
            {"path": "b", "name": "B", "priority": -1},
        )
        result = validate_document(data, "templates")

        assert _paths(result) == ["templates.1.priority"]

    def test_fractional_priority_rejected(self) -> None:
        """Test that priority must be an integer."""
        data = _templates({"path": "a", "name": "A", "priority": 1.5})
        result = validate_document(data, "templates")

        assert _paths(result) == ["templates.0.priority"]

    def test_unknown_option_rejected(self) -> None:
        """Test that options outside the known set are rejected."""
        data = _templates({"path": "a", "name": "A", "options": ["ts", "svelte"]})
        result = validate_document(data, "templates")

        assert "templates.0.options.1" in _paths(result)

    def test_every_error_is_reported(self) -> None:
        """Test that validation collects all errors, not just the first."""
        data = _templates(
            {"path": "", "name": "A"},
            {"path": "b", "name": "B", "priority": "high"},
        )
        result = validate_document(data, "templates")

        assert set(_paths(result)) == {"templates.0.path", "templates.1.priority"}

    def test_default_options_aliases(self) -> None:
        """Test that defaultOptions.npmInstall is read."""
        data = _templates()
        data["defaultOptions"] = {"npmInstall": False}
        result = validate_document(data, "templates")

        assert result.value.default_options.npm_install is False
        assert result.value.default_options.typescript is True

    def test_unknown_kind_raises(self) -> None:
        """Test that an unknown document kind is a programming error."""
        with pytest.raises(ValueError):
            validate_document({}, "settings")  # type: ignore[arg-type]
