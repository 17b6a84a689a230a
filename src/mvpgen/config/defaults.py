"""Built-in documents used when no configuration can be resolved."""

from __future__ import annotations

from mvpgen.config.schema import TemplatesConfig, WorkflowConfig

DEFAULT_TEMPLATE_CHOICES: list[dict[str, str]] = [
    {"name": "🌐 Express + Handlebars", "value": "express-hbs"},
    {"name": "⚡ Express API", "value": "express-api"},
    {"name": "📦 Node.js CLI Tool", "value": "node-cli"},
    {"name": "🏗️ Basic Node.js", "value": "basic-node"},
]


def create_default_workflow_config() -> WorkflowConfig:
    """Return the standard four-step workflow."""
    return WorkflowConfig.model_validate(
        {
            "version": "1.0.0",
            "name": "Default MVP Generator Workflow",
            "description": "Standard project generation workflow",
            "steps": [
                {
                    "type": "list",
                    "name": "template",
                    "message": "Select a project template:",
                    "choices": DEFAULT_TEMPLATE_CHOICES,
                },
                {
                    "type": "confirm",
                    "name": "typescript",
                    "message": "Add TypeScript support?",
                    "default": True,
                },
                {
                    "type": "confirm",
                    "name": "esbuild",
                    "message": "Add ESBuild for fast compilation?",
                    "default": True,
                },
                {
                    "type": "confirm",
                    "name": "npmInstall",
                    "message": "Install dependencies automatically?",
                    "default": True,
                },
            ],
            "postProcess": {
                "updatePackageJson": True,
                "installDependencies": False,
                "customScripts": [],
            },
        }
    )


def _default_template(
    path: str, name: str, description: str, category: str, priority: int
) -> dict[str, object]:
    return {
        "path": path,
        "name": name,
        "description": description,
        "options": ["ts", "esbuild"],
        "category": category,
        "priority": priority,
    }


def create_default_templates_config() -> TemplatesConfig:
    """Return the built-in catalog: web, api, cli and basic templates."""
    return TemplatesConfig.model_validate(
        {
            "version": "1.0.0",
            "templates": [
                _default_template(
                    "express-hbs",
                    "Express + Handlebars",
                    "Full-stack web application with Express and Handlebars",
                    "web",
                    100,
                ),
                _default_template(
                    "express-api",
                    "Express API",
                    "RESTful API server with Express",
                    "api",
                    90,
                ),
                _default_template(
                    "node-cli",
                    "Node.js CLI Tool",
                    "Command-line application template",
                    "cli",
                    80,
                ),
                _default_template(
                    "basic-node",
                    "Basic Node.js",
                    "Minimal Node.js project",
                    "basic",
                    70,
                ),
            ],
            "defaultOptions": {
                "typescript": True,
                "esbuild": True,
                "npmInstall": True,
            },
        }
    )
