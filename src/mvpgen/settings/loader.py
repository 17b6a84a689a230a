"""Settings file loading and merging."""

import logging
import os
from pathlib import Path

import yaml

from mvpgen.settings.schema import DEFAULT_SETTINGS, GeneratorSettings

logger = logging.getLogger(__name__)

SETTINGS_DIRNAME = ".mvp-gen"
SETTINGS_FILENAME = "config.yaml"
REPO_ENV = "MVP_GEN_REPO"
BRANCH_ENV = "MVP_GEN_BRANCH"


def get_home_settings_path() -> Path:
    """Get path to global settings: ~/.mvp-gen/config.yaml."""
    return Path.home() / SETTINGS_DIRNAME / SETTINGS_FILENAME


def get_local_settings_path() -> Path:
    """Get path to local settings: ./.mvp-gen/config.yaml."""
    return Path.cwd() / SETTINGS_DIRNAME / SETTINGS_FILENAME


def load_yaml_settings(path: Path) -> dict[str, object] | None:
    """Load a YAML settings file, return None if missing, empty or invalid."""
    if not path.exists():
        return None
    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.warning("Ignoring invalid settings file %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        return None
    result: dict[str, object] = data
    return result


def settings_from_env() -> GeneratorSettings:
    """Read MVP_GEN_REPO / MVP_GEN_BRANCH."""
    return GeneratorSettings(
        repo=os.environ.get(REPO_ENV) or None,
        branch=os.environ.get(BRANCH_ENV) or None,
    )


def load_settings() -> GeneratorSettings:
    """Load merged settings.

    Precedence (lowest to highest):
    1. Built-in defaults
    2. Global settings (~/.mvp-gen/config.yaml)
    3. Local settings (./.mvp-gen/config.yaml)
    4. Environment variables

    CLI options are layered on top by the caller.
    """
    settings = DEFAULT_SETTINGS

    for path in (get_home_settings_path(), get_local_settings_path()):
        data = load_yaml_settings(path)
        if data:
            logger.debug("Loaded settings: %s", path)
            settings = settings.merge(GeneratorSettings.from_dict(data))

    return settings.merge(settings_from_env())
