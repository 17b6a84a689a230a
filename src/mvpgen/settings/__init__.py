"""Tool settings for mvp-gen."""

from mvpgen.settings.loader import (
    get_home_settings_path,
    get_local_settings_path,
    load_settings,
    load_yaml_settings,
    settings_from_env,
)
from mvpgen.settings.schema import DEFAULT_SETTINGS, MODE_NAMES, GeneratorSettings

__all__ = [
    "DEFAULT_SETTINGS",
    "MODE_NAMES",
    "GeneratorSettings",
    "get_home_settings_path",
    "get_local_settings_path",
    "load_settings",
    "load_yaml_settings",
    "settings_from_env",
]
