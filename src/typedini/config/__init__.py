"""
Settings management package for typed-ini.

This package loads, validates and templates the YAML file that holds
ParserSettings.
"""

from .loader import (
    SettingsLoader,
    SettingsLoadResult,
    load_settings,
    validate_settings_file,
    create_settings_template
)

__all__ = [
    'SettingsLoader',
    'SettingsLoadResult',
    'load_settings',
    'validate_settings_file',
    'create_settings_template'
]
