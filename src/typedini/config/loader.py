"""
YAML settings loader for typed-ini.

This module loads ParserSettings from a YAML file, either one named
explicitly or one discovered in the usual locations, and falls back to
defaults when none exists. Unknown keys are reported as warnings.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml
from pydantic import ValidationError

from ..errors import SettingsError
from ..models.settings import ParserSettings


logger = logging.getLogger(__name__)


@dataclass
class SettingsLoadResult:
    """
    Result of a settings load operation.

    Attributes:
        settings: The parsed and validated settings
        warnings: List of non-fatal warnings
        config_path: Path to the settings file used
        is_default: Whether default settings were used
    """
    settings: ParserSettings
    warnings: List[str]
    config_path: Optional[Path]
    is_default: bool


class SettingsLoader:
    """
    Loads ParserSettings from YAML.

    Settings may sit at the top level of the document or under a 'parser'
    key, so they can share a file with other tools' configuration.
    """

    DEFAULT_CONFIG_NAMES = [
        '.typedini.yaml',
        '.typedini.yml',
        'typedini.yaml',
        'typedini.yml',
    ]

    SECTION_KEY = 'parser'

    def __init__(self, strict_mode: bool = False):
        """
        Initialize the settings loader.

        Args:
            strict_mode: If True, treat warnings (such as unknown keys) as errors
        """
        self.strict_mode = strict_mode
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def load_settings(self, config_path: Optional[Union[str, Path]] = None) -> SettingsLoadResult:
        """
        Load settings from file or use defaults.

        Args:
            config_path: Path to a settings file. If None, searches for default files.

        Returns:
            SettingsLoadResult containing settings and metadata

        Raises:
            SettingsError: If the settings are invalid or the file cannot be read
        """
        try:
            if config_path:
                config_path = Path(config_path)
                if not config_path.exists():
                    raise SettingsError(f"Settings file not found: {config_path}")
                data = self._load_yaml_file(config_path)
                is_default = False
            else:
                config_path, data = self._find_and_load_settings()
                is_default = data is None
                if is_default:
                    data = {}

            settings_data, warnings = self._extract_settings(data)
            settings = self._validate_settings_data(settings_data)

            if is_default:
                warnings.append("No settings file found, using default settings")

            if self.strict_mode and warnings:
                raise SettingsError(f"Settings warnings in strict mode: {'; '.join(warnings)}")

            self.logger.info(f"Settings loaded from {config_path or 'defaults'}")

            return SettingsLoadResult(
                settings=settings,
                warnings=warnings,
                config_path=config_path,
                is_default=is_default
            )

        except Exception as e:
            if isinstance(e, SettingsError):
                raise
            raise SettingsError(f"Failed to load settings: {e}") from e

    def _find_and_load_settings(self) -> Tuple[Optional[Path], Optional[Dict[str, Any]]]:
        """
        Find and load a settings file from the default locations.

        Returns:
            Tuple of (config_path, data) or (None, None) if not found
        """
        search_paths = [
            Path.cwd(),
            Path.home(),
            Path.home() / '.config' / 'typedini',
        ]

        for search_path in search_paths:
            for config_name in self.DEFAULT_CONFIG_NAMES:
                config_file = search_path / config_name
                if config_file.exists() and config_file.is_file():
                    try:
                        data = self._load_yaml_file(config_file)
                        self.logger.info(f"Found settings file: {config_file}")
                        return config_file, data
                    except SettingsError as e:
                        self.logger.warning(f"Failed to load {config_file}: {e}")
                        continue

        self.logger.info("No settings file found, using defaults")
        return None, None

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """
        Load and parse a YAML file.

        Raises:
            SettingsError: If the file cannot be read or parsed
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                content = f.read()

            if not content.strip():
                self.logger.warning(f"Settings file is empty: {file_path}")
                return {}

            data = yaml.safe_load(content)

            if data is None:
                return {}

            if not isinstance(data, dict):
                raise SettingsError(f"Settings file must contain a YAML mapping, got {type(data).__name__}")

            return data

        except yaml.YAMLError as e:
            raise SettingsError(f"Invalid YAML syntax in {file_path}: {e}") from e
        except (OSError, IOError) as e:
            raise SettingsError(f"Cannot read settings file {file_path}: {e}") from e

    def _extract_settings(self, data: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
        """
        Pick the settings mapping out of the document and drop unknown keys.

        Returns:
            Tuple of (settings data, warnings)
        """
        warnings = []

        if self.SECTION_KEY in data:
            section = data[self.SECTION_KEY]
            if section is None:
                section = {}
            if not isinstance(section, dict):
                raise SettingsError(f"'{self.SECTION_KEY}' must be a mapping, got {type(section).__name__}")
            data = section

        known = set(ParserSettings.field_names())
        settings_data = {}
        for key, value in data.items():
            if key in known:
                settings_data[key] = value
            else:
                warnings.append(f"Unknown setting ignored: {key}")

        return settings_data, warnings

    def _validate_settings_data(self, settings_data: Dict[str, Any]) -> ParserSettings:
        try:
            return ParserSettings.from_dict(settings_data)
        except ValidationError as e:
            raise SettingsError(f"Settings validation failed: {e}") from e

    def validate_settings_file(self, config_path: Union[str, Path]) -> List[str]:
        """
        Validate a settings file without keeping the result.

        Args:
            config_path: Path to settings file

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        try:
            config_path = Path(config_path)

            if not config_path.exists():
                errors.append(f"Settings file not found: {config_path}")
                return errors

            data = self._load_yaml_file(config_path)
            settings_data, _ = self._extract_settings(data)
            self._validate_settings_data(settings_data)

        except SettingsError as e:
            errors.append(str(e))

        return errors

    def get_settings_template(self) -> str:
        """
        Get a template settings file with every option and a comment for each.

        Returns:
            YAML template as string
        """
        defaults = ParserSettings()
        comments = {
            'encoding': "Text encoding used to read INI files",
            'strict_mode': "Raise on duplicate sections or members instead of warning",
            'max_workers': "Worker threads used when parsing many files at once",
        }

        lines = [
            "# typed-ini parser settings",
            "",
            f"{self.SECTION_KEY}:",
        ]
        for name, value in defaults.to_dict().items():
            lines.append(f"  # {comments[name]}")
            body = yaml.safe_dump({name: value}, default_flow_style=False, sort_keys=False)
            lines.append(f"  {body.rstrip()}")
        lines.append("")

        return "\n".join(lines)


def load_settings(config_path: Optional[Union[str, Path]] = None, strict_mode: bool = False) -> SettingsLoadResult:
    """
    Convenience function to load settings.

    Args:
        config_path: Path to settings file (optional)
        strict_mode: Whether to treat warnings as errors

    Returns:
        SettingsLoadResult containing parsed settings

    Raises:
        SettingsError: If settings are invalid
    """
    loader = SettingsLoader(strict_mode=strict_mode)
    return loader.load_settings(config_path)


def validate_settings_file(config_path: Union[str, Path]) -> List[str]:
    """Convenience function to validate a settings file."""
    loader = SettingsLoader()
    return loader.validate_settings_file(config_path)


def create_settings_template(output_path: Union[str, Path]) -> None:
    """
    Create a template settings file.

    Args:
        output_path: Where to save the template

    Raises:
        SettingsError: If the template cannot be written
    """
    loader = SettingsLoader()
    template_content = loader.get_settings_template()

    try:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(template_content)

    except (OSError, IOError) as e:
        raise SettingsError(f"Cannot create template file {output_path}: {e}") from e
