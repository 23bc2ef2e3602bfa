"""Configuration management for CasePilot."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from casepilot.models.config import CasePilotConfig
from casepilot.utils.constants import ENV_PREFIX
from casepilot.utils.exceptions import ConfigurationError


class ConfigManager:
    """Loads CasePilot configuration from YAML, environment and CLI overrides."""

    def __init__(self, config_path: Optional[Path] = None, load_env: bool = True):
        """Initialize configuration manager.

        Args:
            config_path: Optional custom path to config file.
                        Defaults to ~/.casepilot/config.yaml
            load_env: Whether to load a .env file from the working directory
        """
        self.config_path = Path(config_path) if config_path else CasePilotConfig.get_config_path()
        self.config_dir = self.config_path.parent

        if load_env:
            self._load_env_file()

    def _load_env_file(self) -> None:
        env_file = Path.cwd() / ".env"
        if env_file.exists():
            load_dotenv(env_file, override=False)

    def create_default_config(self) -> CasePilotConfig:
        return CasePilotConfig()

    def config_exists(self) -> bool:
        return self.config_path.exists()

    def save_config(self, config: CasePilotConfig) -> None:
        """Save configuration to file.

        Raises:
            ConfigurationError: If unable to save configuration
        """
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                yaml.safe_dump(config.model_dump(mode="json"), f, default_flow_style=False, indent=2)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Failed to save configuration: {e}",
                details={"path": str(self.config_path)},
            ) from e

    def load_config(self) -> CasePilotConfig:
        """Load configuration from file.

        Raises:
            ConfigurationError: If unable to load or parse configuration
        """
        if not self.config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f) or {}
            if not isinstance(config_data, dict):
                raise ConfigurationError(
                    "Configuration file must contain a mapping",
                    details={"path": str(self.config_path)},
                )
            return CasePilotConfig(**config_data)

        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file: {e}") from e
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file: {e}") from e

    def load_config_with_overrides(
        self,
        env_overrides: Optional[Dict[str, Any]] = None,
        cli_overrides: Optional[Dict[str, Any]] = None
    ) -> CasePilotConfig:
        """Load configuration with environment and CLI overrides.

        Priority: CLI args > Environment variables > Config file > Defaults

        Raises:
            ConfigurationError: If the merged configuration is invalid
        """
        if self.config_exists():
            config = self.load_config()
        else:
            config = self.create_default_config()

        config_dict = config.model_dump()

        if env_overrides:
            self._apply_overrides(config_dict, env_overrides)
        if cli_overrides:
            self._apply_overrides(config_dict, cli_overrides)

        try:
            return CasePilotConfig(**config_dict)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid configuration override: {e}",
                suggestion=f"Check {ENV_PREFIX}* environment variables and command line options",
            ) from e

    def _apply_overrides(self, config_dict: Dict[str, Any], overrides: Dict[str, Any]) -> None:
        """Apply dotted-key overrides such as ``output.directory``."""
        for key, value in overrides.items():
            if value is None:
                continue
            keys = key.split('.')
            current = config_dict
            for k in keys[:-1]:
                current = current.setdefault(k, {})
            current[keys[-1]] = value

    def get_env_overrides(self) -> Dict[str, Any]:
        """Extract configuration overrides from environment variables.

        The first word after the prefix names the section, the rest the field:
            CASEPILOT_OUTPUT_DIRECTORY -> output.directory
            CASEPILOT_RECOMMENDATION_CACHE_TTL -> recommendation.cache_ttl

        Returns:
            Dictionary of dotted-key overrides
        """
        overrides: Dict[str, Any] = {}
        sections = set(CasePilotConfig.model_fields)

        for key, value in os.environ.items():
            if not key.startswith(ENV_PREFIX):
                continue

            name = key[len(ENV_PREFIX):].lower()
            section, _, field = name.partition('_')
            if section not in sections or not field:
                continue

            overrides[f"{section}.{field}"] = self._coerce(value)

        return overrides

    @staticmethod
    def _coerce(value: str) -> Any:
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'
        if value.isdigit():
            return int(value)
        if '.' in value and value.replace('.', '', 1).isdigit():
            return float(value)
        return value

    def validate_config(self, config: CasePilotConfig) -> None:
        """Validate configuration beyond field types.

        Raises:
            ConfigurationError: If configuration is unusable
        """
        output_path = Path(config.output.directory)
        if output_path.exists() and not output_path.is_dir():
            raise ConfigurationError(f"Output path is not a directory: {output_path}")
        if output_path.exists() and not os.access(output_path, os.W_OK):
            raise ConfigurationError(f"Output directory is not writable: {output_path}")

        if "{" in config.output.filename_template:
            try:
                config.output.filename_template.format(
                    method="get", path_slug="root", operation_id="operation"
                )
            except (KeyError, IndexError, ValueError) as e:
                raise ConfigurationError(
                    f"Invalid filename template: {config.output.filename_template}",
                    details={"error": str(e)},
                    suggestion="Use only {method}, {path_slug} and {operation_id} placeholders",
                ) from e

        if config.logging.level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigurationError(f"Unknown log level: {config.logging.level}")
