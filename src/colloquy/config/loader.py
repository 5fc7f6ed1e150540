"""Config loader for YAML configuration files."""

from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from colloquy.config.models import ColloquyConfig
from colloquy.core.errors import ConfigError

DEFAULT_CONFIG = "default.yaml"


class ConfigLoader:
    """Load ColloquyConfig from YAML files."""

    @staticmethod
    def load(path: Path | str) -> ColloquyConfig:
        """Load configuration from YAML file.

        Args:
            path: Path to config directory or colloquy.yaml file

        Returns:
            Parsed ColloquyConfig instance

        Raises:
            FileNotFoundError: If no config file exists at path
            ConfigError: If the YAML is malformed or fails validation
        """
        config_path = Path(path)

        data: dict[str, Any] = {"actions": {}, "settings": {}}

        if config_path.is_dir():
            yaml_file = config_path / "colloquy.yaml"

            # If explicit master file exists, use it
            if yaml_file.exists():
                data = ConfigLoader._read(yaml_file)
            else:
                # Merge all .yaml files in directory
                files = sorted(config_path.glob("*.yaml"))
                if not files:
                    raise FileNotFoundError(f"No config files found in {config_path}")

                for fpath in files:
                    chunk = ConfigLoader._read(fpath)

                    for section in ("actions", "settings"):
                        if section in chunk and isinstance(chunk[section], dict):
                            data[section].update(chunk[section])

                    # Overwrite other top-level keys (e.g. version, sandbox)
                    for k, v in chunk.items():
                        if k not in ("actions", "settings"):
                            data[k] = v
        else:
            if not config_path.exists():
                raise FileNotFoundError(f"Config file not found: {config_path}")
            data = ConfigLoader._read(config_path)

        return ConfigLoader.validate(data)

    @staticmethod
    def load_default() -> ColloquyConfig:
        """Load the configuration bundled with the package."""
        text = resources.files("colloquy.config").joinpath(DEFAULT_CONFIG).read_text("utf-8")
        return ConfigLoader.validate(yaml.safe_load(text) or {})

    @staticmethod
    def validate(data: dict[str, Any]) -> ColloquyConfig:
        try:
            return ColloquyConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    @staticmethod
    def _read(path: Path) -> dict[str, Any]:
        try:
            with open(path, encoding="utf-8") as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Malformed YAML in {path}: {e}") from e
        if not isinstance(loaded, dict):
            raise ConfigError(f"Top level of {path} must be a mapping")
        return loaded
