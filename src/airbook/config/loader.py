"""Config loader for YAML configuration files."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from airbook.config.settings import AirbookConfig
from airbook.core.errors import ConfigError

CONFIG_FILENAMES = ("airbook.yaml", "config.yaml")


class ConfigLoader:
    """Load AirbookConfig from YAML files."""

    @staticmethod
    def load(path: Path | str) -> AirbookConfig:
        """Load configuration from a YAML file or directory.

        A directory uses ``airbook.yaml`` or ``config.yaml`` when present,
        otherwise every ``*.yaml`` file in it is merged section by section.

        Args:
            path: Path to config directory or YAML file

        Returns:
            Parsed AirbookConfig instance

        Raises:
            ConfigError: If no file is found or the content is invalid
        """
        config_path = Path(path)
        data: dict[str, Any] = {}

        if config_path.is_dir():
            master = next(
                (config_path / name for name in CONFIG_FILENAMES if (config_path / name).exists()),
                None,
            )
            if master is not None:
                data = _read_yaml(master)
            else:
                files = sorted(config_path.glob("*.yaml"))
                if not files:
                    raise ConfigError("No config files found", path=str(config_path))
                for fpath in files:
                    for section, values in _read_yaml(fpath).items():
                        if isinstance(values, dict) and isinstance(data.get(section), dict):
                            data[section].update(values)
                        else:
                            data[section] = values
        else:
            if not config_path.exists():
                raise ConfigError("Config file not found", path=str(config_path))
            data = _read_yaml(config_path)

        try:
            return AirbookConfig.model_validate(data)
        except PydanticValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}", path=str(config_path)) from e


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed YAML: {e}", path=str(path)) from e
    if not isinstance(content, dict):
        raise ConfigError("Config root must be a mapping", path=str(path))
    return content
