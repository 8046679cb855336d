"""
Configuration Settings
======================

Configuration for the converter: indentation width and which test types
are downgraded to warnings or ignored.
"""

from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import Any, Dict, List, Union
import json
import logging
import os

import yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "WIXCONVERT_"


def _split_names(value: Union[str, List[str], None]) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [name.strip() for name in value.split(",") if name.strip()]
    return [str(name) for name in value]


@dataclass
class ConverterConfig:
    """
    Converter configuration.

    Test type names are resolved by the converter, case-insensitively; an
    unknown name is reported as a violation rather than rejected here.

    Example:
        config = ConverterConfig(indentation_amount=2)
        config.ignore_errors.append("WhitespacePrecedingNodeWrong")
        save_config(config, Path("wixconvert.yaml"))
    """

    indentation_amount: int = 4
    errors_as_warnings: List[str] = field(default_factory=list)
    ignore_errors: List[str] = field(default_factory=list)
    save_converted: bool = False
    log_level: str = "INFO"

    def __post_init__(self):
        if self.indentation_amount < 0:
            raise ValueError(f"indentation_amount must not be negative: {self.indentation_amount}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConverterConfig":
        """Create from dictionary. Unknown keys are logged and skipped."""
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}

        for key, value in (data or {}).items():
            if key not in known:
                logger.warning(f"Ignoring unknown configuration key: {key}")
                continue
            values[key] = value

        if "indentation_amount" in values:
            values["indentation_amount"] = int(values["indentation_amount"])
        for key in ("errors_as_warnings", "ignore_errors"):
            if key in values:
                values[key] = _split_names(values[key])

        return cls(**values)

    @classmethod
    def from_env(cls) -> "ConverterConfig":
        """
        Create configuration from environment variables.

        Environment variable naming:
        - WIXCONVERT_INDENTATION
        - WIXCONVERT_WARNINGS (comma-separated test type names)
        - WIXCONVERT_IGNORE (comma-separated test type names)
        - WIXCONVERT_SAVE
        - WIXCONVERT_LOG_LEVEL
        """
        config = cls()

        if env_indent := os.environ.get(f"{ENV_PREFIX}INDENTATION"):
            config = cls(indentation_amount=int(env_indent))
        if env_warnings := os.environ.get(f"{ENV_PREFIX}WARNINGS"):
            config.errors_as_warnings = _split_names(env_warnings)
        if env_ignore := os.environ.get(f"{ENV_PREFIX}IGNORE"):
            config.ignore_errors = _split_names(env_ignore)
        if env_save := os.environ.get(f"{ENV_PREFIX}SAVE"):
            config.save_converted = env_save.lower() in ("true", "1", "yes")
        if env_level := os.environ.get(f"{ENV_PREFIX}LOG_LEVEL"):
            config.log_level = env_level.upper()

        return config


def load_config(config_path: Path) -> ConverterConfig:
    """
    Load configuration from file.

    Supports JSON and YAML formats based on file extension.

    Args:
        config_path: Path to config file

    Returns:
        ConverterConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If file format is not supported
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    suffix = config_path.suffix.lower()

    with open(config_path, 'r', encoding='utf-8') as f:
        if suffix in ['.yaml', '.yml']:
            data = yaml.safe_load(f)
        elif suffix == '.json':
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported config format: {suffix}")

    logger.info(f"Loaded configuration from {config_path}")
    return ConverterConfig.from_dict(data or {})


def save_config(config: ConverterConfig, config_path: Path) -> None:
    """
    Save configuration to file.

    Supports JSON and YAML formats based on file extension.

    Args:
        config: ConverterConfig to save
        config_path: Path to save config file

    Raises:
        ValueError: If file format is not supported
    """
    config_path = Path(config_path)
    suffix = config_path.suffix.lower()
    data = config.to_dict()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w', encoding='utf-8') as f:
        if suffix in ['.yaml', '.yml']:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
        elif suffix == '.json':
            json.dump(data, f, indent=2)
        else:
            raise ValueError(f"Unsupported config format: {suffix}")

    logger.info(f"Saved configuration to {config_path}")


def get_default_config() -> ConverterConfig:
    """Get default configuration."""
    return ConverterConfig()
