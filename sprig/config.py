"""Container settings.

Settings are merged from, lowest priority first:
1. Model defaults
2. A YAML file (explicit path, or ./sprig.yaml when present)
3. Environment variables with the SPRIG_ prefix
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigurationError

try:
    from yaml import CSafeLoader as YamlLoader
except ImportError:
    from yaml import SafeLoader as YamlLoader

ENV_PREFIX = "SPRIG_"
DEFAULT_CONFIG_FILE = "sprig.yaml"
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class ContainerSettings(BaseModel):
    """Settings for an application context."""

    log_level: str = "INFO"
    strict: bool = Field(
        default=False,
        description="Abort initialization when a bean definition cannot be built",
    )
    search_paths: List[Path] = Field(
        default_factory=list,
        description=(
            "Directories or zip archives prepended to sys.path before scanning; "
            "they stay on sys.path for the rest of the process"
        ),
    )

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("search_paths", mode="before")
    @classmethod
    def _split_search_paths(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [part for part in value.split(os.pathsep) if part]
        return value

    @field_validator("search_paths")
    @classmethod
    def _dedupe_search_paths(cls, value: List[Path]) -> List[Path]:
        return list(dict.fromkeys(value))


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a settings file.

    Raises:
        ConfigurationError: If the file is missing, invalid or not a mapping
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            content = yaml.load(f, Loader=YamlLoader) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}", cause=e) from e

    if not isinstance(content, dict):
        raise ConfigurationError(f"Configuration file must contain a dictionary: {path}")

    # A file may nest its settings under a top-level "sprig" key
    if isinstance(content.get("sprig"), dict):
        content = content["sprig"]
    return content


def env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Collect SPRIG_* variables, e.g. SPRIG_LOG_LEVEL=DEBUG -> log_level."""
    environ = os.environ if environ is None else environ
    overrides = {}
    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        name = key[len(ENV_PREFIX):].lower()
        if name in ContainerSettings.model_fields:
            overrides[name] = value
    return overrides


def load_settings(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> ContainerSettings:
    """Load and validate container settings.

    Args:
        path: Settings file; ./sprig.yaml is used when omitted and present
        environ: Environment to read overrides from (defaults to os.environ)

    Raises:
        ConfigurationError: If the file or the merged values are invalid
    """
    config: Dict[str, Any] = {}

    if path is not None:
        config.update(load_yaml(path))
    elif Path(DEFAULT_CONFIG_FILE).exists():
        config.update(load_yaml(DEFAULT_CONFIG_FILE))

    config.update(env_overrides(environ))

    try:
        return ContainerSettings(**config)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid container settings: {e}", cause=e) from e
