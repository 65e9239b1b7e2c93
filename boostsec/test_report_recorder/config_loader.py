"""Load recorder configuration from YAML files and command line overrides."""

from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import ValidationError

from boostsec.test_report_recorder.errors import ConfigurationError
from boostsec.test_report_recorder.models.recorder_config import RecorderConfig


def read_config_file(path: Path) -> dict[str, object]:
    """Read raw recorder options from a YAML file.

    Args:
        path: Path to the YAML configuration file

    Returns:
        Mapping of option names to values

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigurationError: If the YAML is invalid, empty or not a mapping

    """
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        raise ConfigurationError(f"Empty configuration file: {path}")
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration in {path} must be a mapping")
    return data


def build_recorder_config(
    path: Path | None = None, overrides: Mapping[str, object] | None = None
) -> RecorderConfig:
    """Build the recorder configuration.

    Options given in ``overrides`` take precedence over the file; ``None``
    values are treated as not given.

    Args:
        path: Optional YAML configuration file
        overrides: Options from the command line

    Returns:
        Validated configuration

    Raises:
        FileNotFoundError: If the configuration file doesn't exist
        ConfigurationError: If the resulting configuration is invalid

    """
    options: dict[str, object] = read_config_file(path) if path is not None else {}
    if overrides:
        options.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return RecorderConfig.model_validate(options)
    except ValidationError as e:
        source = f" in {path}" if path is not None else ""
        raise ConfigurationError(f"Invalid recorder configuration{source}: {e}") from e


def load_recorder_config(path: Path) -> RecorderConfig:
    """Load the recorder configuration from a YAML file."""
    return build_recorder_config(path)
