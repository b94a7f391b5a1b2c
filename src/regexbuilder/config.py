"""Handles the parsing and validation of the RegexBuilder configuration file."""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .debounce import DEFAULT_DEBOUNCE_MS
from .engine import MatchEngine
from .flags import FLAG_CODES, decode

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "regex-builder-user-patterns"

_VALID_FLAG_CHARS = frozenset(code for _, code in FLAG_CODES)


class BuilderConfig(BaseModel):
    """The root configuration for RegexBuilder."""

    model_config = ConfigDict(extra="forbid")

    debounce_ms: float = Field(default=DEFAULT_DEBOUNCE_MS, ge=0, description="Quiet period before a changed input is executed.")
    match_timeout: float | None = Field(default=None, gt=0, description="Time limit in seconds for a single match call.")
    default_flags: str = Field(default="g", description="Flag string applied to new sessions.")
    default_pattern: str = Field(default="", description="Pattern loaded into new sessions.")
    storage_key: str = Field(default=DEFAULT_STORAGE_KEY, min_length=1)
    storage_file: str | None = Field(default=None, description="JSON file holding user patterns. Defaults to the data directory.")
    builtin_patterns_file: str | None = Field(default=None, description="YAML file replacing the shipped built-in patterns.")

    @field_validator("default_flags")
    @classmethod
    def _check_flags(cls, value: str) -> str:
        unknown = sorted(set(value) - _VALID_FLAG_CHARS)
        if unknown:
            msg = f"Unknown flag character(s) {', '.join(unknown)} in default_flags '{value}'."
            raise ValueError(msg)
        return value

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BuilderConfig":
        """
        Create a BuilderConfig from a dictionary.

        The default pattern is compiled with the default flags so a broken
        configuration is reported at load time rather than in the first session.
        """
        try:
            config = cls(**data)
        except ValidationError as e:
            msg = f"Invalid or missing configuration: {e}"
            raise ValueError(msg) from e

        error = MatchEngine().validate(config.default_pattern, decode(config.default_flags))
        if error is not None:
            msg = f"Invalid regex pattern in default_pattern '{config.default_pattern}': {error}"
            raise ValueError(msg)
        return config


class StrictSingleQuoteLoader(yaml.SafeLoader):
    """
    A custom YAML loader that enforces the use of single quotes for all strings.

    Double-quoted YAML strings process backslash escapes, which silently mangles
    regex patterns, so they are rejected outright.
    """


def _construct_scalar(loader: StrictSingleQuoteLoader, node: yaml.ScalarNode) -> Any:  # noqa: ANN401
    """Construct a scalar node, but first check its style."""
    if node.style == '"':
        line = node.start_mark.line + 1
        col = node.start_mark.column + 1
        msg = f"Double-quoted string found at line {line}, column {col}. Please use single quotes (') instead."
        raise yaml.YAMLError(msg)
    return loader.construct_scalar(node)


StrictSingleQuoteLoader.add_constructor("tag:yaml.org,2002:str", _construct_scalar)


def load_yaml(path: Path) -> Any:  # noqa: ANN401
    """Read a YAML file with the strict single-quote loader."""
    with path.open(encoding="utf-8") as f:
        return yaml.load(f, Loader=StrictSingleQuoteLoader)  # noqa: S506


def load_config(config_path: str) -> BuilderConfig:
    """
    Load, parse, and validate the YAML configuration file.

    Args:
        config_path: The path to the main.yaml file.

    Returns:
        A BuilderConfig object representing the validated configuration.

    Raises:
        FileNotFoundError: If the config file does not exist.
        yaml.YAMLError: If there is a syntax error in the YAML file.
        ValueError: If the configuration is invalid.

    """
    path = Path(config_path)
    if not path.is_file():
        msg = f"Configuration file not found at: {config_path}"
        raise FileNotFoundError(msg)

    try:
        data = load_yaml(path)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            msg = "Config file must be a YAML mapping (dictionary)."
            raise TypeError(msg)  # noqa: TRY301
        config = BuilderConfig.from_dict(data)
    except yaml.YAMLError as e:
        msg = f"Error parsing YAML config file: {e}"
        raise yaml.YAMLError(msg) from e
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        msg = f"Invalid or missing configuration: {e}"
        raise ValueError(msg) from e
    else:
        logger.debug("Loaded configuration from %s", path)
        return config
