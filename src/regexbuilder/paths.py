"""Manages the discovery and provision of fixed paths for the RegexBuilder application."""
# src/regexbuilder/paths.py

import os
from pathlib import Path
from typing import Final

CONFIG_FILE_NAMES: Final[list[str]] = ["main.yaml", "main.yml"]
HOME_ENV_VAR: Final[str] = "REGEXBUILDER_HOME"
DEFAULT_HOME_SUBDIR: Final[str] = ".regexbuilder"
STORAGE_FILE_NAME: Final[str] = "storage.json"


def get_data_dir() -> Path:
    """Return the RegexBuilder data directory, honouring the REGEXBUILDER_HOME override."""
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / DEFAULT_HOME_SUBDIR


def find_config_file(data_dir: Path | None = None) -> Path | None:
    """Return the first existing main.yaml or main.yml in the data directory, or None."""
    config_dir = (data_dir or get_data_dir()) / "configs"
    for config_file in CONFIG_FILE_NAMES:
        path = config_dir / config_file
        if path.is_file():
            return path
    return None


def get_config_file_path(data_dir: Path | None = None) -> Path:
    """Return the path of the config file, whether or not it exists yet."""
    return find_config_file(data_dir) or (data_dir or get_data_dir()) / "configs" / CONFIG_FILE_NAMES[0]


def get_log_dir(data_dir: Path | None = None) -> Path:
    """Return the path to the log directory."""
    return (data_dir or get_data_dir()) / "logs"


def get_storage_file_path(data_dir: Path | None = None) -> Path:
    """Return the path to the JSON file backing the user pattern library."""
    return (data_dir or get_data_dir()) / STORAGE_FILE_NAME


def ensure_dir_exists(path: Path) -> None:
    """Ensure a directory exists, creating it if necessary."""
    path.mkdir(parents=True, exist_ok=True)
