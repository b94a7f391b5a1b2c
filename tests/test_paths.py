"""Tests for the path management module."""

from pathlib import Path

import pytest

from regexbuilder.paths import (
    CONFIG_FILE_NAMES,
    DEFAULT_HOME_SUBDIR,
    HOME_ENV_VAR,
    ensure_dir_exists,
    find_config_file,
    get_config_file_path,
    get_data_dir,
    get_log_dir,
    get_storage_file_path,
)


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the data directory override at a temporary directory."""
    monkeypatch.setenv(HOME_ENV_VAR, str(tmp_path))
    return tmp_path


def test_get_data_dir_honours_override(data_dir: Path) -> None:
    """Verify the environment override wins over the home directory."""
    assert get_data_dir() == data_dir


def test_get_data_dir_defaults_to_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Verify the data directory defaults to a subdirectory of the user's home."""
    monkeypatch.delenv(HOME_ENV_VAR, raising=False)
    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    assert get_data_dir() == tmp_path / DEFAULT_HOME_SUBDIR


def test_find_config_file_missing(data_dir: Path) -> None:
    """Verify None is returned when no config file exists."""
    assert find_config_file() is None
    assert get_config_file_path() == data_dir / "configs" / CONFIG_FILE_NAMES[0]


@pytest.mark.parametrize("file_name", CONFIG_FILE_NAMES)
def test_find_config_file_accepts_both_extensions(data_dir: Path, file_name: str) -> None:
    """Verify main.yaml and main.yml are both discovered."""
    config_file = data_dir / "configs" / file_name
    ensure_dir_exists(config_file.parent)
    config_file.touch()
    assert find_config_file() == config_file
    assert get_config_file_path() == config_file


def test_yaml_takes_precedence_over_yml(tmp_path: Path) -> None:
    """Verify main.yaml wins when both files exist, with an explicit data directory."""
    config_dir = tmp_path / "configs"
    ensure_dir_exists(config_dir)
    (config_dir / "main.yml").touch()
    (config_dir / "main.yaml").touch()
    assert find_config_file(tmp_path) == config_dir / "main.yaml"


def test_log_and_storage_paths(data_dir: Path) -> None:
    """Verify the log directory and storage file live in the data directory."""
    assert get_log_dir() == data_dir / "logs"
    assert get_storage_file_path() == data_dir / "storage.json"
    assert get_storage_file_path(Path("/elsewhere")) == Path("/elsewhere/storage.json")


def test_ensure_dir_exists_is_idempotent(tmp_path: Path) -> None:
    """Verify nested directories are created and existing ones are accepted."""
    target = tmp_path / "a" / "b" / "c"
    ensure_dir_exists(target)
    ensure_dir_exists(target)
    assert target.is_dir()
