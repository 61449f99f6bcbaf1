"""Location of the configuration directory and TOML file helpers."""

from __future__ import annotations

import os
import sys
import tomllib
from pathlib import Path
from typing import Any, Mapping

import tomli_w

CONFIG_DIR_NAME = "xc_datas"
APP_ROOT_ENV = "XENOCONTROL_ROOT"


def get_app_root() -> Path:
    """Return the application root directory.

    The ``XENOCONTROL_ROOT`` environment variable overrides it; otherwise the
    directory holding the running program is used, falling back to ".".
    """
    override = os.environ.get(APP_ROOT_ENV)
    if override:
        return Path(override)
    program = sys.argv[0] if sys.argv else ""
    if program:
        try:
            return Path(program).resolve().parent
        except OSError:
            pass
    return Path(".")


def get_config_dir() -> Path:
    """Return the configuration directory under the application root."""
    return get_app_root() / CONFIG_DIR_NAME


def create_config_dir() -> Path:
    """Create the configuration directory, reporting if it already exists."""
    config_dir = get_config_dir()
    if config_dir.exists():
        print("Config dir already exists")
    else:
        config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def ensure_config_dir() -> Path:
    """Make sure the configuration directory exists and return it."""
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_path(file_name: str) -> Path:
    """Return the path of ``file_name`` inside the configuration directory."""
    return get_config_dir() / file_name


def read_toml_file(path: str | os.PathLike[str]) -> dict[str, Any]:
    """Read and parse a TOML file.

    Raises ``OSError`` if it cannot be read and ``tomllib.TOMLDecodeError``
    if it is not valid TOML.
    """
    text = Path(path).read_text(encoding="utf-8")
    return tomllib.loads(text)


def write_toml_file(path: str | os.PathLike[str], data: Mapping[str, Any]) -> None:
    """Serialise ``data`` as TOML and write it to ``path``."""
    text = tomli_w.dumps(data)
    Path(path).write_text(text, encoding="utf-8")