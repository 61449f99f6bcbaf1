"""Application settings stored as TOML in the configuration directory."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import asdict, dataclass
from typing import Any, Mapping

from xenocontrol.config_files import (
    ensure_config_dir,
    get_config_path,
    read_toml_file,
    write_toml_file,
)

log = logging.getLogger(__name__)

SETTINGS_FILE = "settings.toml"
DEFAULT_POLLING_FREQUENCY = 125
DEFAULT_DEADZONE = 10
DEFAULT_THEME = "light"

MIN_POLLING_FREQUENCY = 1
MAX_POLLING_FREQUENCY = 8000
MAX_DEADZONE = 30

_U32_MAX = 2**32 - 1
_U8_MAX = 255


class SettingsError(ValueError):
    """Settings that are invalid or could not be stored."""


@dataclass
class AppSettings:
    auto_start: bool = True
    minimize_to_tray: bool = True
    theme: str = DEFAULT_THEME
    polling_frequency: int = DEFAULT_POLLING_FREQUENCY
    deadzone: int = DEFAULT_DEADZONE
    deadzone_left: int = DEFAULT_DEADZONE

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def settings_from_dict(data: Mapping[str, Any]) -> AppSettings:
    """Build settings from a mapping, filling in defaults for missing keys.

    Raises ``SettingsError`` for a value of the wrong kind or out of range.
    """
    defaults = AppSettings()

    def flag(key: str) -> bool:
        value = data.get(key, getattr(defaults, key))
        if not isinstance(value, bool):
            raise SettingsError(f"{key} must be a boolean")
        return value

    def integer(key: str, maximum: int) -> int:
        value = data.get(key, getattr(defaults, key))
        if isinstance(value, bool) or not isinstance(value, int):
            raise SettingsError(f"{key} must be an integer")
        if not 0 <= value <= maximum:
            raise SettingsError(f"{key} out of range: {value}")
        return value

    theme = data.get("theme", defaults.theme)
    if not isinstance(theme, str):
        raise SettingsError("theme must be a string")

    return AppSettings(
        auto_start=flag("auto_start"),
        minimize_to_tray=flag("minimize_to_tray"),
        theme=theme,
        polling_frequency=integer("polling_frequency", _U32_MAX),
        deadzone=integer("deadzone", _U8_MAX),
        deadzone_left=integer("deadzone_left", _U8_MAX),
    )


def validate_settings(settings: AppSettings) -> AppSettings:
    """Check the polling frequency and right-stick deadzone; return the settings."""
    if not MIN_POLLING_FREQUENCY <= settings.polling_frequency <= MAX_POLLING_FREQUENCY:
        raise SettingsError("轮询频率必须在1-8000Hz范围内")
    if settings.deadzone > MAX_DEADZONE:
        raise SettingsError("死区范围不能超过30%")
    return settings


def save_settings(settings: AppSettings) -> None:
    """Write settings to the settings file; raises ``SettingsError`` on failure."""
    path = get_config_path(SETTINGS_FILE)
    try:
        ensure_config_dir()
        write_toml_file(path, settings.to_dict())
    except OSError as exc:
        log.error("保存设置失败: %s", exc)
        raise SettingsError(f"保存设置失败: {exc}") from exc
    log.info("设置已保存到: %s", path)


def load_settings() -> AppSettings:
    """Load settings, creating the file with defaults if it does not exist.

    A file that cannot be read or parsed yields the defaults.
    """
    path = get_config_path(SETTINGS_FILE)
    ensure_config_dir()

    if not path.exists():
        defaults = AppSettings()
        save_settings(defaults)
        return defaults

    try:
        return settings_from_dict(read_toml_file(path))
    except (OSError, tomllib.TOMLDecodeError, SettingsError) as exc:
        log.error("加载设置失败: %s, 使用默认设置", exc)
        return AppSettings()


def update_settings(new_settings: AppSettings) -> None:
    """Validate and store new settings."""
    log.debug("接收到更新设置请求: %r", new_settings)
    try:
        validate_settings(new_settings)
    except SettingsError as exc:
        log.error("%s", exc)
        raise
    save_settings(new_settings)
    log.info("设置已成功更新")


def get_current_settings() -> AppSettings:
    """Return the settings currently stored."""
    settings = load_settings()
    log.debug("当前设置: %r", settings)
    return settings