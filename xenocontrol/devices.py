"""Supported controller devices, device discovery and shared controller state."""

from __future__ import annotations

import copy
import logging
import threading
import tomllib
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping

from xenocontrol.adaptive_sampler import AdaptiveSampler
from xenocontrol.config_files import (
    ensure_config_dir,
    get_config_path,
    read_toml_file,
    write_toml_file,
)
from xenocontrol.datas import ControllerDatas

log = logging.getLogger(__name__)

SUPPORTED_DEVICES_FILE = "supported_devices.toml"
UNKNOWN_DEVICE_NAME = "未知设备"

MIN_FREQUENCY = 1
MAX_FREQUENCY = 8000
DEFAULT_FREQUENCY = 125
DEFAULT_SAMPLING_RATE = 1000.0
DEFAULT_TIME_INTERVAL = 1.0
SAMPLER_MAX_RATE = 200_000.0
SAMPLER_MIN_RATE = 10.0


class ControllerType(Enum):
    """Family a controller belongs to, decided by its vendor id."""

    XBOX = "Xbox"
    PLAYSTATION = "PlayStation"
    SWITCH = "Switch"
    BETOP = "Betop"
    OTHER = "Other"


_VENDOR_TYPES = {
    "045e": ControllerType.XBOX,  # Microsoft
    "054c": ControllerType.PLAYSTATION,  # Sony
    "057e": ControllerType.SWITCH,  # Nintendo
    "20bc": ControllerType.BETOP,  # BETOP
}


def detect_controller_type(vid: str) -> ControllerType:
    """Return the controller type for a hexadecimal vendor id."""
    return _VENDOR_TYPES.get(vid.lower(), ControllerType.OTHER)


@dataclass
class DeviceInfo:
    """A controller, either as configured or as found connected."""

    name: str = ""
    vendor_id: str = ""
    product_id: str | None = None
    device_path: str | None = None
    controller_type: ControllerType = ControllerType.OTHER

    def to_dict(self) -> dict[str, Any]:
        """Return a plain mapping; fields that are unset are left out."""
        data: dict[str, Any] = {"name": self.name, "vendor_id": self.vendor_id}
        if self.product_id is not None:
            data["product_id"] = self.product_id
        if self.device_path is not None:
            data["device_path"] = self.device_path
        data["controller_type"] = self.controller_type.value
        return data

    def matches(self, vid: str, pid: str) -> bool:
        """Whether a device with these ids is covered by this entry."""
        if self.vendor_id.lower() != vid.lower():
            return False
        return self.product_id is None or self.product_id.lower() == pid.lower()


def device_from_dict(data: Mapping[str, Any]) -> DeviceInfo:
    """Build a ``DeviceInfo`` from a mapping.

    Raises ``KeyError`` for a missing field and ``ValueError`` or
    ``TypeError`` for a field of the wrong kind.
    """
    def text(key: str) -> str:
        value = data[key]
        if not isinstance(value, str):
            raise TypeError(f"{key} must be a string, got {type(value).__name__}")
        return value

    def optional_text(key: str) -> str | None:
        return text(key) if data.get(key) is not None else None

    return DeviceInfo(
        name=text("name"),
        vendor_id=text("vendor_id"),
        product_id=optional_text("product_id"),
        device_path=optional_text("device_path"),
        controller_type=ControllerType(text("controller_type")),
    )


def default_devices() -> list[DeviceInfo]:
    """Return the built-in list of supported devices."""
    return [
        DeviceInfo("Any Xbox Controller", "045e", None, None, ControllerType.XBOX),
        DeviceInfo("DualShock 4 (PS4)", "054c", None, None, ControllerType.PLAYSTATION),
        DeviceInfo("DualSense (PS5)", "054c", None, None, ControllerType.PLAYSTATION),
        DeviceInfo("Switch Pro", "057e", None, None, ControllerType.SWITCH),
        DeviceInfo("[ BETOP CONTROLLER ]", "20bc", "1263", None, ControllerType.OTHER),
    ]


def load_or_create_config(path: str) -> list[DeviceInfo]:
    """Load the supported-device list from the config directory.

    A missing file is created with the defaults; a file that cannot be read
    or parsed makes the defaults be used. Loaded entries get their type
    re-detected from the vendor id.
    """
    config_path = get_config_path(path)
    ensure_config_dir()

    if config_path.exists():
        try:
            raw = read_toml_file(config_path)
            entries = raw["devices"]
            if not isinstance(entries, list):
                raise TypeError("devices must be an array")
            devices = [device_from_dict(entry) for entry in entries]
        except (OSError, tomllib.TOMLDecodeError, KeyError, ValueError, TypeError) as exc:
            log.error("读取/解析配置文件失败: %s", exc)
            return default_devices()
        for device in devices:
            device.controller_type = detect_controller_type(device.vendor_id)
        return devices

    log.info("配置文件不存在，正在生成默认配置: %s", config_path)
    defaults = default_devices()
    try:
        write_toml_file(config_path, {"devices": [d.to_dict() for d in defaults]})
    except OSError as exc:
        log.error("写入默认配置文件失败: %s", exc)
    return defaults


@dataclass(frozen=True)
class HidDevice:
    """A HID device as reported by enumeration."""

    vendor_id: int
    product_id: int
    product_string: str | None = None
    path: str = ""


def list_supported_connected_devices(
    config: Iterable[DeviceInfo], hid_devices: Iterable[HidDevice]
) -> list[DeviceInfo]:
    """Return the connected devices that match an entry of ``config``."""
    config = list(config)
    supported: list[DeviceInfo] = []
    for hid in hid_devices:
        vid = f"{hid.vendor_id:04x}"
        pid = f"{hid.product_id:04x}"
        if any(entry.matches(vid, pid) for entry in config):
            supported.append(
                DeviceInfo(
                    name=hid.product_string or UNKNOWN_DEVICE_NAME,
                    vendor_id=vid,
                    product_id=pid,
                    device_path=hid.path,
                    controller_type=detect_controller_type(vid),
                )
            )
    return supported


class ConnectionEvent(Enum):
    """Change in the selected device seen between two polls."""

    UNCHANGED = "unchanged"
    CONNECTED = "connected"
    SWITCHED = "switched"
    DISCONNECTED = "disconnected"


class ConnectionTracker:
    """Follows the selected device across polls and reports changes."""

    def __init__(self) -> None:
        self.last_device: DeviceInfo | None = None

    def update(self, current_device: DeviceInfo) -> ConnectionEvent:
        """Compare ``current_device`` with the last one and record it."""
        has_current = current_device.device_path is not None
        last = self.last_device

        if last is None and has_current:
            log.info("连接新设备: %s", current_device.name)
            self.last_device = copy.copy(current_device)
            return ConnectionEvent.CONNECTED
        if last is not None and has_current:
            if last.device_path != current_device.device_path:
                log.info("设备切换: %s → %s", last.name, current_device.name)
                self.last_device = copy.copy(current_device)
                return ConnectionEvent.SWITCHED
            return ConnectionEvent.UNCHANGED
        if last is not None:
            log.info("设备断开: %s", last.name)
            self.last_device = None
            return ConnectionEvent.DISCONNECTED
        return ConnectionEvent.UNCHANGED


class ControllerState:
    """Shared state: selected device, latest sample and polling timing."""

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self.current_device = DeviceInfo()
        self.controller_data = ControllerDatas()
        self.sampler = AdaptiveSampler(SAMPLER_MAX_RATE, SAMPLER_MIN_RATE)
        self.freq = DEFAULT_FREQUENCY
        self.sampling_rate = DEFAULT_SAMPLING_RATE
        self.time_interval = DEFAULT_TIME_INTERVAL

    def set_frequency(self, freq: int) -> None:
        """Set the polling frequency (clamped to 1–8000 Hz) and derived timing."""
        freq = min(max(int(freq), MIN_FREQUENCY), MAX_FREQUENCY)
        with self.lock:
            self.freq = freq
            self.sampling_rate = self.sampler.compute_sampling_rate(float(freq))
            self.time_interval = 1.0 / freq
            log.info(
                "轮询频率: %d Hz (%s秒), 采样率: %.2f Hz",
                self.freq,
                self.time_interval,
                self.sampling_rate,
            )

    def use_device(self, device_name: str, devices: Iterable[DeviceInfo]) -> bool:
        """Select the first device in ``devices`` called ``device_name``."""
        log.debug("尝试使用设备: %s", device_name)
        found = next((d for d in devices if d.name == device_name), None)
        if found is None:
            log.error("未找到名为 '%s' 的设备", device_name)
            return False
        with self.lock:
            self.current_device = copy.copy(found)
        log.info("使用设备: %s", found.name)
        return True

    def disconnect_device(self) -> bool:
        """Drop the selected device, falling back to the first default entry."""
        with self.lock:
            self.current_device = default_devices()[0]
        log.info("已断开当前设备")
        return True

    def get_controller_data(self) -> ControllerDatas:
        """Return an independent copy of the latest controller sample."""
        with self.lock:
            return copy.deepcopy(self.controller_data)