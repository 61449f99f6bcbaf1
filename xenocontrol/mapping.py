"""Button-to-shortcut mappings kept in memory and stored as TOML."""

from __future__ import annotations

import copy
import logging
import os
import threading
import tomllib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Iterable, Mapping as MappingABC

from xenocontrol.config_files import get_config_path, read_toml_file, write_toml_file

log = logging.getLogger(__name__)

MAPPINGS_FILE = "mappings.toml"
_U64_MAX = 2**64 - 1


class MappingType(Enum):
    KEYBOARD = "keyboard"
    CONTROLLER = "controller"


@dataclass
class Mapping:
    """A controller button combination bound to a shortcut."""

    id: int
    composed_button: str
    composed_shortcut_key: str
    mapping_type: MappingType

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "composed_button": self.composed_button,
            "composed_shortcut_key": self.composed_shortcut_key,
            "mapping_type": self.mapping_type.value,
        }


def mapping_from_dict(data: MappingABC[str, Any]) -> Mapping:
    """Build a ``Mapping`` from a mapping.

    Raises ``KeyError`` for a missing field, ``TypeError`` for a field of the
    wrong kind and ``ValueError`` for an unknown type or out-of-range id.
    """
    ident = data["id"]
    if isinstance(ident, bool) or not isinstance(ident, int):
        raise TypeError("id must be an integer")
    if not 0 <= ident <= _U64_MAX:
        raise ValueError(f"id out of range: {ident}")

    def text(key: str) -> str:
        value = data[key]
        if not isinstance(value, str):
            raise TypeError(f"{key} must be a string")
        return value

    return Mapping(
        id=ident,
        composed_button=text("composed_button"),
        composed_shortcut_key=text("composed_shortcut_key"),
        mapping_type=MappingType(text("mapping_type")),
    )


class MappingStore:
    """In-memory mapping cache backed by a TOML file."""

    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        self.path = Path(path) if path is not None else get_config_path(MAPPINGS_FILE)
        self._lock = threading.Lock()
        self._mappings: list[Mapping] = []

    def load(self) -> list[Mapping]:
        """Reload the cache from the file, creating an empty file if missing.

        If the file cannot be read or parsed the cache is left as it was.
        """
        if not self.path.exists():
            log.warning("映射配置文件不存在，将创建空文件")
            self.save()
            return self._snapshot()

        try:
            raw = read_toml_file(self.path)
            entries = raw["mappings"]
            if not isinstance(entries, list):
                raise TypeError("mappings must be an array")
            loaded = [mapping_from_dict(entry) for entry in entries]
        except (OSError, tomllib.TOMLDecodeError, KeyError, TypeError, ValueError) as exc:
            log.error("加载映射配置失败: %s", exc)
            return self._snapshot()

        with self._lock:
            self._mappings = loaded
        log.info("成功加载 %d 条映射配置", len(loaded))
        return self._snapshot()

    def save(self) -> None:
        """Write the cache to the file; failures are logged."""
        mappings = self._snapshot()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            write_toml_file(self.path, {"mappings": [m.to_dict() for m in mappings]})
        except OSError as exc:
            log.error("保存映射配置失败: %s", exc)
            return
        log.info("映射配置已保存到: %s", self.path)

    def set_mappings(self, mappings: Iterable[Mapping]) -> None:
        """Replace all mappings and store them."""
        new = [copy.copy(m) for m in mappings]
        log.debug("更新映射配置: %r", new)
        with self._lock:
            self._mappings = new
        self.save()

    def get_mappings(self) -> list[Mapping]:
        """Reload from the file and return the current mappings."""
        return self.load()

    def _snapshot(self) -> list[Mapping]:
        with self._lock:
            return [copy.copy(m) for m in self._mappings]