"""Controller sample data: sticks, triggers, limits and a button bitfield."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import IntEnum
from typing import Any


@dataclass
class ControllerStick:
    x: float = 0.0
    y: float = 0.0
    is_pressed: bool = False


@dataclass
class ControllerTrigger:
    value: float = 0.0
    has_pressure: bool = False
    is_pressed: bool = False


@dataclass
class ControllerLimits:
    sticks_value_min: float = -1.0
    sticks_value_max: float = 1.0
    triggers_value_min: float = 0.0
    triggers_value_max: float = 255.0

    def set_limits(
        self,
        sticks_value_min: float,
        sticks_value_max: float,
        triggers_value_min: float,
        triggers_value_max: float,
    ) -> None:
        self.sticks_value_min = sticks_value_min
        self.sticks_value_max = sticks_value_max
        self.triggers_value_min = triggers_value_min
        self.triggers_value_max = triggers_value_max


def default_limits() -> ControllerLimits:
    """Return limits matching raw XInput stick and trigger ranges."""
    return ControllerLimits(
        sticks_value_min=-32768.0,
        sticks_value_max=32767.0,
        triggers_value_min=0.0,
        triggers_value_max=255.0,
    )


class ControllerButtons(IntEnum):
    """Buttons and their bit positions in ``ControllerDatas.buttons``."""

    A = 0
    B = 1
    X = 2
    Y = 3
    LB = 4
    RB = 5
    Back = 6
    Start = 7
    Guide = 8
    Left = 9
    Right = 10
    Up = 11
    Down = 12


@dataclass
class ControllerDatas:
    """One snapshot of a controller's state."""

    buttons: int = 0
    left_stick: ControllerStick = field(default_factory=ControllerStick)
    right_stick: ControllerStick = field(default_factory=ControllerStick)
    left_trigger: ControllerTrigger = field(default_factory=ControllerTrigger)
    right_trigger: ControllerTrigger = field(default_factory=ControllerTrigger)
    left_stick_center: tuple[float, float] = (0.0, 0.0)
    right_stick_center: tuple[float, float] = (0.0, 0.0)
    limits: ControllerLimits = field(default_factory=ControllerLimits)

    def set_button(self, button: ControllerButtons, is_pressed: bool) -> None:
        mask = 1 << int(button)
        if is_pressed:
            self.buttons |= mask
        else:
            self.buttons &= ~mask

    def get_button(self, button: ControllerButtons) -> bool:
        return bool(self.buttons & (1 << int(button)))

    def button_is_pressed(self, button: ControllerButtons) -> bool:
        return self.get_button(button)

    def to_dict(self) -> dict[str, Any]:
        """Return a plain, JSON-ready representation."""
        data = asdict(self)
        data["left_stick_center"] = list(self.left_stick_center)
        data["right_stick_center"] = list(self.right_stick_center)
        return data