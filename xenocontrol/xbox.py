"""Reading Xbox (XInput) controller state into shared controller data."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Callable

from xenocontrol.datas import ControllerButtons, ControllerDatas
from xenocontrol.devices import ControllerState
from xenocontrol.logic import normalize

log = logging.getLogger(__name__)

STICK_RAW_MIN = -32768
STICK_RAW_MAX = 32767
STICK_MIN = -1.0
STICK_MAX = 1.0
TRIGGER_THRESHOLD = 30


@dataclass(frozen=True)
class XInputState:
    """One reading of an XInput gamepad."""

    south_button: bool = False
    east_button: bool = False
    north_button: bool = False
    west_button: bool = False
    guide_button: bool = False
    start_button: bool = False
    select_button: bool = False
    left_thumb_button: bool = False
    right_thumb_button: bool = False
    left_stick_raw: tuple[int, int] = (0, 0)
    right_stick_raw: tuple[int, int] = (0, 0)
    left_trigger: int = 0
    right_trigger: int = 0

    @property
    def left_trigger_bool(self) -> bool:
        return self.left_trigger > TRIGGER_THRESHOLD

    @property
    def right_trigger_bool(self) -> bool:
        return self.right_trigger > TRIGGER_THRESHOLD


def _stick(raw: int) -> float:
    return normalize(raw, STICK_RAW_MIN, STICK_RAW_MAX, STICK_MIN, STICK_MAX)


def apply_xbox_state(data: ControllerDatas, state: XInputState) -> ControllerDatas:
    """Copy an XInput reading into ``data`` and return it."""
    buttons = (
        (ControllerButtons.A, state.south_button, "A"),
        (ControllerButtons.B, state.east_button, "B"),
        (ControllerButtons.Y, state.north_button, "Y"),
        (ControllerButtons.X, state.west_button, "X"),
        (ControllerButtons.Guide, state.guide_button, "Guide"),
        (ControllerButtons.Start, state.start_button, "Start"),
        (ControllerButtons.Back, state.select_button, "Select"),
    )
    for button, pressed, label in buttons:
        if pressed:
            log.debug("Xbox %s 键被按下", label)
        data.set_button(button, pressed)

    data.left_stick.is_pressed = state.left_thumb_button
    data.right_stick.is_pressed = state.right_thumb_button

    lx, ly = state.left_stick_raw
    rx, ry = state.right_stick_raw
    data.left_stick.x = _stick(lx)
    data.left_stick.y = _stick(ly)
    data.right_stick.x = _stick(rx)
    data.right_stick.y = _stick(ry)

    data.left_trigger.value = float(state.left_trigger)
    data.right_trigger.value = float(state.right_trigger)
    data.left_trigger.is_pressed = state.left_trigger_bool
    data.right_trigger.is_pressed = state.right_trigger_bool
    data.left_trigger.has_pressure = True
    return data


def poll_xbox_controller(
    state: ControllerState, read_state: Callable[[], XInputState | None]
) -> ControllerDatas | None:
    """Poll the pad once and update ``state``.

    ``read_state`` returns the current reading, or ``None`` / raises
    ``OSError`` when the pad is gone. On success a copy of the updated data
    is returned; when the pad is gone the device is disconnected and
    ``None`` is returned.
    """
    try:
        reading = read_state()
    except OSError as exc:
        log.debug("读取 XInput 状态失败: %s", exc)
        reading = None

    if reading is None:
        state.disconnect_device()
        log.info("physical_connect_status: false")
        return None

    with state.lock:
        apply_xbox_state(state.controller_data, reading)
        return copy.deepcopy(state.controller_data)