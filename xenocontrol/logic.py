"""Value normalisation and stick-drift sampling of controller data."""

from __future__ import annotations

import asyncio
import logging
import math
import sys
from typing import Iterable

from xenocontrol.datas import (
    ControllerDatas,
    ControllerStick,
    ControllerTrigger,
    default_limits,
)
from xenocontrol.devices import ControllerState

log = logging.getLogger(__name__)

SAMPLING_TIME_INTERVAL_FACTOR = 1000.0
TEMP_INTERVAL = 1.0 / SAMPLING_TIME_INTERVAL_FACTOR
SAMPLING_TIME = 3.0
WARMUP_TIME = 1.1


def normalize(
    value: float,
    source_min: float,
    source_max: float,
    target_min: float,
    target_max: float,
) -> float:
    """Map ``value`` linearly from the source range onto the target range.

    Raises ``ValueError`` if the source range has zero width.
    """
    low = float(source_min)
    span = float(source_max) - low
    if abs(span) < sys.float_info.epsilon:
        raise ValueError(f"empty source range: [{source_min}, {source_max}]")
    fraction = (float(value) - low) / span
    return fraction * (float(target_max) - float(target_min)) + float(target_min)


def _round_half_away(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


def average_controller_datas(data_slice: Iterable[ControllerDatas]) -> ControllerDatas:
    """Average stick and trigger values over samples, rounded; buttons are ignored."""
    samples = list(data_slice)
    if not samples:
        return ControllerDatas()

    count = len(samples)

    def mean(values: Iterable[float]) -> float:
        return _round_half_away(sum(values) / count)

    left_center = (
        mean(d.left_stick.x for d in samples),
        mean(d.left_stick.y for d in samples),
    )
    right_center = (
        mean(d.right_stick.x for d in samples),
        mean(d.right_stick.y for d in samples),
    )

    return ControllerDatas(
        buttons=0,
        left_stick=ControllerStick(x=left_center[0], y=left_center[1]),
        right_stick=ControllerStick(x=right_center[0], y=right_center[1]),
        left_trigger=ControllerTrigger(value=mean(d.left_trigger.value for d in samples)),
        right_trigger=ControllerTrigger(value=mean(d.right_trigger.value for d in samples)),
        left_stick_center=left_center,
        right_stick_center=right_center,
        limits=default_limits(),
    )


async def controller_stick_drift_sampling(
    state: ControllerState,
    sampling_time: float = SAMPLING_TIME,
    warmup: float = WARMUP_TIME,
) -> ControllerDatas:
    """Sample the controller at a fast rate for a while and return the average.

    The polling interval of ``state`` is shortened while sampling and put
    back afterwards.
    """
    with state.lock:
        sampling_rate = state.sampler.compute_sampling_rate(TEMP_INTERVAL)
        original_interval = state.time_interval
        state.time_interval = TEMP_INTERVAL

    sample_count = int(sampling_time / TEMP_INTERVAL)
    log.info("controller_stick_drift_sampling (rate %.2f Hz)", sampling_rate)

    collected: list[ControllerDatas] = []
    try:
        await asyncio.sleep(warmup)
        loop = asyncio.get_running_loop()
        deadline = loop.time()
        for _ in range(sample_count + 1):
            collected.append(state.get_controller_data())
            deadline += TEMP_INTERVAL
            await asyncio.sleep(max(0.0, deadline - loop.time()))
    finally:
        with state.lock:
            state.time_interval = original_interval

    average = average_controller_datas(collected)
    log.info("avg stick & trigger: %r , count: %d", average, len(collected))
    return average