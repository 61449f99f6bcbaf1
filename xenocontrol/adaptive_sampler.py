"""Sampling-rate selection that adapts its safety margin to the signal frequency."""

from __future__ import annotations

import math


def _clamp(value: float, low: float, high: float) -> float:
    if low > high:
        raise ValueError(f"invalid clamp range: {low} > {high}")
    return min(max(value, low), high)


class AdaptiveSampler:
    """Chooses a sampling rate for a signal frequency within hardware limits."""

    def __init__(self, max_sampling_rate: float, min_sampling_rate: float) -> None:
        self.max_sampling_rate = float(max_sampling_rate)
        self.min_sampling_rate = float(min_sampling_rate)
        self.base_safety_factor = 10.0
        self.min_safety_factor = 4.0
        self.max_safety_factor = 50.0
        self.freq_threshold_low = 1.0
        self.freq_threshold_high = 100.0

    def compute_sampling_rate(self, signal_freq: float) -> float:
        """Return the sampling rate (Hz) to use for ``signal_freq`` (Hz)."""
        safety = self._dynamic_safety(signal_freq)
        target = signal_freq * safety
        # Never drop below the Nyquist rate.
        target = max(target, signal_freq * 2.0)
        return _clamp(target, self.min_sampling_rate, self.max_sampling_rate)

    def _dynamic_safety(self, signal_freq: float) -> float:
        if signal_freq < self.freq_threshold_low:
            # Lower frequencies get a larger factor, on a logarithmic scale.
            ratio = _clamp(
                math.log(self.freq_threshold_low / max(signal_freq, 0.01)), 1.0, 5.0
            )
            return self.base_safety_factor * _clamp(ratio, 1.5, 3.0)
        if signal_freq > self.freq_threshold_high:
            # Higher frequencies get a smaller factor, bounded from below.
            ratio = _clamp(math.sqrt(signal_freq / self.freq_threshold_high), 1.0, 3.0)
            return max(self.base_safety_factor / ratio, self.min_safety_factor)
        return self.base_safety_factor

    def set_base_safety_factor(self, factor: float) -> None:
        """Set the base safety factor, kept within the allowed range."""
        self.base_safety_factor = _clamp(
            factor, self.min_safety_factor, self.max_safety_factor
        )

    def set_frequency_thresholds(self, low: float, high: float) -> None:
        """Set the low/high frequency thresholds separating the three regions."""
        self.freq_threshold_low = max(low, 0.01)
        self.freq_threshold_high = max(high, low * 2.0)