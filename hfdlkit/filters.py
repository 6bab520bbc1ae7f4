"""FIR filter design and decimation helpers."""

from __future__ import annotations

import math
from enum import IntEnum


class Window(IntEnum):
    """Window functions for windowed-sinc FIR design."""

    BOXCAR = 0
    BLACKMAN = 1
    HAMMING = 2
    DEFAULT = 2


# Cosine-sum coefficients a0, a1, a2, ... of each window:
# w(r) = a0 - a1*cos(2*pi*r) + a2*cos(4*pi*r) - ...
_COSINE_SUM_COEFFS: dict[Window, tuple[float, ...]] = {
    Window.BOXCAR: (1.0,),
    Window.BLACKMAN: (0.42, 0.5, 0.08),
    Window.HAMMING: (0.54, 0.46),
}


def _window_value(coeffs: tuple[float, ...], rate: float) -> float:
    """Evaluate a cosine-sum window at ``rate`` in [-1, 1], 0 being the centre."""
    rate = 0.5 + rate / 2
    value = coeffs[0]
    for k, a in enumerate(coeffs[1:], start=1):
        sign = -1.0 if k % 2 else 1.0
        value += sign * a * math.cos(2 * math.pi * k * rate)
    return value


def next_pow2(x: int) -> int:
    """Return the smallest power of two strictly greater than ``x``, or -1."""
    for i in range(31):
        pow2 = 1 << i
        if x < pow2:
            return pow2
    return -1


def firdes_filter_len(transition_bw: float) -> int:
    """Return an odd number of taps suitable for the relative transition bandwidth."""
    result = int(4.0 / transition_bw)
    if result % 2 == 0:
        result += 1
    return result


def firdes_lowpass(length: int, cutoff_rate: float, window: Window = Window.DEFAULT) -> list[float]:
    """Design a symmetric, normalized windowed-sinc lowpass filter.

    ``length`` must be odd; ``cutoff_rate`` is cutoff frequency divided by
    sampling frequency.
    """
    if length < 1 or length % 2 == 0:
        raise ValueError(f"filter length must be a positive odd number, got {length}")
    coeffs = _COSINE_SUM_COEFFS[Window(window)]
    middle = length // 2
    taps = [0.0] * length
    taps[middle] = 2 * math.pi * cutoff_rate * _window_value(coeffs, 0.0)
    for i in range(1, middle + 1):
        value = (math.sin(2 * math.pi * cutoff_rate * i) / i) * _window_value(coeffs, i / middle)
        taps[middle - i] = taps[middle + i] = value
    total = sum(taps)
    return [t / total for t in taps]


def firdes_bandpass(
    length: int, lowcut: float, highcut: float, window: Window = Window.DEFAULT
) -> list[complex]:
    """Design a complex bandpass filter by frequency-shifting a lowpass prototype."""
    realtaps = firdes_lowpass(length, (highcut - lowcut) / 2, window)
    center = (highcut + lowcut) / 2
    two_pi = 2 * math.pi
    phase = 0.0
    output = []
    for tap in realtaps:
        output.append(complex(math.cos(phase) * tap, math.sin(phase) * tap))
        phase += two_pi * center
        while phase > two_pi:
            phase -= two_pi
        while phase < 0:
            phase += two_pi
    return output


def compute_filter_relative_transition_bw(sample_rate: int, transition_bw_hz: int) -> float:
    """Return the transition bandwidth relative to the sampling rate."""
    if sample_rate == 0:
        raise ValueError("sample rate must not be zero")
    return transition_bw_hz / sample_rate


def compute_fft_decimation_rate(sample_rate: int, target_rate: int) -> int:
    """Return the largest power-of-two decimation keeping the rate at or above target."""
    if sample_rate <= 0:
        raise ValueError("sample rate must be positive")
    if target_rate <= 0:
        raise ValueError("target rate must be positive")
    decimation = math.floor(sample_rate / target_rate)
    pow2 = next_pow2(decimation)
    return pow2 // 2 if pow2 > 0 else 0