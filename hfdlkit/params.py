"""Validation of numeric command-line parameters and debug filter specs."""

from __future__ import annotations

import math
import re
import struct
from typing import Sequence

from .options import format_option

INT32_MAX = 2**31 - 1
INT32_MIN = -(2**31)

_INT_RE = re.compile(r"\s*[+-]?[0-9]+")
_FLOAT_RE = re.compile(r"\s*\S+")

DEBUG_CLASSES: dict[str, tuple[int, str]] = {
    "none": (0, "No debug output"),
    "all": (0xFFFFFFFF, "All debug classes"),
    "sdr": (1 << 0, "SDR device handling"),
    "dsp": (1 << 1, "DSP and demodulation"),
    "dsp_detail": (1 << 2, "DSP and demodulation - details with raw data dumps"),
    "frame": (1 << 3, "HFDL frame decoding"),
    "frame_detail": (1 << 4, "HFDL frame decoding - details with raw data dumps"),
    "proto": (1 << 5, "Higher-level protocols decoding"),
    "proto_detail": (1 << 6, "Higher-level protocols decoding - details with raw data dumps"),
    "stats": (1 << 7, "Statistics generation"),
    "cache": (1 << 8, "Operations on caches"),
    "output": (1 << 9, "Output operations"),
    "misc": (1 << 10, "Messages not falling into other categories"),
}

DEBUG_FILTER_USAGE = (
    "<filter_spec> is a comma-separated list of words specifying debug classes which should\n"
    "be printed.\n\nSupported debug classes:\n\n"
    + "".join(
        format_option(token, descr, 2) + "\n" for token, (_, descr) in DEBUG_CLASSES.items()
    )
    + "\nBy default, no debug messages are printed.\n"
)


class ParameterError(ValueError):
    """Raised when a command-line parameter value is invalid."""


def parse_double(text: str) -> float:
    """Parse a floating-point number, with single-precision resolution."""
    if not _FLOAT_RE.fullmatch(text) or "_" in text:
        raise ParameterError(f"Parameter error: '{text}': not a valid floating-point number")
    try:
        value = float(text)
    except ValueError:
        raise ParameterError(
            f"Parameter error: '{text}': not a valid floating-point number"
        ) from None
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        raise ParameterError(f"Parameter error: '{text}': value too large") from None


def parse_int32(text: str) -> int:
    """Parse a decimal integer that fits strictly inside the 32-bit signed range."""
    if not _INT_RE.fullmatch(text):
        raise ParameterError(f"Parameter error: '{text}': not a valid decimal integer number")
    value = int(text)
    if value >= INT32_MAX or value <= INT32_MIN:
        raise ParameterError(f"Parameter error: '{text}': value too large")
    return value


def parse_frequency(text: str) -> int:
    """Parse a frequency given in kHz and return it in Hz."""
    value = 1e3 * parse_double(text)
    if math.isnan(value) or math.isinf(value):
        raise ParameterError(f"'{text}': value too large")
    hz = int(value)
    if hz >= INT32_MAX or hz <= INT32_MIN:
        raise ParameterError(f"'{text}': value too large")
    return hz


def _khz(hz: int) -> str:
    return f"{hz / 1000:.3f}"


def check_frequency_span(freqs: Sequence[int], centerfreq: int, source_rate: int) -> None:
    """Ensure every channel lies within the receiver's bandwidth around the center."""
    half_bandwidth = source_rate // 2
    for freq in freqs:
        if abs(centerfreq - freq) >= half_bandwidth:
            raise ParameterError(
                f"Error: channel frequency {_khz(freq)} kHz is too far away from the "
                f"center frequency ({_khz(centerfreq)} kHz).\n"
                f"Maximum distance from the center frequency for sampling rate "
                f"{source_rate} sps is {_khz(half_bandwidth)} kHz."
            )


def compute_centerfreq(freqs: Sequence[int]) -> int:
    """Return the frequency halfway between the lowest and highest channel."""
    if not freqs:
        raise ValueError("at least one frequency is required")
    low, high = min(freqs), max(freqs)
    return low + (high - low) // 2


def parse_debug_filter(spec: str) -> int:
    """Turn a comma-separated list of debug classes into a bit mask.

    A class prefixed with ``-`` is removed from the mask. Classes are applied
    in order. The word ``help`` is not a class; callers show
    ``DEBUG_FILTER_USAGE`` for it.
    """
    tokens = [t for t in spec.split(",") if t]
    if not tokens:
        raise ParameterError("Invalid filter specification")
    mask = 0
    for token in tokens:
        negate = token.startswith("-")
        if negate:
            token = token[1:]
            if not token:
                raise ParameterError("Invalid filtermask: no token after '-'")
        if token not in DEBUG_CLASSES:
            raise ParameterError(f"Unknown filter specifier: {token}")
        bits = DEBUG_CLASSES[token][0]
        mask = mask & ~bits if negate else mask | bits
    return mask & 0xFFFFFFFF