"""Raw I/Q sample formats and their conversion to complex values."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable

Converter = Callable[[bytes, float], "list[complex]"]


class SampleFormat(IntEnum):
    """Supported raw complex sample formats."""

    UNDEF = 0
    CU8 = 1
    CS16 = 2
    CF32 = 3


def _truncate(data: bytes, size: int) -> bytes:
    return data[: len(data) - len(data) % size]


def _convert_cu8(data: bytes, scale: float) -> list[complex]:
    data = _truncate(data, 2)
    shift = scale / 2.0
    it = iter(data)
    return [complex((re - shift) / scale, (im - shift) / scale) for re, im in zip(it, it)]


def _convert_cs16(data: bytes, scale: float) -> list[complex]:
    data = _truncate(data, 4)
    return [complex(re / scale, im / scale) for re, im in struct.iter_unpack("<hh", data)]


def _convert_cf32(data: bytes, scale: float) -> list[complex]:
    data = _truncate(data, 8)
    return [complex(re / scale, im / scale) for re, im in struct.iter_unpack("<ff", data)]


@dataclass(frozen=True)
class _FormatParams:
    name: str
    sample_size: int
    full_scale: float
    converter: Converter | None


_PARAMS: dict[SampleFormat, _FormatParams] = {
    SampleFormat.UNDEF: _FormatParams("", 0, 0.0, None),
    SampleFormat.CU8: _FormatParams("CU8", 2, 127.0, _convert_cu8),
    SampleFormat.CS16: _FormatParams("CS16", 4, 32767.0 + 0.5, _convert_cs16),
    SampleFormat.CF32: _FormatParams("CF32", 8, 1.0, _convert_cf32),
}


def _params(fmt: int) -> _FormatParams | None:
    try:
        return _PARAMS[SampleFormat(fmt)]
    except ValueError:
        return None


def sample_size(fmt: int) -> int:
    """Return the number of octets per complex sample, or 0 if unknown."""
    params = _params(fmt)
    return params.sample_size if params else 0


def full_scale(fmt: int) -> float:
    """Return the maximum raw sample value of the format, or 0.0 if unknown."""
    params = _params(fmt)
    return params.full_scale if params else 0.0


def sample_format_from_string(text: str | None) -> SampleFormat:
    """Look up a sample format by name, ignoring case; UNDEF if unknown."""
    if text is None:
        return SampleFormat.UNDEF
    wanted = text.lower()
    for fmt, params in _PARAMS.items():
        if params.name.lower() == wanted:
            return fmt
    return SampleFormat.UNDEF


def get_sample_converter(fmt: int) -> Converter | None:
    """Return the conversion routine for the format, or None if there is none."""
    params = _params(fmt)
    return params.converter if params else None


def convert_samples(fmt: int, data: bytes, scale: float | None = None) -> list[complex]:
    """Convert raw sample bytes to complex values normalized by ``scale``.

    ``scale`` defaults to the full-scale value of the format. Trailing bytes
    that do not form a whole sample are dropped.
    """
    converter = get_sample_converter(fmt)
    if converter is None:
        raise ValueError(f"no sample conversion routine for sample format {fmt}")
    if scale is None:
        scale = full_scale(fmt)
    if scale <= 0:
        raise ValueError("full scale value must be positive")
    return converter(bytes(data), scale)