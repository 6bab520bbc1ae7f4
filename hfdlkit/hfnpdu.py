"""Parsing of HFDL network protocol data units (HFNPDUs)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Union


class HfnpduType(IntEnum):
    """Known HFNPDU type codes."""

    SYSTEM_TABLE = 0xD0
    PERFORMANCE_DATA = 0xD1
    SYSTEM_TABLE_REQUEST = 0xD2
    FREQUENCY_DATA = 0xD5
    DELAYED_ECHO = 0xDE
    ENVELOPED_DATA = 0xFF


_TYPE_DESCRIPTIONS = {
    HfnpduType.SYSTEM_TABLE: "System table (partial)",
    HfnpduType.PERFORMANCE_DATA: "Performance data",
    HfnpduType.SYSTEM_TABLE_REQUEST: "System table request",
    HfnpduType.FREQUENCY_DATA: "Frequency data",
    HfnpduType.DELAYED_ECHO: "Delayed echo",
    HfnpduType.ENVELOPED_DATA: "Enveloped data",
}

_FREQ_CHANGE_CODES = {
    0: "First freq. search in this flight leg",
    1: "Too many NACKs",
    2: "SPDUs no longer received",
    3: "HFDL disabled",
    4: "GS frequency change",
    5: "GS down / channel down",
    6: "Poor uplink channel quality",
    7: "No change",
}

SYSTABLE_HFNPDU_MIN_LEN = 5
SYSTABLE_REQUEST_HFNPDU_LEN = 4
PERFORMANCE_DATA_HFNPDU_LEN = 47
FREQUENCY_DATA_HFNPDU_MIN_LEN = 15
PROP_FREQ_DATA_LEN = 6
PROP_FREQS_CNT_MAX = 6


@dataclass(frozen=True)
class UtcTime:
    """Time of day in UTC."""

    hour: int
    min: int
    sec: int


@dataclass(frozen=True)
class FlightLegStats:
    """Per-flight-leg frequency search statistics."""

    freq_search_cnt: int
    hf_data_disabled_duration: int


@dataclass(frozen=True)
class MpduStats:
    """MPDU counters broken down by data rate."""

    cnt_1800bps: int
    cnt_1200bps: int
    cnt_600bps: int
    cnt_300bps: int


@dataclass(frozen=True)
class PerformanceData:
    """Contents of a Performance data HFNPDU.

    ``lat_raw`` and ``lon_raw`` are the 20-bit coordinate fields as sent.
    """

    flight_id: str
    lat_raw: int
    lon_raw: int
    utc_time: UtcTime
    version: int
    flight_leg: int
    gs_id: int
    freq_id: int
    prev_leg: FlightLegStats
    cur_leg: FlightLegStats
    mpdus_rx: MpduStats
    mpdus_rx_errs: MpduStats
    mpdus_tx: MpduStats
    mpdus_delivered: MpduStats
    spdus_rx: int
    spdus_rx_errs: int
    freq_change_code: int


@dataclass(frozen=True)
class PropagatingFreqs:
    """Frequencies of one ground station heard and tuned by the aircraft."""

    gs_id: int
    prop_freqs: int
    tuned_freqs: int


@dataclass(frozen=True)
class FrequencyData:
    """Contents of a Frequency data HFNPDU."""

    flight_id: str
    lat_raw: int
    lon_raw: int
    utc_time: UtcTime
    propagating_freqs: list[PropagatingFreqs] = field(default_factory=list)


@dataclass(frozen=True)
class SystableRequest:
    """Contents of a System table request HFNPDU."""

    request_data: int


@dataclass(frozen=True)
class SystablePartial:
    """Header of one part of a system table, plus the part's remaining octets."""

    systable_version: int
    total_pdu_cnt: int
    pdu_seq_num: int
    payload: bytes = b""


HfnpduData = Union[PerformanceData, FrequencyData, SystableRequest, SystablePartial]


@dataclass
class Hfnpdu:
    """A decoded HFNPDU.

    ``err`` is set when the PDU was too short for its type. ``payload`` holds
    the enveloped data for ENVELOPED_DATA PDUs.
    """

    type: int
    err: bool = False
    data: HfnpduData | None = None
    payload: bytes = b""

    def type_name(self) -> str | None:
        """Return the description of the PDU type, or None if it is unknown."""
        try:
            return _TYPE_DESCRIPTIONS[HfnpduType(self.type)]
        except ValueError:
            return None


def parse_utc_time(seconds: int) -> UtcTime:
    """Split a number of seconds since midnight into hours, minutes and seconds."""
    return UtcTime(hour=seconds // 3600, min=seconds % 3600 // 60, sec=seconds % 60)


def freq_change_code_description(code: int) -> str | None:
    """Return the description of a frequency change cause code, or None."""
    return _FREQ_CHANGE_CODES.get(code)


def _u16(buf: bytes, pos: int) -> int:
    return buf[pos] | buf[pos + 1] << 8


def _flight_id(buf: bytes) -> str:
    return buf[2:8].split(b"\0", 1)[0].decode("latin-1")


def _coordinates(buf: bytes) -> tuple[int, int]:
    lat = buf[8] | buf[9] << 8 | (buf[10] & 0xF) << 16
    lon = (buf[10] & 0xF0) >> 4 | buf[11] << 4 | buf[12] << 12
    return lat, lon


def _mpdu_stats(buf: bytes, pos: int) -> MpduStats:
    return MpduStats(
        cnt_1800bps=buf[pos],
        cnt_1200bps=buf[pos + 1],
        cnt_600bps=buf[pos + 2],
        cnt_300bps=buf[pos + 3],
    )


def _parse_systable(buf: bytes) -> SystablePartial | None:
    if len(buf) < SYSTABLE_HFNPDU_MIN_LEN:
        return None
    return SystablePartial(
        systable_version=buf[3] >> 4 | buf[4] << 4,
        total_pdu_cnt=(buf[2] >> 4) + 1,
        pdu_seq_num=buf[2] & 0xF,
        payload=bytes(buf[SYSTABLE_HFNPDU_MIN_LEN:]),
    )


def _parse_systable_request(buf: bytes) -> SystableRequest | None:
    if len(buf) < SYSTABLE_REQUEST_HFNPDU_LEN:
        return None
    return SystableRequest(request_data=_u16(buf, 2))


def _parse_performance_data(buf: bytes) -> PerformanceData | None:
    if len(buf) < PERFORMANCE_DATA_HFNPDU_LEN:
        return None
    lat, lon = _coordinates(buf)
    return PerformanceData(
        flight_id=_flight_id(buf),
        lat_raw=lat,
        lon_raw=lon,
        utc_time=parse_utc_time(2 * _u16(buf, 13)),
        version=buf[15],
        flight_leg=buf[16],
        gs_id=buf[17] & 0x7F,
        freq_id=buf[18],
        prev_leg=FlightLegStats(_u16(buf, 19), _u16(buf, 23)),
        cur_leg=FlightLegStats(_u16(buf, 21), _u16(buf, 25)),
        mpdus_rx=_mpdu_stats(buf, 27),
        mpdus_rx_errs=_mpdu_stats(buf, 31),
        spdus_rx=_u16(buf, 35),
        spdus_rx_errs=buf[37],
        mpdus_tx=_mpdu_stats(buf, 38),
        mpdus_delivered=_mpdu_stats(buf, 42),
        freq_change_code=buf[46] & 0xF,
    )


def _parse_frequency_data(buf: bytes) -> FrequencyData | None:
    if len(buf) < FREQUENCY_DATA_HFNPDU_MIN_LEN:
        return None
    lat, lon = _coordinates(buf)
    freqs = []
    for pos in range(
        FREQUENCY_DATA_HFNPDU_MIN_LEN,
        FREQUENCY_DATA_HFNPDU_MIN_LEN + PROP_FREQS_CNT_MAX * PROP_FREQ_DATA_LEN,
        PROP_FREQ_DATA_LEN,
    ):
        if pos + PROP_FREQ_DATA_LEN > len(buf):
            break
        freqs.append(
            PropagatingFreqs(
                gs_id=buf[pos] & 0x7F,
                prop_freqs=buf[pos + 1] | buf[pos + 2] << 8 | (buf[pos + 3] & 0xF) << 16,
                tuned_freqs=(buf[pos + 3] & 0xF0) >> 4 | buf[pos + 4] << 4 | buf[pos + 5] << 12,
            )
        )
    return FrequencyData(
        flight_id=_flight_id(buf),
        lat_raw=lat,
        lon_raw=lon,
        utc_time=parse_utc_time(2 * _u16(buf, 13)),
        propagating_freqs=freqs,
    )


_PARSERS = {
    HfnpduType.SYSTEM_TABLE: _parse_systable,
    HfnpduType.PERFORMANCE_DATA: _parse_performance_data,
    HfnpduType.SYSTEM_TABLE_REQUEST: _parse_systable_request,
    HfnpduType.FREQUENCY_DATA: _parse_frequency_data,
}


def parse_hfnpdu(buf: bytes) -> Hfnpdu | None:
    """Decode an HFNPDU.

    Returns None when ``buf`` is empty, does not start with the HFNPDU
    marker octet 0xFF, or is too short to hold a type octet.
    """
    buf = bytes(buf)
    if not buf or buf[0] != 0xFF or len(buf) < 2:
        return None
    pdu = Hfnpdu(type=buf[1])
    parser = _PARSERS.get(pdu.type)
    if parser is not None:
        pdu.data = parser(buf)
        pdu.err = pdu.data is None
    elif pdu.type == HfnpduType.ENVELOPED_DATA:
        pdu.payload = buf[2:]
    return pdu