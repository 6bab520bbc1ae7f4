"""Text and dictionary renderings of decoded HFNPDUs.

Coordinates are rendered as the raw 20-bit fields carried in the PDU, and
frequency lists as the indices of the frequency slots set in their bit masks.
"""

from __future__ import annotations

from typing import Any

from .hfnpdu import (
    FrequencyData,
    Hfnpdu,
    HfnpduType,
    MpduStats,
    PerformanceData,
    PropagatingFreqs,
    SystablePartial,
    SystableRequest,
    UtcTime,
    freq_change_code_description,
)


def _line(indent: int, text: str) -> str:
    return " " * indent + text + "\n"


def _freq_slots(mask: int) -> list[int]:
    return [i for i in range(mask.bit_length()) if mask >> i & 1]


def _time_text(t: UtcTime) -> str:
    return f"{t.hour:02d}:{t.min:02d}:{t.sec:02d}"


def _gs_id_text(indent: int, label: str, gs_id: int) -> str:
    return _line(indent, f"{label}: {gs_id}")


def _freq_list_text(indent: int, label: str, mask: int) -> str:
    slots = _freq_slots(mask)
    listed = ", ".join(str(s) for s in slots) if slots else "none"
    return _line(indent, f"{label}: {listed}")


def _mpdu_stats_text(indent: int, stats: MpduStats, label: str) -> str:
    return _line(
        indent,
        f"{label}: 300 bps: {stats.cnt_300bps:3d}   600 bps: {stats.cnt_600bps:3d}   "
        f"1200 bps: {stats.cnt_1200bps:3d}   1800 bps: {stats.cnt_1800bps:3d}",
    )


def _performance_data_text(indent: int, pdu: PerformanceData) -> str:
    descr = freq_change_code_description(pdu.freq_change_code) or "unknown"
    parts = [
        _line(indent, f"Version: {pdu.version}"),
        _line(indent, f"Flight ID: {pdu.flight_id}"),
        _line(indent, f"Lat (raw): {pdu.lat_raw}"),
        _line(indent, f"Lon (raw): {pdu.lon_raw}"),
        _line(indent, f"Time: {_time_text(pdu.utc_time)}"),
        _line(indent, f"Flight leg: {pdu.flight_leg}"),
        _gs_id_text(indent, "GS ID", pdu.gs_id),
        _freq_list_text(indent, "Frequency", 1 << pdu.freq_id),
        _line(indent, "Frequency search count:"),
        _line(indent + 1, f"This leg: {pdu.cur_leg.freq_search_cnt}"),
        _line(indent + 1, f"Prev leg: {pdu.prev_leg.freq_search_cnt}"),
        _line(indent, "HFDL disabled duration:"),
        _line(indent + 1, f"This leg: {pdu.cur_leg.hf_data_disabled_duration} sec"),
        _line(indent + 1, f"Prev leg: {pdu.prev_leg.hf_data_disabled_duration} sec"),
        _mpdu_stats_text(indent, pdu.mpdus_rx, "MPDUs received             "),
        _mpdu_stats_text(indent, pdu.mpdus_rx_errs, "MPDUs received with errors "),
        _mpdu_stats_text(indent, pdu.mpdus_tx, "MPDUs transmitted          "),
        _mpdu_stats_text(indent, pdu.mpdus_delivered, "MPDUs delivered            "),
        _line(indent, f"SPDUs received: {pdu.spdus_rx}"),
        _line(indent, f"SPDUs missed: {pdu.spdus_rx_errs}"),
        _line(indent, f"Last frequency change cause: {pdu.freq_change_code} ({descr})"),
    ]
    return "".join(parts)


def _propagating_freqs_text(indent: int, data: PropagatingFreqs) -> str:
    return (
        _gs_id_text(indent, "GS ID", data.gs_id)
        + _freq_list_text(indent + 2, "Listening on", data.tuned_freqs)
        + _freq_list_text(indent + 2, "Heard on", data.prop_freqs)
    )


def _frequency_data_text(indent: int, pdu: FrequencyData) -> str:
    parts = [
        _line(indent, f"Flight ID: {pdu.flight_id}"),
        _line(indent, f"Lat (raw): {pdu.lat_raw}"),
        _line(indent, f"Lon (raw): {pdu.lon_raw}"),
        _line(indent, f"Time: {_time_text(pdu.utc_time)}"),
    ]
    parts.extend(_propagating_freqs_text(indent, f) for f in pdu.propagating_freqs)
    return "".join(parts)


def format_text(pdu: Hfnpdu, indent: int = 0) -> str:
    """Render an HFNPDU as indented text lines."""
    if indent < 0:
        raise ValueError("indent must be non-negative")
    if pdu.err:
        return _line(indent, "-- Unparseable HFNPDU")
    name = pdu.type_name()
    if name is not None:
        out = _line(indent, f"{name}:")
    else:
        out = _line(indent, f"Unknown HFNPDU type (0x{pdu.type:02x}):")
    indent += 1
    data = pdu.data
    if isinstance(data, SystablePartial):
        out += _line(indent, f"Version: {data.systable_version}")
        out += _line(indent, f"Part: {data.pdu_seq_num + 1} of {data.total_pdu_cnt}")
    elif isinstance(data, PerformanceData):
        out += _performance_data_text(indent, data)
    elif isinstance(data, SystableRequest):
        out += _line(indent, f"Request data: 0x{data.request_data:x}")
    elif isinstance(data, FrequencyData):
        out += _frequency_data_text(indent, data)
    return out


def _mpdu_stats_dict(stats: MpduStats) -> dict[str, int]:
    return {
        "300bps": stats.cnt_300bps,
        "600bps": stats.cnt_600bps,
        "1200bps": stats.cnt_1200bps,
        "1800bps": stats.cnt_1800bps,
    }


def _time_dict(t: UtcTime) -> dict[str, int]:
    return {"hour": t.hour, "min": t.min, "sec": t.sec}


def _freq_list_dict(mask: int) -> list[dict[str, int]]:
    return [{"id": slot} for slot in _freq_slots(mask)]


def _performance_data_dict(pdu: PerformanceData) -> dict[str, Any]:
    return {
        "version": pdu.version,
        "flight_id": pdu.flight_id,
        "pos": {"lat_raw": pdu.lat_raw, "lon_raw": pdu.lon_raw},
        "time": _time_dict(pdu.utc_time),
        "flight_leg_num": pdu.flight_leg,
        "gs": {"id": pdu.gs_id},
        "frequency": {"id": 1 << pdu.freq_id},
        "freq_search_cnt": {
            "cur_leg": pdu.cur_leg.freq_search_cnt,
            "prev_leg": pdu.prev_leg.freq_search_cnt,
        },
        "hfdl_disabled_duration": {
            "this_leg": pdu.cur_leg.hf_data_disabled_duration,
            "prev_leg": pdu.prev_leg.hf_data_disabled_duration,
        },
        "pdu_stats": {
            "mpdus_rx_ok_cnt": _mpdu_stats_dict(pdu.mpdus_rx),
            "mpdus_rx_err_cnt": _mpdu_stats_dict(pdu.mpdus_rx_errs),
            "mpdus_tx_cnt": _mpdu_stats_dict(pdu.mpdus_tx),
            "mpdus_delivered_cnt": _mpdu_stats_dict(pdu.mpdus_delivered),
            "spdus_rx_ok_cnt": pdu.spdus_rx,
            "spdus_missed_cnt": pdu.spdus_rx_errs,
        },
        "last_freq_change_cause": {
            "code": pdu.freq_change_code,
            "descr": freq_change_code_description(pdu.freq_change_code) or "unknown",
        },
    }


def _frequency_data_dict(pdu: FrequencyData) -> dict[str, Any]:
    return {
        "flight_id": pdu.flight_id,
        "pos": {"lat_raw": pdu.lat_raw, "lon_raw": pdu.lon_raw},
        "utc_time": _time_dict(pdu.utc_time),
        "freq_data": [
            {
                "gs": {"id": f.gs_id},
                "listening_on_freqs": _freq_list_dict(f.tuned_freqs),
                "heard_on_freqs": _freq_list_dict(f.prop_freqs),
            }
            for f in pdu.propagating_freqs
        ],
    }


def to_dict(pdu: Hfnpdu) -> dict[str, Any]:
    """Return a JSON-ready dictionary describing an HFNPDU."""
    result: dict[str, Any] = {"err": pdu.err}
    if pdu.err:
        return result
    result["type"] = {"id": pdu.type, "name": pdu.type_name() or "unknown"}
    data = pdu.data
    if isinstance(data, SystablePartial):
        result["version"] = data.systable_version
        result["systable_partial"] = {
            "part_num": data.pdu_seq_num + 1,
            "parts_cnt": data.total_pdu_cnt,
        }
    elif isinstance(data, PerformanceData):
        result.update(_performance_data_dict(data))
    elif isinstance(data, SystableRequest):
        result["request_data"] = data.request_data
    elif isinstance(data, FrequencyData):
        result.update(_frequency_data_dict(data))
    return result


__all__ = ["format_text", "to_dict", "HfnpduType"]