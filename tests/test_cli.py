import signal

import pytest

from hfdlkit.cli import (
    OUTPUT_QUEUE_HWM_DEFAULT,
    OUTPUT_QUEUE_HWM_NONE,
    STATION_ID_LEN_MAX,
    Action,
    main,
    parse_args,
    usage_text,
)
from hfdlkit.inputs import InputType
from hfdlkit.outputspec import DEFAULT_OUTPUT, OutputSpecError, parse_output_spec
from hfdlkit.params import ParameterError, compute_centerfreq, parse_frequency
from hfdlkit.samples import SampleFormat

BASE = ["--iq-file", "in.raw", "--sample-format", "cu8", "--sample-rate", "36000"]


def test_basic_settings():
    s = parse_args(BASE + ["8927", "8936"])
    assert s.action is Action.RUN
    assert s.input.source == "in.raw"
    assert s.input.input_type == InputType.FILE
    assert s.input.sfmt == SampleFormat.CU8
    assert s.frequencies == [parse_frequency("8927"), parse_frequency("8936")]


def test_centerfreq_computed():
    s = parse_args(BASE + ["8927", "8936"])
    assert s.centerfreq_computed
    assert s.input.centerfreq == compute_centerfreq(s.frequencies)


def test_explicit_centerfreq():
    s = parse_args(BASE + ["--centerfreq", "8930", "8927"])
    assert not s.centerfreq_computed
    assert s.input.centerfreq == parse_frequency("8930")


def test_default_output_added():
    s = parse_args(BASE + ["8927"])
    assert s.outputs == [parse_output_spec(DEFAULT_OUTPUT)]


def test_iq_file_disables_queue_hwm():
    s = parse_args(["--output-queue-hwm", "5"] + BASE + ["8927"])
    assert s.output_queue_hwm == OUTPUT_QUEUE_HWM_NONE
    assert parse_args(["--help"]).output_queue_hwm == OUTPUT_QUEUE_HWM_DEFAULT


def test_negative_queue_hwm_rejected():
    with pytest.raises(ParameterError):
        parse_args(BASE + ["--output-queue-hwm", "-1", "8927"])


def test_options_after_positionals_and_abbreviation():
    s = parse_args(["--iq", "in.raw", "8927", "--sample-rate=36000", "--utc", "--output-m"])
    assert s.input.sample_rate == 36000
    assert s.utc and s.output_mpdus
    assert s.input.source == "in.raw"


def test_ambiguous_option():
    with pytest.raises(ParameterError, match="ambiguous"):
        parse_args(["--s", "x"])


def test_unknown_option():
    with pytest.raises(ParameterError, match="unrecognized"):
        parse_args(["--bogus"])


def test_missing_argument():
    with pytest.raises(ParameterError, match="requires an argument"):
        parse_args(["--iq-file"])


def test_unknown_sample_format():
    with pytest.raises(ParameterError, match="unknown"):
        parse_args(["--sample-format", "xyz"])


def test_no_input():
    with pytest.raises(ParameterError, match="No input specified"):
        parse_args(["--sample-rate", "36000", "8927"])


def test_no_frequencies():
    with pytest.raises(ParameterError, match="No channel frequencies"):
        parse_args(BASE)


def test_sample_rate_too_low():
    with pytest.raises(ParameterError, match="Sample rate"):
        parse_args(["--iq-file", "x", "--sample-rate", "1000", "8927"])


def test_frequency_span():
    with pytest.raises(ParameterError, match="too far away"):
        parse_args(BASE + ["8927", "10081"])


def test_bad_output_spec():
    with pytest.raises(OutputSpecError):
        parse_args(["--output", "decoded:text"])


def test_help_stops_processing():
    assert parse_args(["--help", "--bogus"]).action is Action.HELP
    assert parse_args(["--debug", "help"]).action is Action.DEBUG_HELP
    assert parse_args(["--output", "help"]).action is Action.OUTPUT_HELP


def test_station_id_truncated():
    s = parse_args(BASE + ["--station-id", "x" * (STATION_ID_LEN_MAX + 10), "8927"])
    assert len(s.station_id) == STATION_ID_LEN_MAX
    assert s.warnings


def test_usage_text_lists_options():
    text = usage_text()
    assert text.startswith("Usage:\n")
    for name in ("--iq-file", "--sample-format", "--output", "--system-table-save"):
        assert name in text


def test_main_help(capsys):
    assert main(["--help"]) == 0
    assert "Usage:" in capsys.readouterr().err


def test_main_unknown_option(capsys):
    assert main(["--bogus"]) == 1
    assert "Usage:" in capsys.readouterr().err


def test_main_missing_file(tmp_path, capsys):
    path = tmp_path / "missing.raw"
    args = ["--iq-file", str(path), "--sample-format", "cu8", "--sample-rate", "36000", "8927"]
    assert main(args) == 1
    assert "Unable to initialize input" in capsys.readouterr().err


def test_main_bad_read_buffer_size(tmp_path):
    path = tmp_path / "in.raw"
    path.write_bytes(bytes(10))
    args = [
        "--iq-file", str(path), "--sample-format", "cu8", "--sample-rate", "36000",
        "--read-buffer-size", "3", "8927",
    ]
    assert main(args) == 1


def test_main_reads_file(tmp_path, capsys):
    path = tmp_path / "in.raw"
    path.write_bytes(bytes(range(100)))
    before = signal.getsignal(signal.SIGINT)
    args = ["--iq-file", str(path), "--sample-format", "cu8", "--sample-rate", "36000", "8927"]
    assert main(args) == 0
    assert signal.getsignal(signal.SIGINT) == before
    assert "50 samples processed" in capsys.readouterr().err