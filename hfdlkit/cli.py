"""Command-line front end: option parsing, validation and the input loop."""

from __future__ import annotations

import signal
import sys
import threading
from contextlib import closing, contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Sequence, TextIO

from .filters import compute_fft_decimation_rate, compute_filter_relative_transition_bw
from .inputs import InputConfig, InputError, InputType, create_input
from .options import USAGE_INDENT_STEP, USAGE_OPT_NAME_COLWIDTH, format_option
from .outputspec import DEFAULT_OUTPUT, OutputSpec, OutputSpecError, parse_output_spec
from .params import (
    DEBUG_CLASSES,
    DEBUG_FILTER_USAGE,
    ParameterError,
    check_frequency_span,
    compute_centerfreq,
    parse_debug_filter,
    parse_double,
    parse_frequency,
    parse_int32,
)
from .samples import SampleFormat, sample_format_from_string

PROGRAM = "hfdlkit"
VERSION = "1.3.0"

HFDL_SYMBOL_RATE = 1800
SPS = 10
HFDL_CHANNEL_TRANSITION_BW_HZ = 250
STATION_ID_LEN_MAX = 255
OUTPUT_QUEUE_HWM_DEFAULT = 1000
OUTPUT_QUEUE_HWM_NONE = 0

# Long option name -> whether it takes an argument.
_LONG_OPTS: dict[str, bool] = {
    "version": False,
    "help": False,
    "debug": True,
    "iq-file": True,
    "sample-format": True,
    "sample-rate": True,
    "centerfreq": True,
    "gain": True,
    "gain-elements": True,
    "freq-correction": True,
    "antenna": True,
    "device-settings": True,
    "freq-offset": True,
    "read-buffer-size": True,
    "output": True,
    "output-queue-hwm": True,
    "utc": False,
    "milliseconds": False,
    "raw-frames": False,
    "prettify-xml": False,
    "station-id": True,
    "output-mpdus": False,
    "output-corrupted-pdus": False,
    "freq-as-squawk": False,
    "system-table": True,
    "system-table-save": True,
}


class Action(Enum):
    """What the program should do after parsing its arguments."""

    RUN = "run"
    HELP = "help"
    VERSION = "version"
    DEBUG_HELP = "debug_help"
    OUTPUT_HELP = "output_help"


class _OptionError(ParameterError):
    """An option that is unknown, ambiguous or lacks its argument."""


@dataclass
class Settings:
    """Everything gathered from the command line."""

    input: InputConfig = field(default_factory=InputConfig)
    outputs: list[OutputSpec] = field(default_factory=list)
    frequencies: list[int] = field(default_factory=list)
    output_queue_hwm: int = OUTPUT_QUEUE_HWM_DEFAULT
    utc: bool = False
    milliseconds: bool = False
    output_raw_frames: bool = False
    prettify_xml: bool = False
    station_id: str | None = None
    output_mpdus: bool = False
    output_corrupted_pdus: bool = False
    freq_as_squawk: bool = False
    systable_file: str | None = None
    systable_save_file: str | None = None
    debug_filter: int = 0
    centerfreq_computed: bool = False
    warnings: list[str] = field(default_factory=list)
    action: Action = Action.RUN


def _match_option(name: str, arg: str) -> str:
    if name in _LONG_OPTS:
        return name
    candidates = [opt for opt in _LONG_OPTS if name and opt.startswith(name)]
    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        raise _OptionError(f"unrecognized option '{arg}'")
    listed = " ".join(f"'--{c}'" for c in candidates)
    raise _OptionError(f"option '--{name}' is ambiguous; possibilities: {listed}")


def _scan(args: Sequence[str]) -> Iterator[tuple[str | None, str | None]]:
    """Yield (option, value) pairs in order; positional arguments come as (None, arg)."""
    it = iter(args)
    for arg in it:
        if arg == "--":
            for rest in it:
                yield None, rest
            return
        if arg.startswith("--"):
            name, eq, value = arg[2:].partition("=")
            full = _match_option(name, arg)
            if _LONG_OPTS[full]:
                if not eq:
                    nxt = next(it, None)
                    if nxt is None:
                        raise _OptionError(f"option '--{full}' requires an argument")
                    value = nxt
                yield full, value
            else:
                if eq:
                    raise _OptionError(f"option '--{full}' doesn't allow an argument")
                yield full, None
        elif arg.startswith("-") and arg != "-":
            raise _OptionError(f"invalid option -- '{arg[1]}'")
        else:
            yield None, arg


_FLAGS = {
    "utc": "utc",
    "milliseconds": "milliseconds",
    "raw-frames": "output_raw_frames",
    "prettify-xml": "prettify_xml",
    "output-mpdus": "output_mpdus",
    "output-corrupted-pdus": "output_corrupted_pdus",
    "freq-as-squawk": "freq_as_squawk",
}


def parse_args(argv: Sequence[str] | None = None) -> Settings:
    """Parse and validate command-line arguments (without the program name).

    Options are processed in order; ``--help``, ``--version`` and the
    ``help`` arguments of ``--debug`` and ``--output`` stop processing and
    set ``Settings.action``. Invalid input raises ParameterError or
    OutputSpecError.
    """
    args = sys.argv[1:] if argv is None else list(argv)
    settings = Settings()
    cfg = settings.input
    positional: list[str] = []

    for name, value in _scan(args):
        if name is None:
            assert value is not None
            positional.append(value)
            continue
        if name == "version":
            settings.action = Action.VERSION
            return settings
        if name == "help":
            settings.action = Action.HELP
            return settings
        if name in _FLAGS:
            setattr(settings, _FLAGS[name], True)
            continue
        assert value is not None
        if name == "iq-file":
            settings.output_queue_hwm = OUTPUT_QUEUE_HWM_NONE
            cfg.source = value
            cfg.input_type = InputType.FILE
        elif name == "sample-format":
            cfg.sfmt = sample_format_from_string(value)
            if cfg.sfmt == SampleFormat.UNDEF:
                raise ParameterError(f"Sample format '{value}' is unknown")
        elif name == "sample-rate":
            cfg.sample_rate = parse_int32(value)
        elif name == "centerfreq":
            cfg.centerfreq = parse_frequency(value)
        elif name == "gain":
            cfg.gain = parse_double(value)
        elif name == "gain-elements":
            cfg.gain_elements = value
        elif name == "freq-correction":
            cfg.correction = parse_double(value)
        elif name == "antenna":
            cfg.antenna = value
        elif name == "device-settings":
            cfg.device_settings = value
        elif name == "freq-offset":
            cfg.freq_offset = parse_frequency(value)
        elif name == "read-buffer-size":
            cfg.read_buffer_size = parse_int32(value)
        elif name == "output":
            if value == "help":
                settings.action = Action.OUTPUT_HELP
                return settings
            settings.outputs.append(parse_output_spec(value))
        elif name == "output-queue-hwm":
            settings.output_queue_hwm = parse_int32(value)
        elif name == "station-id":
            if len(value) > STATION_ID_LEN_MAX:
                settings.warnings.append(
                    "Warning: --station-id argument too long; truncated to "
                    f"{STATION_ID_LEN_MAX} characters"
                )
            settings.station_id = value[:STATION_ID_LEN_MAX]
        elif name == "system-table":
            settings.systable_file = value
        elif name == "system-table-save":
            settings.systable_save_file = value
        elif name == "debug":
            if value == "help":
                settings.action = Action.DEBUG_HELP
                return settings
            settings.debug_filter = parse_debug_filter(value)

    if cfg.source is None:
        raise ParameterError("No input specified")
    if not positional:
        raise ParameterError("No channel frequencies given")
    settings.frequencies = [parse_frequency(p) for p in positional]

    min_rate = HFDL_SYMBOL_RATE * SPS
    if cfg.sample_rate < min_rate:
        raise ParameterError(f"Sample rate must be greater or equal to {min_rate}")
    if cfg.centerfreq < 0:
        cfg.centerfreq = compute_centerfreq(settings.frequencies)
        settings.centerfreq_computed = True
    check_frequency_span(settings.frequencies, cfg.centerfreq, cfg.sample_rate)
    if settings.output_queue_hwm < 0:
        raise ParameterError(
            "Invalid --output-queue-hwm value: must be a non-negative integer"
        )
    if not settings.outputs:
        settings.outputs.append(parse_output_spec(DEFAULT_OUTPUT))
    return settings


def _ind(n: int) -> str:
    return " " * (n * USAGE_INDENT_STEP)


def usage_text() -> str:
    """Return the help text listing all options."""
    opt = lambda name, descr, indent=1: format_option(name, descr, indent) + "\n"  # noqa: E731
    pad = " " * USAGE_OPT_NAME_COLWIDTH
    parts = [
        "Usage:\n",
        "\nRead I/Q samples from file:\n\n",
        f"{_ind(1)}{PROGRAM} [output_options] --iq-file <input_iq_file> "
        "[iq_file_options] <freq_1> [<freq_2> [...]]\n",
        "\nGeneral options:\n",
        opt("--help", "Displays this text"),
        opt("--version", "Displays program version number"),
        opt(
            "--debug <filter_spec>",
            'Debug message classes to display (default: none) ("--debug help" for details)',
        ),
        "common options:\n",
        opt("<freq_1> [<freq_2> [...]]", "HFDL channel frequencies, in kHz, as floating point numbers"),
        "\niq_file_options:\n",
        opt("--iq-file <string>", 'Read I/Q samples from file (use "-" to read from standard input)'),
        opt("--sample-rate <integer>", "Set sampling rate (samples per second)"),
        opt("--centerfreq <float>", "Center frequency of the input data, in kHz (default: auto)"),
        opt("--sample-format <sample_format>", "Input sample format. Supported formats:"),
        opt("CU8", "8-bit unsigned (eg. recorded with rtl_sdr)", 2),
        opt("CS16", "16-bit signed, little-endian (eg. recorded with sdrplay)", 2),
        opt("CF32", "32-bit float, little-endian (eg. Airspy HF+)", 2),
        opt("--read-buffer-size <integer>", "Number of bytes to read from file in one batch"),
        "\nOutput options:\n",
        opt("--output <output_specifier>", f"Output specification (default: {DEFAULT_OUTPUT})"),
        opt("", '(See "--output help" for details)'),
        opt("--output-queue-hwm <integer>", "High water mark value for output queues (0 = no limit)"),
        f"{pad}(default: {OUTPUT_QUEUE_HWM_DEFAULT} messages, not applicable when using --iq-file)\n",
        opt("--output-mpdus", "Include media access control protocol data units in the output (default: false)"),
        opt("--output-corrupted-pdus", "Include corrupted / unparseable PDUs in the output (default: false)"),
        opt("--station-id <string>", "Receiver site identifier"),
        f"{pad}Maximum length: {STATION_ID_LEN_MAX} characters\n",
        "\nText output formatting options:\n",
        opt("--utc", "Use UTC timestamps in output and file names"),
        opt("--milliseconds", "Print milliseconds in timestamps"),
        opt("--raw-frames", "Print raw data as hex"),
        opt("--prettify-xml", "Pretty-print XML payloads in ACARS and MIAM CORE PDUs"),
        "\nBasestation feed options:\n",
        opt("--freq-as-squawk", "(Ab)use squawk field to convey HFDL channel frequency info"),
        "\nSystem table options:\n",
        opt("--system-table <string>", "Load system table from the given file"),
        opt("--system-table-save <string>", "Save updated system table to the given file"),
    ]
    return "".join(parts)


_OUTPUT_USAGE = (
    "<output_specifier> is a parameter of the form:\n\n"
    f"{_ind(1)}<data_type>:<format>:<output_type>:<key1=val1,key2=val2,...>\n\n"
    f"Default: {DEFAULT_OUTPUT}\n"
)


class _StopFlag:
    def __init__(self, out: TextIO) -> None:
        self.count = 0
        self._out = out

    def __call__(self, signum: int, frame: object) -> None:
        self._out.write(f"Got signal {signum}, ")
        if self.count == 0:
            self._out.write("exiting gracefully (send signal once again to force quit)\n")
        else:
            self._out.write("forcing quit\n")
        self.count += 1


@contextmanager
def _signal_handlers(handler: _StopFlag) -> Iterator[None]:
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    saved = {}
    for name in ("SIGHUP", "SIGINT", "SIGQUIT", "SIGTERM"):
        signum = getattr(signal, name, None)
        if signum is not None:
            saved[signum] = signal.signal(signum, handler)
    try:
        yield
    finally:
        for signum, previous in saved.items():
            signal.signal(signum, previous)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the program; return the process exit status."""
    err = sys.stderr
    print(f"{PROGRAM} {VERSION}", file=err)
    try:
        settings = parse_args(argv)
    except _OptionError as exc:
        print(f"{PROGRAM}: {exc}", file=err)
        err.write(usage_text())
        return 1
    except (ParameterError, OutputSpecError) as exc:
        print(exc, file=err)
        return 1

    if settings.action is Action.VERSION:
        return 0
    if settings.action is Action.HELP:
        err.write(usage_text())
        return 0
    if settings.action is Action.DEBUG_HELP:
        err.write(DEBUG_FILTER_USAGE)
        return 0
    if settings.action is Action.OUTPUT_HELP:
        err.write(_OUTPUT_USAGE)
        return 0

    for warning in settings.warnings:
        print(warning, file=err)
    cfg = settings.input
    if settings.centerfreq_computed:
        print(f"{cfg.source}: computed center frequency: {cfg.centerfreq / 1000:.3f} kHz", file=err)

    try:
        source = create_input(cfg)
    except InputError:
        print("Invalid input specified", file=err)
        return 1
    try:
        source.init()
    except InputError as exc:
        print(exc, file=err)
        print("Unable to initialize input", file=err)
        return 1

    decimation = compute_fft_decimation_rate(cfg.sample_rate, HFDL_SYMBOL_RATE * SPS)
    transition_bw = compute_filter_relative_transition_bw(
        cfg.sample_rate, HFDL_CHANNEL_TRANSITION_BW_HZ
    )
    if settings.debug_filter & DEBUG_CLASSES["dsp"][0]:
        post_fft = round(cfg.sample_rate / decimation)
        print(
            f"fft_decimation_rate: {decimation} sample_rate_post_fft: {post_fft} "
            f"transition_bw: {transition_bw:.0f}",
            file=err,
        )

    stop = _StopFlag(err)
    total = 0
    with _signal_handlers(stop), source, closing(source.batches()) as batches:
        for batch in batches:
            total += len(batch)
            if stop.count:
                break
    print(f"{total} samples processed", file=err)
    return 0