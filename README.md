# hfdlkit

Building blocks for working with HFDL (High Frequency Data Link) traffic
from aircraft: I/Q sample input and conversion, FIR filter design helpers,
a K=7 r=1/2 soft-decision Viterbi decoder, and parsing and formatting of
HFNPDUs (performance data, frequency data, system table fragments and
system table requests).

## Installation

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## Command line

The `hfdlkit` command takes an I/Q recording and a list of HFDL channel
frequencies in kHz:

```
hfdlkit --iq-file recording.cu8 --sample-format CU8 --sample-rate 192000 8927 8948
```

It validates the options (sample rate of at least 18000 samples per second,
every channel within half the sample rate of the center frequency, which is
computed from the channel list when `--centerfreq` is not given, well-formed
`--output` specifiers), reads the file (or standard input for `-`) in blocks
of `--read-buffer-size` bytes, converts the samples and reports how many
samples were processed. The first SIGINT, SIGTERM, SIGHUP or SIGQUIT stops
reading after the current block.

Run `hfdlkit --help` for the full list of options,
`hfdlkit --output help` for the output specifier syntax and
`hfdlkit --debug help` for the debug classes.

## Library use

Parse an HFNPDU and render it:

```python
from hfdlkit.hfnpdu import parse_hfnpdu
from hfdlkit.hfnpdu_format import format_text, to_dict

pdu = parse_hfnpdu(raw_bytes)   # None if not an HFNPDU
print(format_text(pdu, 1))
print(to_dict(pdu))
```

Coordinates are reported as the raw 20-bit fields carried in the PDU, and
frequency lists as the indices of the slots set in their bit masks.

Convert raw samples to complex values:

```python
from hfdlkit.samples import SampleFormat, convert_samples, full_scale

samples = convert_samples(SampleFormat.CS16, data, full_scale(SampleFormat.CS16))
```

Decode a convolutionally coded bit stream (soft symbols 0..255):

```python
from hfdlkit.viterbi import Viterbi27

decoder = Viterbi27(len(soft_symbols) // 2)
decoder.update(soft_symbols)
decoded = decoder.chainback(nbits, 0)
```

Parse key-value option strings:

```python
from hfdlkit.kvargs import parse_kvargs

opts = parse_kvargs("path=-,rotate=daily")   # {"path": "-", "rotate": "daily"}
```

Other modules:

- `hfdlkit.filters`: windowed-sinc lowpass and complex bandpass design
  (`firdes_lowpass`, `firdes_bandpass`), `next_pow2`,
  `compute_fft_decimation_rate`.
- `hfdlkit.inputs`: `InputConfig`, `FileInput` and `create_input`.
- `hfdlkit.params`: parsing of numeric parameters, frequencies and debug
  filter specifications.
- `hfdlkit.outputspec`: `parse_output_spec` for
  `<data_type>:<format>:<output_type>:<key=val,...>` specifiers.
- `hfdlkit.options`: help text layout.
- `hfdlkit.metadata`: `Metadata` with a receive timestamp.

## What it does not do

- The command does not demodulate or decode HFDL frames. It reads and
  converts samples but does no channelization, frequency shifting or
  demodulation, and it writes no decoded messages: `--output` specifiers are
  checked but no output is produced.
- MPDUs, LPDUs and ACARS messages are not parsed; the enveloped data of an
  HFNPDU is kept as raw bytes. System table fragments are not reassembled,
  and the `--system-table` options are accepted but no table is loaded or
  saved.
- Only file (or standard input) sources are supported; there is no
  receiver device input.