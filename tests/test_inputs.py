import struct

import pytest

from hfdlkit.inputs import (
    INPUT_FILE_BUFSIZE_DEFAULT,
    FileInput,
    InputConfig,
    InputError,
    InputType,
    create_input,
)
from hfdlkit.samples import SampleFormat, convert_samples


def make_config(path, sfmt=SampleFormat.CU8, bufsize=-1):
    return InputConfig(
        source=str(path), input_type=InputType.FILE, sfmt=sfmt, read_buffer_size=bufsize
    )


def test_create_input_file():
    inp = create_input(InputConfig(source="x", input_type=InputType.FILE))
    assert isinstance(inp, FileInput) and inp.config.source == "x"


def test_create_input_undefined_type():
    with pytest.raises(InputError):
        create_input(InputConfig(source="x"))


def test_default_buffer_size_and_max_tu(tmp_path):
    path = tmp_path / "iq.cu8"
    path.write_bytes(bytes(10))
    cfg = make_config(path)
    with create_input(cfg) as inp:
        inp.init()
        assert cfg.read_buffer_size == INPUT_FILE_BUFSIZE_DEFAULT
        assert inp.max_tu == INPUT_FILE_BUFSIZE_DEFAULT // inp.bytes_per_sample


def test_batches_cover_whole_file(tmp_path):
    data = bytes(range(10))
    path = tmp_path / "iq.cu8"
    path.write_bytes(data)
    inp = create_input(make_config(path, bufsize=4))
    inp.init()
    batches = list(inp.batches())
    assert [len(b) for b in batches] == [2, 2, 1]
    flat = [s for b in batches for s in b]
    assert flat == convert_samples(SampleFormat.CU8, data)


def test_batches_cf32(tmp_path):
    values = [(0.5, -0.5), (0.25, 0.75)]
    path = tmp_path / "iq.cf32"
    path.write_bytes(b"".join(struct.pack("<ff", *v) for v in values))
    inp = create_input(make_config(path, sfmt=SampleFormat.CF32, bufsize=8))
    inp.init()
    flat = [s for b in inp.batches() for s in b]
    assert flat == [complex(*v) for v in values]


def test_missing_sample_format(tmp_path):
    path = tmp_path / "iq.raw"
    path.write_bytes(bytes(4))
    inp = create_input(make_config(path, sfmt=SampleFormat.UNDEF))
    with pytest.raises(InputError, match="Sample format"):
        inp.init()


def test_missing_file(tmp_path):
    inp = create_input(make_config(tmp_path / "nope.cu8"))
    with pytest.raises(InputError, match="Failed to open"):
        inp.init()


def test_buffer_size_not_multiple_of_sample(tmp_path):
    path = tmp_path / "iq.cs16"
    path.write_bytes(bytes(8))
    inp = create_input(make_config(path, sfmt=SampleFormat.CS16, bufsize=6))
    with pytest.raises(InputError, match="read-buffer-size"):
        inp.init()


def test_batches_before_init_rejected(tmp_path):
    inp = create_input(make_config(tmp_path / "iq.cu8"))
    with pytest.raises(InputError):
        next(inp.batches())


def test_batches_after_exhaustion_rejected(tmp_path):
    path = tmp_path / "iq.cu8"
    path.write_bytes(bytes(2))
    inp = create_input(make_config(path, bufsize=2))
    inp.init()
    assert len(list(inp.batches())) == 1
    with pytest.raises(InputError):
        next(inp.batches())