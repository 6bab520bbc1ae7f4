import pytest

from hfdlkit.outputspec import (
    DEFAULT_OUTPUT,
    OutputSpec,
    OutputSpecError,
    parse_output_spec,
)


def test_default_output():
    spec = parse_output_spec(DEFAULT_OUTPUT)
    assert spec == OutputSpec("decoded", "text", "file", {"path": "-"})


def test_multiple_options_and_colons_in_values():
    spec = parse_output_spec("decoded:json:udp:address=host:5555,port=7")
    assert spec.outtype == "udp"
    assert spec.options == {"address": "host:5555", "port": "7"}


@pytest.mark.parametrize(
    "text,reason",
    [
        ("", "field_name is empty"),
        (":text:file:path=-", "field_name is empty"),
        ("decoded::file:path=-", "field_name is empty"),
        ("decoded", "not enough fields"),
        ("decoded:text:file", "not enough fields"),
        ("decoded:text:file:", "no key name given"),
        ("decoded:text:file:path", "no value given"),
    ],
)
def test_errors(text, reason):
    with pytest.raises(OutputSpecError) as info:
        parse_output_spec(text)
    assert info.value.reason == reason
    assert info.value.spec == text
    assert str(info.value) == f"Could not parse output specifier '{text}': {reason}"


def test_error_is_value_error():
    with pytest.raises(ValueError):
        parse_output_spec("a:b")