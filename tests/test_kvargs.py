import pytest

from hfdlkit.kvargs import KvargsError, error_string, parse_kvargs


def test_parse_simple_pairs():
    assert parse_kvargs("path=-,mode=a") == {"path": "-", "mode": "a"}


def test_single_pair():
    assert parse_kvargs("path=/tmp/out.txt") == {"path": "/tmp/out.txt"}


def test_empty_value_allowed():
    assert parse_kvargs("key=") == {"key": ""}


def test_value_may_contain_equals_sign():
    assert parse_kvargs("a=b=c") == {"a": "b=c"}


def test_none_input_raises_no_input():
    with pytest.raises(KvargsError) as exc:
        parse_kvargs(None)
    assert exc.value.code == KvargsError.NO_INPUT


def test_empty_string_is_missing_key():
    with pytest.raises(KvargsError) as exc:
        parse_kvargs("")
    assert exc.value.code == KvargsError.NO_KEY
    assert exc.value.position == 0


def test_missing_key_position_in_second_pair():
    spec = "a=1,=2"
    with pytest.raises(KvargsError) as exc:
        parse_kvargs(spec)
    assert exc.value.code == KvargsError.NO_KEY
    assert exc.value.position == spec.index(",") + 1


def test_missing_value_position_is_end_of_key():
    spec = "a=1,bcd"
    with pytest.raises(KvargsError) as exc:
        parse_kvargs(spec)
    assert exc.value.code == KvargsError.NO_VALUE
    assert exc.value.position == len(spec)


def test_trailing_comma_is_missing_key():
    spec = "a=1,"
    with pytest.raises(KvargsError) as exc:
        parse_kvargs(spec)
    assert exc.value.code == KvargsError.NO_KEY
    assert exc.value.position == len(spec)


def test_error_strings():
    assert error_string(KvargsError.NO_ERROR) == "success"
    assert error_string(KvargsError.NO_INPUT) == "no key-value string given"
    assert error_string(KvargsError.NO_KEY) == "no key name given"
    assert error_string(KvargsError.NO_VALUE) == "no value given"


def test_unknown_error_string():
    assert error_string(99) == "unknown error"


def test_exception_message_contains_description():
    with pytest.raises(KvargsError) as exc:
        parse_kvargs("novalue")
    assert error_string(KvargsError.NO_VALUE) in str(exc.value)