"""Parsing of ``key1=value1,key2=value2,...`` option strings."""

from __future__ import annotations


class KvargsError(ValueError):
    """Raised when a key-value string cannot be parsed.

    ``code`` is one of the class-level error codes and ``position`` is the
    character offset in the input at which the problem was found.
    """

    NO_ERROR = 0
    NO_INPUT = 1
    NO_KEY = 2
    NO_VALUE = 3

    def __init__(self, code: int, position: int = 0) -> None:
        self.code = code
        self.position = position
        super().__init__(f"{error_string(code)} (at position {position})")


_ERROR_STRINGS = {
    KvargsError.NO_ERROR: "success",
    KvargsError.NO_INPUT: "no key-value string given",
    KvargsError.NO_KEY: "no key name given",
    KvargsError.NO_VALUE: "no value given",
}


def error_string(err: int) -> str:
    """Return a human-readable description of a kvargs error code."""
    return _ERROR_STRINGS.get(err, "unknown error")


def parse_kvargs(string: str | None) -> dict[str, str]:
    """Parse a comma-separated list of ``key=value`` pairs into a dict.

    Values may be empty and may themselves contain ``=``. Every pair must
    have a non-empty key and an ``=`` sign.
    """
    if string is None:
        raise KvargsError(KvargsError.NO_INPUT, 0)
    result: dict[str, str] = {}
    offset = 0
    for pair in string.split(","):
        key, sep, value = pair.partition("=")
        if not key:
            raise KvargsError(KvargsError.NO_KEY, offset)
        if not sep:
            raise KvargsError(KvargsError.NO_VALUE, offset + len(key))
        result[key] = value
        offset += len(pair) + 1
    return result