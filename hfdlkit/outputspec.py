"""Parsing of output specifiers of the form ``intype:format:type:options``."""

from __future__ import annotations

from dataclasses import dataclass, field

from .kvargs import KvargsError, parse_kvargs

DEFAULT_OUTPUT = "decoded:text:file:path=-"


class OutputSpecError(ValueError):
    """Raised when an output specifier cannot be parsed.

    ``spec`` is the offending specifier and ``reason`` a short description.
    """

    def __init__(self, spec: str, reason: str) -> None:
        self.spec = spec
        self.reason = reason
        super().__init__(f"Could not parse output specifier '{spec}': {reason}")


@dataclass(frozen=True)
class OutputSpec:
    """A parsed output specifier."""

    intype: str
    outformat: str
    outtype: str
    options: dict[str, str] = field(default_factory=dict)


def parse_output_spec(spec: str) -> OutputSpec:
    """Split an output specifier into its fields and parse its options.

    The format is ``<input_type>:<output_format>:<output_type>:<options>``,
    where options is a comma-separated list of ``key=value`` pairs.
    """
    rest: str | None = spec
    fields = []
    for _ in range(3):
        assert rest is not None
        name, sep, remainder = rest.partition(":")
        if not name:
            raise OutputSpecError(spec, "field_name is empty")
        if not sep:
            raise OutputSpecError(spec, "not enough fields")
        fields.append(name)
        rest = remainder
    try:
        options = parse_kvargs(rest)
    except KvargsError as exc:
        raise OutputSpecError(spec, exc.args[0].split(" (at position")[0]) from exc
    intype, outformat, outtype = fields
    return OutputSpec(intype=intype, outformat=outformat, outtype=outtype, options=options)