"""Pretty-printing of option descriptions for help text."""

from __future__ import annotations

import sys
from typing import TextIO

USAGE_INDENT_STEP = 4
USAGE_OPT_NAME_COLWIDTH = 48


def format_option(name: str, description: str, indent: int) -> str:
    """Return one help line: indented option name followed by its description."""
    shift = USAGE_OPT_NAME_COLWIDTH - len(name) - indent * USAGE_INDENT_STEP
    shift = max(shift, 1)
    return f"{' ' * (indent * USAGE_INDENT_STEP)}{name}{' ' * shift}{description}"


def describe_option(name: str, description: str, indent: int, file: TextIO | None = None) -> None:
    """Write a formatted help line to ``file`` (standard error by default)."""
    out = sys.stderr if file is None else file
    out.write(format_option(name, description, indent) + "\n")