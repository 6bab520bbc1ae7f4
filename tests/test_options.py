import io

from hfdlkit.options import (
    USAGE_INDENT_STEP,
    USAGE_OPT_NAME_COLWIDTH,
    describe_option,
    format_option,
)


def test_description_starts_at_column_width():
    line = format_option("--help", "Displays this text", 1)
    assert line.index("Displays this text") == USAGE_OPT_NAME_COLWIDTH
    assert line.startswith(" " * USAGE_INDENT_STEP + "--help")


def test_indent_level_two():
    line = format_option("CU8", "8-bit unsigned", 2)
    assert line.startswith(" " * (2 * USAGE_INDENT_STEP) + "CU8 ")
    assert line.index("8-bit unsigned") == USAGE_OPT_NAME_COLWIDTH


def test_long_name_gets_single_space():
    name = "--device-settings <key1=val1,key2=val2,...>-extra-long-name"
    line = format_option(name, "descr", 1)
    assert line == " " * USAGE_INDENT_STEP + name + " " + "descr"


def test_zero_indent():
    line = format_option("x", "y", 0)
    assert line.startswith("x")
    assert line.endswith("y")
    assert len(line) == USAGE_OPT_NAME_COLWIDTH + 1


def test_describe_option_writes_line():
    buf = io.StringIO()
    describe_option("--version", "Displays program version number", 1, buf)
    assert buf.getvalue() == format_option("--version", "Displays program version number", 1) + "\n"