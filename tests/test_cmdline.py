import pytest

from wimtools.cmdline import BootOptions, CommandLineError, parse_cmdline


@pytest.mark.parametrize("cmdline", [None, ""])
def test_empty_gives_defaults(cmdline):
    assert parse_cmdline(cmdline) == BootOptions()


def test_flags():
    options = parse_cmdline("wimboot rawbcd rawwim gui")
    assert options.rawbcd and options.rawwim and options.gui
    assert not options.pause
    assert options.index == 0


def test_pause_with_prompt():
    options = parse_cmdline("pause")
    assert options.pause is True
    assert options.pause_quiet is False


def test_pause_quiet():
    options = parse_cmdline("x pause=quiet")
    assert options.pause is True
    assert options.pause_quiet is True


def test_pause_other_value_not_quiet():
    options = parse_cmdline("x pause=loud")
    assert options.pause is True
    assert options.pause_quiet is False


def test_decimal_index():
    assert parse_cmdline("index=3").index == 3


def test_hex_index():
    assert parse_cmdline("index=0x1f").index == 0x1F


def test_octal_index():
    assert parse_cmdline("index=010").index == 0o10


@pytest.mark.parametrize("cmdline", ["index", "x index=", "x index"])
def test_index_needs_value(cmdline):
    with pytest.raises(CommandLineError, match="needs a value"):
        parse_cmdline(cmdline)


@pytest.mark.parametrize("value", ["12abc", "08", "0x", "abc", "+"])
def test_invalid_index(value):
    with pytest.raises(CommandLineError, match="Invalid index"):
        parse_cmdline(f"x index={value}")


def test_unknown_later_argument_rejected():
    with pytest.raises(CommandLineError, match="bogus"):
        parse_cmdline("rawbcd bogus")


def test_unknown_initial_argument_ignored():
    options = parse_cmdline("bogus rawbcd")
    assert options.rawbcd is True


def test_unknown_argument_after_leading_space_rejected():
    with pytest.raises(CommandLineError, match="bogus"):
        parse_cmdline(" bogus")


def test_initrdfile_ignored():
    options = parse_cmdline("rawwim initrdfile=foo")
    assert options.rawwim is True
    assert options.rawbcd is False


def test_other_whitespace_separates():
    options = parse_cmdline("gui\trawbcd\nrawwim")
    assert (options.gui, options.rawbcd, options.rawwim) == (True, True, True)


def test_last_index_wins():
    assert parse_cmdline("x index=1 index=2").index == 2