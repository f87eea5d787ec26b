"""Tests for level selection parsing and validation."""

import pytest

from value_study.constants import ALL_LEVELS
from value_study.core_types import EvenSplit, Explicit
from value_study.errors import (
    ColorCountMismatch,
    ConfigurationError,
    ConflictingMode,
    InvalidColor,
    InvalidLevel,
    InvalidStepCount,
)
from value_study.levels import (
    parse_colour_list,
    parse_level_list,
    resolve_selection,
    validate_levels,
)


def test_default_is_all_eleven_levels():
    sel = resolve_selection()
    assert sel.mode == Explicit(ALL_LEVELS, keep=False)
    assert sel.colours is None


def test_explicit_levels():
    sel = resolve_selection(values=[2, 9], keep=True)
    assert sel.mode == Explicit((2, 9), keep=True)


def test_even_split():
    sel = resolve_selection(steps=5)
    assert sel.mode == EvenSplit(5)


def test_single_level_allowed():
    sel = resolve_selection(values=[4])
    assert sel.mode.plateau_count == 1


@pytest.mark.parametrize("values", [[-1, 3], [3, 11], [0, 12]])
def test_out_of_range_level(values):
    with pytest.raises(InvalidLevel):
        resolve_selection(values=values)


@pytest.mark.parametrize("values", [[5, 3], [2, 2, 9], [0, 4, 4]])
def test_not_strictly_ascending(values):
    with pytest.raises(InvalidLevel):
        validate_levels(values)


def test_conflicting_mode():
    with pytest.raises(ConflictingMode):
        resolve_selection(values=[1, 5], steps=4)


@pytest.mark.parametrize("steps", [0, 1, 12])
def test_step_count_range(steps):
    with pytest.raises(InvalidStepCount):
        resolve_selection(steps=steps)


def test_colour_count_must_match_levels():
    with pytest.raises(ColorCountMismatch) as exc:
        resolve_selection(values=[2, 5, 9], colours=[(1, 2, 3), (4, 5, 6)])
    assert exc.value.expected == 3
    assert exc.value.got == 2


def test_colour_count_must_match_steps():
    with pytest.raises(ColorCountMismatch):
        resolve_selection(steps=4, colours=[(0, 0, 0)] * 3)


def test_colours_alone_pick_even_split():
    sel = resolve_selection(colours=[(0, 0, 0), (128, 0, 0), (255, 255, 255)])
    assert sel.mode == EvenSplit(3)
    assert sel.colours == ((0, 0, 0), (128, 0, 0), (255, 255, 255))


def test_keep_without_levels_is_ignored(capsys):
    sel = resolve_selection(steps=4, keep=True)
    assert sel.mode == EvenSplit(4)
    assert "[warn]" in capsys.readouterr().out


def test_errors_are_configuration_errors():
    assert issubclass(InvalidLevel, ConfigurationError)
    assert issubclass(ConflictingMode, ValueError)


def test_parse_level_list():
    assert parse_level_list("0, 3,5 ,7,9") == [0, 3, 5, 7, 9]
    with pytest.raises(InvalidLevel):
        parse_level_list("1,two")


def test_parse_colour_list():
    assert parse_colour_list("ff0000,#00FF00,#00f") == (
        (255, 0, 0),
        (0, 255, 0),
        (0, 0, 255),
    )


@pytest.mark.parametrize("text", ["ff00", "#gg0000", "1234567"])
def test_parse_colour_list_rejects_bad_hex(text):
    with pytest.raises(InvalidColor):
        parse_colour_list(text)


@pytest.mark.parametrize("text", ["", ","])
def test_empty_level_list_is_rejected(text):
    with pytest.raises(InvalidLevel):
        resolve_selection(values=parse_level_list(text))


def test_empty_colour_list_is_rejected():
    with pytest.raises(InvalidColor):
        resolve_selection(colours=parse_colour_list(""))
    with pytest.raises(InvalidColor):
        resolve_selection(values=[2, 9], colours=())


@pytest.mark.parametrize("text", ["#+f0000", "#f f000", "-1ff00", "#0x1234"])
def test_hex_rejects_signs_and_spaces(text):
    with pytest.raises(InvalidColor):
        parse_colour_list(text)
