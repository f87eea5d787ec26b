"""Tests for applying a lookup table to image buffers."""

import numpy as np
import pytest

from value_study.colour_convert import rgb_to_luma
from value_study.levels import resolve_selection
from value_study.mapper import apply_lookup_table, map_luma
from value_study.thresholds import build_lookup_table

from conftest import gradient_rgb, random_rgb


def _table(**kw):
    return build_lookup_table(resolve_selection(**kw))


def test_ramp_maps_to_table_values():
    table = _table(values=[2, 9], keep=True)
    out = apply_lookup_table(gradient_rgb(2), table)
    assert out.shape == (2, 256, 3)
    assert out.dtype == np.uint8
    np.testing.assert_array_equal(out[0, :, 0], table.values)


def test_input_not_modified():
    rgb = random_rgb()
    before = rgb.copy()
    apply_lookup_table(rgb, _table(steps=3))
    np.testing.assert_array_equal(rgb, before)


def test_output_only_uses_table_colours():
    table = _table(values=[1, 4, 8])
    out = apply_lookup_table(random_rgb(), table)
    used = {tuple(c) for c in out.reshape(-1, 3).tolist()}
    allowed = {tuple(c) for c in table.colours.tolist()}
    assert used <= allowed
    assert len(used) <= 3


@pytest.mark.parametrize(
    "kw",
    [
        {"steps": 11},
        {"steps": 5},
        {"steps": 2},
        {"values": [2, 9], "keep": True},
        {"values": [0, 3, 5, 7, 9], "keep": True},
    ],
)
@pytest.mark.parametrize("luma_method", ["srgb", "rec601"])
def test_idempotent_on_greyscale_tables(kw, luma_method):
    table = _table(**kw)
    once = apply_lookup_table(random_rgb(), table, luma_method=luma_method)
    twice = apply_lookup_table(once, table, luma_method=luma_method)
    np.testing.assert_array_equal(once, twice)


def test_single_level_gives_single_colour():
    out = apply_lookup_table(random_rgb(), _table(values=[5], colours=[(12, 34, 56)]))
    assert np.all(out == np.array([12, 34, 56], dtype=np.uint8))


def test_workers_match_single_thread():
    rgb = random_rgb(600, 40, seed=3)
    table = _table(values=[1, 3, 6, 10], colours=[(0, 0, 0), (90, 0, 0), (0, 160, 0), (250, 250, 250)])
    single = apply_lookup_table(rgb, table, workers=1)
    multi = apply_lookup_table(rgb, table, workers=4)
    np.testing.assert_array_equal(single, multi)


def test_rgba_input_returns_rgb():
    rgba = np.zeros((4, 4, 4), dtype=np.uint8)
    out = apply_lookup_table(rgba, _table(steps=4))
    assert out.shape == (4, 4, 3)


def test_rejects_bad_input():
    with pytest.raises(TypeError):
        apply_lookup_table(np.zeros((4, 4), dtype=np.uint8), _table(steps=4))


def test_map_luma_greyscale():
    table = _table(steps=5)
    rgb = random_rgb(16, 16)
    luma = rgb_to_luma(rgb)
    np.testing.assert_array_equal(map_luma(luma, table), apply_lookup_table(rgb, table)[..., 0])
    with pytest.raises(TypeError):
        map_luma(luma.astype(np.int32), table)
