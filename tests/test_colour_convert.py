"""Tests for RGB -> luma conversion."""

import numpy as np
import pytest
from PIL import Image

from value_study.colour_convert import linear_to_srgb, rgb_to_linear, rgb_to_luma

from conftest import gradient_rgb, random_rgb


@pytest.mark.parametrize("method", ["srgb", "rec601"])
def test_greys_map_to_themselves(method):
    rgb = gradient_rgb(1)
    luma = rgb_to_luma(rgb, method)
    assert luma.dtype == np.uint8
    np.testing.assert_array_equal(luma[0], np.arange(256, dtype=np.uint8))


def test_black_and_white():
    rgb = np.array([[[0, 0, 0], [255, 255, 255]]], dtype=np.uint8)
    np.testing.assert_array_equal(rgb_to_luma(rgb), [[0, 255]])


def test_green_brighter_than_blue():
    rgb = np.array([[[0, 255, 0], [0, 0, 255], [255, 0, 0]]], dtype=np.uint8)
    g, b, r = rgb_to_luma(rgb)[0].tolist()
    assert g > r > b


def test_rec601_matches_pillow():
    rgb = random_rgb(32, 32, seed=7)
    expected = np.array(Image.fromarray(rgb).convert("L"))
    np.testing.assert_array_equal(rgb_to_luma(rgb, "rec601"), expected)


def test_rgba_alpha_ignored():
    rgb = random_rgb(8, 8)
    rgba = np.concatenate([rgb, np.zeros((8, 8, 1), dtype=np.uint8)], axis=-1)
    np.testing.assert_array_equal(rgb_to_luma(rgba), rgb_to_luma(rgb))


def test_transfer_curve_round_trip():
    x = np.linspace(0.0, 1.0, 101)
    np.testing.assert_allclose(linear_to_srgb(rgb_to_linear(x)), x, atol=1e-9)


def test_unknown_method():
    with pytest.raises(ValueError):
        rgb_to_luma(random_rgb(2, 2), "hsv")


def test_rejects_non_uint8():
    with pytest.raises(TypeError):
        rgb_to_luma(np.zeros((2, 2, 3), dtype=np.float32))
