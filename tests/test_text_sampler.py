import numpy as np
import pytest

from TextSampler import RasterTextSampler


@pytest.fixture
def sampler():
    return RasterTextSampler(pixels_per_unit=48)


def test_samples_requested_count(sampler, rng):
    pts = sampler.sample("MERRY", 1.2, 2000, rng)
    assert pts.shape == (2000, 3)


def test_geometry_is_centered(sampler, rng):
    pts = sampler.sample("CHRISTMAS", 1.2, 4000, rng)
    for axis in (0, 1):
        mid = (pts[:, axis].min() + pts[:, axis].max()) / 2.0
        assert abs(mid) < 0.1


@pytest.mark.parametrize("size", [1.2, 0.6])
def test_cap_height_matches_size(sampler, rng, size):
    pts = sampler.sample("MERRY", size, 4000, rng)
    height = np.ptp(pts[:, 1])
    # measured from the ink, not from getTextSize
    assert height == pytest.approx(size, rel=0.03)
    # wider than tall for a five-letter word
    assert pts[:, 0].max() - pts[:, 0].min() > height


def test_points_lie_within_the_slab(sampler, rng):
    pts = sampler.sample("MERRY", 1.2, 3000, rng)
    half = sampler.depth / 2.0
    assert np.all(np.abs(pts[:, 2]) <= half + 1e-9)
    # both faces are populated
    assert np.any(np.isclose(pts[:, 2], half))
    assert np.any(np.isclose(pts[:, 2], -half))


def test_points_fall_on_ink(sampler, rng):
    size = 1.2
    mask = sampler.rasterize("HI", size)
    ys, xs = np.nonzero(mask)
    cx = (xs.min() + xs.max()) / 2.0
    cy = (ys.min() + ys.max()) / 2.0
    unit = size / sampler.ink_height(mask)
    pts = sampler.sample("HI", size, 500, rng)
    px = np.clip(np.round(pts[:, 0] / unit + cx).astype(int), 0, mask.shape[1] - 1)
    py = np.clip(np.round(-pts[:, 1] / unit + cy).astype(int), 0, mask.shape[0] - 1)
    # sub-pixel jitter may land a point just off the stroke edge
    assert np.mean(mask[py, px] > 0) > 0.8


@pytest.mark.parametrize("text, count, size", [("", 100, 1.0), ("   ", 100, 1.0), ("MERRY", 0, 1.0), ("MERRY", 10, 0.0)])
def test_degenerate_inputs_give_no_points(sampler, rng, text, count, size):
    assert sampler.sample(text, size, count, rng).shape == (0, 3)


def test_same_seed_same_points(sampler):
    a = sampler.sample("MERRY", 1.0, 300, np.random.default_rng(5))
    b = sampler.sample("MERRY", 1.0, 300, np.random.default_rng(5))
    np.testing.assert_array_equal(a, b)
