import numpy as np
import pytest

FINGERS = ("thumb", "index", "middle", "ring", "pinky")
FINGER_BASE = {"thumb": 1, "index": 5, "middle": 9, "ring": 13, "pinky": 17}
FINGER_X = {"thumb": -0.12, "index": -0.06, "middle": 0.0, "ring": 0.05, "pinky": 0.1}


def make_hand(extended=("index", "middle", "ring", "pinky"), wrist=(0.5, 0.8), scale=1.0):
    """
    Upright synthetic hand, 21 landmarks as dicts. Extended fingers keep
    going up past the PIP joint; curled fingers fold back toward the wrist.
    """
    wx, wy = wrist
    points = [None] * 21
    points[0] = {"x": wx, "y": wy, "z": 0.0}
    for name in FINGERS:
        b = FINGER_BASE[name]
        x = wx + FINGER_X[name] * scale
        if name in extended:
            ys = (0.2, 0.3, 0.36, 0.42)
        else:
            ys = (0.2, 0.3, 0.26, 0.2)
        for j, dy in enumerate(ys):
            points[b + j] = {"x": x, "y": wy - dy * scale, "z": -0.01 * j}
    return points


class StubTextSampler:
    """Places `count` points on a flat 1 x size rectangle."""

    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def sample(self, text, size, count, rng=None):
        if self.fail:
            raise ValueError("font unavailable")
        self.calls.append((text, size, count))
        rng = rng if rng is not None else np.random.default_rng(0)
        pts = rng.random((count, 3)) - 0.5
        pts[:, 1] *= size
        pts[:, 2] = 0.0
        return pts


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def small_cfg():
    return {
        "scene": {
            "seed": 7,
            "layout": "wide",
            "foliage": {"count": 300, "jitter": 0.05},
            "gifts": {"count": 10},
            "photos": {"count": 6},
            "ornaments": [
                ["gold", 5, [0, 204, 255], "ball", 0.15, 0.5],
                ["deer", 3, [55, 175, 212], "cone", 0.3, 0.2],
            ],
            "text": {
                "scatter_range": [8.0, 28.0],
                "wide": [{"text": "HI", "position": [-6.5, 0.0, 0.0], "size": 1.2, "density": 50}],
                "compact": [{"text": "HI", "position": [0.0, 5.8, 0.0], "size": 0.6, "density": 20}],
            },
        },
        "morph": {"rate": 2.0},
    }
