"""
Procedural placement for every particle group.

Each generator returns formed positions (the ordered arrangement), chaos
positions (the scattered cloud) and a per-particle random seed in [0, 1).
Everything is computed once when the scene is built; the arrays are made
read-only afterwards.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import numpy as np

# Phyllotaxis constant: successive particles never share a ray.
GOLDEN_ANGLE = np.pi * (3.0 - np.sqrt(5.0))

TREE_HEIGHT = 7.0
TREE_WIDTH = 3.5

# (box, ribbon) colors as BGR
GIFT_PALETTES: Tuple[Tuple[Tuple[int, int, int], Tuple[int, int, int]], ...] = (
    ((0, 0, 179), (0, 191, 255)),
    ((0, 85, 0), (0, 0, 179)),
    ((240, 240, 240), (0, 0, 179)),
    ((0, 0, 179), (240, 240, 240)),
    ((68, 34, 0), (192, 192, 192)),
    ((0, 191, 255), (240, 240, 240)),
)


def _rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def _empty() -> np.ndarray:
    return np.zeros((0, 3), dtype=float)


@dataclass
class ParticleGroup:
    name: str
    formed: np.ndarray
    chaos: np.ndarray
    seed: np.ndarray
    extras: Dict[str, np.ndarray] = field(default_factory=dict)

    def __post_init__(self):
        n = len(self.formed)
        if self.chaos.shape != (n, 3) or self.seed.shape != (n,):
            raise ValueError(f"group '{self.name}': formed/chaos/seed sizes disagree")
        for arr in (self.formed, self.chaos, self.seed, *self.extras.values()):
            arr.setflags(write=False)

    def __len__(self):
        return len(self.formed)


# ---------- primitive placements ----------
def cone_point(t, theta, height=TREE_HEIGHT, width=TREE_WIDTH):
    """Point on a cone of the given height/base radius. t=0 base, t=1 apex."""
    t = np.asarray(t, dtype=float)
    theta = np.asarray(theta, dtype=float)
    radius = width * (1.0 - t)
    return np.stack(
        [radius * np.cos(theta), height * t - height / 2.0, radius * np.sin(theta)],
        axis=-1,
    )


def cone_shell(n, height=TREE_HEIGHT, width=TREE_WIDTH, angle_step=1.0, jitter=0.0, rng=None):
    """
    Golden-angle spiral on the cone surface. t = 1 - sqrt((i+1)/(n+1))
    packs more particles toward the wide base.
    """
    if n <= 0:
        return _empty()
    i = np.arange(n, dtype=float)
    t = 1.0 - np.sqrt((i + 1.0) / (n + 1.0))
    theta = i * GOLDEN_ANGLE * angle_step
    pos = cone_point(t, theta, height, width)
    if jitter > 0.0:
        pos = pos + (_rng(rng).random((n, 3)) - 0.5) * jitter
    return pos


def cone_interior(n, height=TREE_HEIGHT, width=TREE_WIDTH, fill=1.0, max_t=1.0, rng=None):
    """Uniform fill of the cone volume; sqrt(U) keeps each disk slice uniform."""
    if n <= 0:
        return _empty()
    rng = _rng(rng)
    t = rng.random(n) * max_t
    theta = rng.random(n) * 2.0 * np.pi
    r = np.sqrt(rng.random(n)) * fill * width * (1.0 - t)
    return np.stack(
        [r * np.cos(theta), height * t - height / 2.0, r * np.sin(theta)], axis=-1
    )


def chaos_sphere(n, scale=10.0, min_ratio=0.0, rng=None):
    """
    Volume-uniform points in a spherical shell of outer radius `scale` and
    inner radius `scale * min_ratio`.
    """
    if n <= 0:
        return _empty()
    rng = _rng(rng)
    theta = rng.random(n) * 2.0 * np.pi
    phi = np.arccos(2.0 * rng.random(n) - 1.0)
    min_vol = min_ratio ** 3
    r = np.cbrt(rng.random(n) * (1.0 - min_vol) + min_vol) * scale
    return np.stack(
        [
            r * np.sin(phi) * np.cos(theta),
            r * np.sin(phi) * np.sin(theta),
            r * np.cos(phi),
        ],
        axis=-1,
    )


def random_unit_vectors(n, rng=None):
    v = _rng(rng).normal(size=(n, 3))
    norms = np.linalg.norm(v, axis=1, keepdims=True)
    norms[norms < 1e-12] = 1.0
    return v / norms


def scatter_outward(formed, scatter_range=(8.0, 28.0), rng=None):
    """Push each point along a random direction by a random distance in scatter_range."""
    n = len(formed)
    if n == 0:
        return _empty()
    rng = _rng(rng)
    lo, hi = scatter_range
    dist = lo + rng.random(n) * (hi - lo)
    return formed + random_unit_vectors(n, rng) * dist[:, None]


def gift_pile(n, height=TREE_HEIGHT, width=TREE_WIDTH, rng=None):
    """First half: annulus pile around the trunk base. Second half: inside the lower cone."""
    if n <= 0:
        return _empty()
    rng = _rng(rng)
    n_base = (n + 1) // 2

    angle = rng.random(n_base) * 2.0 * np.pi
    r = rng.random(n_base) * 2.2 + 1.2
    y = -height / 2.0 + rng.random(n_base) * 0.8 - 0.2
    base = np.stack([np.cos(angle) * r, y, np.sin(angle) * r], axis=-1)

    interior = cone_interior(n - n_base, height, width, fill=0.85, max_t=0.75, rng=rng)
    return np.concatenate([base, interior])


def seeds(n, rng=None):
    return _rng(rng).random(max(n, 0))


# ---------- group builders ----------
def foliage_group(n=9000, height=TREE_HEIGHT, width=TREE_WIDTH, jitter=0.05,
                  chaos_scale=25.0, chaos_min=0.5, rng=None):
    rng = _rng(rng)
    formed = cone_shell(n, height, width, jitter=jitter, rng=rng)
    chaos = chaos_sphere(n, chaos_scale, chaos_min, rng)
    return ParticleGroup("foliage", formed, chaos, seeds(n, rng))


def ornament_group(name, n, interior=False, height=TREE_HEIGHT, width=TREE_WIDTH,
                   chaos_scale=20.0, chaos_min=0.3, rng=None):
    rng = _rng(rng)
    ornament_width = width * 0.9
    if interior:
        formed = cone_interior(n, height, ornament_width, fill=0.8, rng=rng)
    else:
        formed = cone_shell(n, height, ornament_width, angle_step=13.0)
    chaos = chaos_sphere(n, chaos_scale, chaos_min, rng)
    extras = {
        "scale": rng.random(max(n, 0)) * 0.5 + 0.5,
        "rotation": rng.random((max(n, 0), 3)) * np.pi,
    }
    return ParticleGroup(name, formed, chaos, seeds(n, rng), extras)


def gift_group(n=140, height=TREE_HEIGHT, width=TREE_WIDTH, chaos_scale=25.0,
               chaos_min=0.2, rng=None):
    rng = _rng(rng)
    n = max(n, 0)
    formed = gift_pile(n, height, width, rng)
    chaos = chaos_sphere(n, chaos_scale, chaos_min, rng)
    rest = np.stack(
        [rng.random(n) * 0.5, rng.random(n) * 2.0 * np.pi, rng.random(n) * 0.5], axis=-1
    ) if n else _empty()
    extras = {
        "scale": rng.random(n) * 0.4 + 0.3,
        "palette": rng.integers(0, len(GIFT_PALETTES), size=n),
        "rest_rotation": rest,
    }
    return ParticleGroup("gifts", formed, chaos, seeds(n, rng), extras)


def photo_group(n=48, height=TREE_HEIGHT, width=TREE_WIDTH, chaos_scale=12.0,
                chaos_min=0.0, rng=None):
    rng = _rng(rng)
    n = max(n, 0)
    formed = cone_shell(n, height, width * 1.1)
    chaos = chaos_sphere(n, chaos_scale, chaos_min, rng)
    # lean (x) and side tilt (z), about +/- 15 degrees
    tilt = (rng.random((n, 2)) - 0.5) * 0.5
    return ParticleGroup("photos", formed, chaos, seeds(n, rng), {"tilt": tilt})


def star_group(height=TREE_HEIGHT, offset=0.3):
    top = np.array([[0.0, height / 2.0 + offset, 0.0]])
    return ParticleGroup("star", top, top.copy(), np.zeros(1))


def text_group(name, text, sampler, size=1.2, density=2500, scatter_range=(8.0, 28.0), rng=None):
    """
    Particles on the surface of rendered text. Blank text or zero density
    gives an empty group.
    """
    rng = _rng(rng)
    if not text or not text.strip() or density <= 0:
        formed = _empty()
    else:
        formed = np.asarray(sampler.sample(text, size, density, rng), dtype=float).reshape(-1, 3)
    chaos = scatter_outward(formed, scatter_range, rng)
    return ParticleGroup(name, formed, chaos, seeds(len(formed), rng))
