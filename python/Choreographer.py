"""
Per-frame choreography.

Two mechanisms run side by side:
  * particle clouds (foliage, text) blend formed -> chaos continuously with
    the eased morph progress, plus a breathing motion whose amplitude itself
    depends on the blend;
  * instanced objects (ornaments, gifts, photo panels, star) chase either
    their formed or their chaos pose, switching destination when progress
    crosses 0.5, with their own slower damping.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from CameraRig import CameraPose
from helpers import (
    damp_factor,
    ease_out_cubic,
    euler_from_matrix,
    look_at_matrix,
    rotation_x,
    rotation_y,
    rotation_z,
)
from SignalSmoother import SignalSmoother

SCATTER_THRESHOLD = 0.5
GIFT_SPIN_THRESHOLD = 0.2


@dataclass
class CloudFrame:
    name: str
    positions: np.ndarray
    sizes: np.ndarray
    color: Dict[str, object] = field(default_factory=dict)
    offset: np.ndarray = field(default_factory=lambda: np.zeros(3))
    in_tree: bool = True


@dataclass
class InstanceFrame:
    name: str
    positions: np.ndarray
    rotations: np.ndarray
    scales: np.ndarray
    color: Dict[str, object] = field(default_factory=dict)
    in_tree: bool = True


@dataclass
class RenderState:
    time: float
    progress: float
    camera: CameraPose
    tree_rotation: float
    clouds: Dict[str, CloudFrame]
    instances: Dict[str, InstanceFrame]
    photo_bindings: List[Optional[object]]
    orbit_controls_enabled: bool


def bind_photos(photos, slots):
    """Slot i shows photos[i % len(photos)]; None (placeholder) when there are none."""
    if not photos:
        return [None] * slots
    return [photos[i % len(photos)] for i in range(slots)]


# ==========================================
# Particle clouds
# ==========================================
class CloudAnimator:
    """
    style="foliage": sway along x, float on every axis, size 0.5..2.0.
    style="text": gentle vertical sway, seed jitter once scattered, size 0.8..1.2.
    """

    def __init__(self, group, style="foliage", offset=(0.0, 0.0, 0.0), in_tree=True,
                 uniform_lerp=0.1):
        self.group = group
        self.style = style
        self.offset = np.array(offset, dtype=float)
        self.in_tree = in_tree
        self.uniform_lerp = uniform_lerp
        self.display_progress = 0.0

        seed = group.seed
        if style == "foliage":
            self.sizes = 0.5 + 1.5 * seed
            # 0 at the bottom of the tree, 1 at the top
            self.color = {"ratio": (group.formed[:, 1] + 3.0) / 6.0}
        else:
            self.sizes = 0.8 + 0.4 * seed
            self.color = {"palette": "gold"}

    def step(self, progress, elapsed):
        self.display_progress += (progress - self.display_progress) * self.uniform_lerp
        mix = ease_out_cubic(self.display_progress)
        g = self.group
        pos = g.formed + (g.chaos - g.formed) * mix

        if self.style == "foliage":
            sway = np.sin(elapsed * 1.5 + pos[:, 1] * 2.0) * 0.03 * (1.0 - mix)
            floaty = np.sin(elapsed + g.seed * 20.0) * 0.15 * mix
            pos[:, 0] += sway + floaty
            pos[:, 1] += floaty
            pos[:, 2] += floaty
        else:
            pos[:, 1] += np.sin(elapsed + pos[:, 0]) * 0.02 * (1.0 - mix)
            if mix > 0.01:
                pos += (g.seed[:, None] - 0.5) * mix * 5.0

        return CloudFrame(
            name=g.name,
            positions=pos,
            sizes=self.sizes,
            color=self.color,
            offset=self.offset,
            in_tree=self.in_tree,
        )


# ==========================================
# Instanced objects
# ==========================================
class InstanceAnimator:
    """Threshold-gated position chase shared by every instanced group."""

    def __init__(self, group, rate):
        self.group = group
        self.position = SignalSmoother(group.formed.copy(), rate=rate)

    def destination(self, progress):
        return self.group.chaos if progress > SCATTER_THRESHOLD else self.group.formed

    def chase(self, progress, dt):
        return self.position.update(self.destination(progress), dt)


class OrnamentAnimator(InstanceAnimator):
    def __init__(self, group, scale_base, color, kind="ball", emissive=0.3, rate=3.0):
        super().__init__(group, rate)
        self.scale_base = scale_base
        self.rotation = group.extras["rotation"].copy()
        self.color = {"color": color, "kind": kind, "emissive": emissive}

    def step(self, progress, dt, elapsed, camera_local):
        pos = self.chase(progress, dt)
        self.rotation[:, :2] += dt
        scales = self.scale_base * self.group.extras["scale"] * (1.0 - progress * 0.3)
        return InstanceFrame(self.group.name, pos.copy(), self.rotation.copy(), scales, self.color)


class GiftAnimator(InstanceAnimator):
    def __init__(self, group, rate=2.5, settle_rate=5.0):
        super().__init__(group, rate)
        self.settle_rate = settle_rate
        self.rest = group.extras["rest_rotation"]
        self.rotation = self.rest.copy()
        self.color = {"palette": group.extras["palette"], "kind": "gift"}

    def step(self, progress, dt, elapsed, camera_local):
        pos = self.chase(progress, dt)
        if progress > GIFT_SPIN_THRESHOLD:
            self.rotation[:, :2] += dt * 0.5
        else:
            self.rotation += (self.rest - self.rotation) * damp_factor(dt, self.settle_rate)
        scales = self.group.extras["scale"] * (1.0 + progress * 0.3)
        return InstanceFrame(self.group.name, pos.copy(), self.rotation.copy(), scales, self.color)


class PhotoAnimator(InstanceAnimator):
    """
    Photo panels. Formed: upright, facing away from the trunk.
    Scattered: facing the camera with a small fixed random tilt, shown at
    double size.
    """

    def __init__(self, group, rate=2.0, scale_rate=3.0):
        super().__init__(group, rate)
        self.scale = SignalSmoother(np.ones(len(group)), rate=scale_rate)
        self.color = {"kind": "photo"}

    def orientations(self, positions, scattered, camera_local):
        rot = np.zeros((len(positions), 3))
        if not scattered:
            rot[:, 1] = np.arctan2(positions[:, 0], positions[:, 2])
            return rot
        tilt = self.group.extras["tilt"]
        for i, p in enumerate(positions):
            m = look_at_matrix(p, camera_local) @ rotation_x(tilt[i, 0]) @ rotation_z(tilt[i, 1])
            rot[i] = euler_from_matrix(m)
        return rot

    def step(self, progress, dt, elapsed, camera_local):
        scattered = progress > SCATTER_THRESHOLD
        pos = self.chase(progress, dt)
        scales = self.scale.update(2.0 if scattered else 1.0, dt)
        rot = self.orientations(pos, scattered, camera_local)
        return InstanceFrame(self.group.name, pos.copy(), rot, scales.copy(), self.color)


class StarAnimator(InstanceAnimator):
    def __init__(self, group, rate=3.0):
        super().__init__(group, rate)
        self.rotation = np.zeros((1, 3))
        self.scale = SignalSmoother(np.ones(1), rate=rate)
        self.color = {"color": (170, 221, 255), "kind": "star", "emissive": 2.0}

    def step(self, progress, dt, elapsed, camera_local):
        self.rotation[0, 1] += dt * 0.5
        self.rotation[0, 2] = np.sin(elapsed * 2.0) * 0.05
        scales = self.scale.update(1.0 + progress * 0.5, dt)
        return InstanceFrame(
            self.group.name, self.group.formed.copy(), self.rotation.copy(), scales.copy(), self.color
        )


# ==========================================
# Choreographer
# ==========================================
class Choreographer:
    def __init__(self, clouds, instances, photo_slots=0, tree_spin=0.1):
        self.clouds = list(clouds)
        self.instances = list(instances)
        self.photo_slots = photo_slots
        self.tree_spin = tree_spin
        self.tree_rotation = 0.0

    def step(self, progress, dt, elapsed, camera, photos=(), orbit_controls_enabled=True):
        self.tree_rotation += dt * self.tree_spin

        # camera expressed in the rotating tree's frame
        camera_local = rotation_y(self.tree_rotation).T @ np.asarray(camera.position, dtype=float)

        clouds = {}
        for anim in self.clouds:
            frame = anim.step(progress, elapsed)
            clouds[frame.name] = frame

        instances = {}
        for anim in self.instances:
            frame = anim.step(progress, dt, elapsed, camera_local)
            instances[frame.name] = frame

        return RenderState(
            time=elapsed,
            progress=progress,
            camera=camera,
            tree_rotation=self.tree_rotation,
            clouds=clouds,
            instances=instances,
            photo_bindings=bind_photos(list(photos), self.photo_slots),
            orbit_controls_enabled=orbit_controls_enabled,
        )
