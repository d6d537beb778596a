import math
from dataclasses import dataclass, field

import numpy as np

from helpers import clamp, lerp, map_linear, merge_config
from SignalSmoother import SignalSmoother

DEFAULT_POSITION = (0.0, 1.5, 18.0)
DEFAULT_LOOK_AT = (0.0, 1.5, 0.0)


@dataclass
class CameraPose:
    position: np.ndarray = field(default_factory=lambda: np.array(DEFAULT_POSITION))
    target: np.ndarray = field(default_factory=lambda: np.array(DEFAULT_LOOK_AT))

    def to_dict(self):
        return {"position": self.position.tolist(), "target": self.target.tolist()}


class CameraRig:
    """
    Orbits the camera around the scene from the gesture signal.

    Hand x -> azimuth, hand y -> elevation, hand size -> distance. While a
    hand is tracked the camera eases toward the orbit target; when tracking
    is lost it stays exactly where it is (the live camera position).
    """

    def __init__(self, cfg=None):
        self.cfg = {"camera": {}}
        self.update_config(cfg)

        self.smoother = SignalSmoother(self.default_position, rate=self.follow_rate)
        self.target_pos = np.array(self.default_position, dtype=float)
        # the pose the renderer actually shows; manual controls may move it
        self.live_position = np.array(self.default_position, dtype=float)
        self.tracking = False

    def update_config(self, cfg):
        merge_config(self.cfg, cfg)

        c = self.cfg.get("camera", {})
        self.default_position = tuple(c.get("default_position", DEFAULT_POSITION))
        self.look_at = np.array(c.get("look_at", DEFAULT_LOOK_AT), dtype=float)
        self.azimuth_gain = c.get("azimuth_gain", 2.5)
        self.elevation_range = tuple(c.get("elevation_range", (8.0, -2.0)))
        self.depth_range = tuple(c.get("depth_range", (0.05, 0.35)))
        self.distance_range = tuple(c.get("distance_range", (35.0, 10.0)))
        self.follow_rate = c.get("follow_rate", 3.0)
        if hasattr(self, "smoother"):
            self.smoother.rate = self.follow_rate

    @property
    def orbit_controls_enabled(self):
        return not self.tracking

    def orbit_target(self, signal):
        """Cartesian camera position for a tracked signal."""
        azimuth = (signal.x - 0.5) * self.azimuth_gain
        elevation = lerp(self.elevation_range[0], self.elevation_range[1], signal.y)
        z_lo, z_hi = self.depth_range
        z_in = clamp(signal.z, z_lo, z_hi)
        distance = map_linear(z_in, z_lo, z_hi, self.distance_range[0], self.distance_range[1])
        return np.array(
            [distance * math.sin(azimuth), elevation, distance * math.cos(azimuth)]
        )

    def set_live_position(self, position):
        """Report a camera move made outside the rig (manual orbit controls)."""
        self.live_position = np.array(position, dtype=float)

    def update(self, signal, dt):
        self.tracking = signal.tracked
        if signal.tracked:
            self.target_pos = self.orbit_target(signal)
            self.live_position = self.smoother.update(self.target_pos, dt).copy()
        else:
            self.smoother.sync(self.live_position)
        return self.pose()

    def pose(self):
        return CameraPose(position=self.live_position.copy(), target=self.look_at.copy())
