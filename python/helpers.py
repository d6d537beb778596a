import math
import json
import os
import time

import numpy as np


# ---------- scalar math ----------
def clamp(v, lo, hi):
    return max(lo, min(hi, v))


def clamp01(v):
    return max(0.0, min(1.0, v))


def lerp(a, b, t):
    return a + (b - a) * t


def map_linear(x, a1, a2, b1, b2):
    """Map x from range [a1, a2] to range [b1, b2] (no clamping)."""
    return b1 + (x - a1) * (b2 - b1) / (a2 - a1)


def damp_factor(dt, rate):
    """Per-tick interpolation factor for exponential damping, never above 1."""
    return min(1.0, max(0.0, dt * rate))


def ease_out_cubic(p):
    """Cubic ease-out. Works on floats and numpy arrays."""
    return 1.0 - (1.0 - p) ** 3


# ---------- rotation math ----------
def rotation_x(a):
    c, s = math.cos(a), math.sin(a)
    return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])


def rotation_y(a):
    c, s = math.cos(a), math.sin(a)
    return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])


def rotation_z(a):
    c, s = math.cos(a), math.sin(a)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def matrix_from_euler(x, y, z):
    """Rotation matrix for intrinsic XYZ Euler angles (R = Rx @ Ry @ Rz)."""
    return rotation_x(x) @ rotation_y(y) @ rotation_z(z)


def euler_from_matrix(m):
    """Inverse of matrix_from_euler. Returns (x, y, z) radians."""
    y = math.asin(clamp(m[0, 2], -1.0, 1.0))
    if abs(m[0, 2]) < 0.9999999:
        x = math.atan2(-m[1, 2], m[2, 2])
        z = math.atan2(-m[0, 1], m[0, 0])
    else:
        # gimbal lock: fold all rotation into x
        x = math.atan2(m[2, 1], m[1, 1])
        z = 0.0
    return x, y, z


def normalize(v):
    n = np.linalg.norm(v)
    if n <= 1e-9:
        return v
    return v / n


def look_at_matrix(position, target, up=(0.0, 1.0, 0.0)):
    """
    Rotation whose local +Z axis points from position toward target.
    Columns are the local X, Y, Z axes expressed in the parent frame.
    """
    z_axis = normalize(np.asarray(target, dtype=float) - np.asarray(position, dtype=float))
    if not np.any(z_axis):
        return np.eye(3)
    up = np.asarray(up, dtype=float)
    x_axis = np.cross(up, z_axis)
    if np.linalg.norm(x_axis) <= 1e-9:
        # looking straight up/down, nudge the forward vector
        x_axis = np.cross(up, z_axis + np.array([0.0, 0.0, 1e-4]))
    x_axis = normalize(x_axis)
    y_axis = np.cross(z_axis, x_axis)
    return np.column_stack([x_axis, y_axis, z_axis])


# ---------- config ----------
def merge_config(base, override):
    """Merge override into base one section deep (in place). Returns base."""
    if not override:
        return base
    for k, v in override.items():
        if isinstance(v, dict):
            if not isinstance(base.get(k), dict):
                base[k] = {}
            base[k].update(v)
        else:
            base[k] = v
    return base


def load_config(path="config.json"):
    if not os.path.exists(path):
        print(f"[PY] config '{path}' not found, using defaults.")
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        print("[PY] Failed to load config:", e)
        return {}


class ConfigWatcher:
    """
    Watches a JSON config file and reloads it when the file changes.
    Usage:
        watcher = ConfigWatcher("config.json")
        cfg = watcher.get_config()        # initial load
        # later:
        cfg = watcher.check_reload()      # returns new cfg or same dict
    """

    def __init__(self, path="config.json", min_check_interval=0.5):
        self.path = path
        self._cfg = {}
        self._mtime = 0.0
        self._last_checked = 0.0
        self._min_check_interval = min_check_interval  # seconds between checks
        self._load()

    def _load(self):
        try:
            if not os.path.exists(self.path):
                self._cfg = {}
                self._mtime = 0.0
                return
            m = os.path.getmtime(self.path)
            with open(self.path, "r", encoding="utf-8") as f:
                self._cfg = json.load(f)
            self._mtime = m
        except (OSError, ValueError) as e:
            print("[ConfigWatcher] failed to load config:", e)
            self._cfg = {}

    def get_config(self):
        return self._cfg

    def check_reload(self):
        """
        Call frequently (cheap). Will only stat the file every _min_check_interval seconds.
        Returns current config (reloaded if changed).
        """
        now = time.time()
        if now - self._last_checked < self._min_check_interval:
            return self._cfg
        self._last_checked = now

        try:
            if not os.path.exists(self.path):
                # file missing -> keep existing config
                return self._cfg
            m = os.path.getmtime(self.path)
            if m != self._mtime:
                print("[ConfigWatcher] Detected config change, reloading...")
                self._load()
        except OSError as e:
            print("[ConfigWatcher] check_reload error:", e)

        return self._cfg
