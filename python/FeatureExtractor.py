import math
from typing import Dict, Sequence, Tuple

# MediaPipe hand landmark indices
WRIST = 0
MIDDLE_MCP = 9
NUM_LANDMARKS = 21

# finger -> (tip, pip)
FINGER_TIPS: Dict[str, Tuple[int, int]] = {
    "index": (8, 6),
    "middle": (12, 10),
    "ring": (16, 14),
    "pinky": (20, 18),
}

Point = Tuple[float, float, float]


# ==========================================
# 1. MATH & GEOMETRY (Pure Functions)
# ==========================================
def extract_point(entry) -> Point:
    if hasattr(entry, "x") and hasattr(entry, "y"):
        return (float(entry.x), float(entry.y), float(getattr(entry, "z", 0.0)))
    if isinstance(entry, dict):
        return (float(entry.get("x", 0.0)), float(entry.get("y", 0.0)), float(entry.get("z", 0.0)))
    if isinstance(entry, (list, tuple)) and len(entry) >= 2:
        z = float(entry[2]) if len(entry) >= 3 else 0.0
        return (float(entry[0]), float(entry[1]), z)
    raise ValueError("Unsupported landmark format; expected object with x,y,z or sequence of 3 values.")


def planar_dist_sq(a: Point, b: Point) -> float:
    """Squared distance in the image plane (x, y only)."""
    return (a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2


def planar_dist(a: Point, b: Point) -> float:
    return math.sqrt(planar_dist_sq(a, b))


def hand_position(points: Sequence[Point], mirror_x: bool = True) -> Point:
    """
    Control position of a hand: middle-finger base as the anchor, with the
    wrist -> anchor length as a depth proxy (larger = closer to the camera).
    """
    center = points[MIDDLE_MCP]
    wrist = points[WRIST]
    x = 1.0 - center[0] if mirror_x else center[0]
    return (x, center[1], planar_dist(center, wrist))


def extended_fingers(points: Sequence[Point]) -> Dict[str, bool]:
    """A finger counts as extended when its tip is farther from the wrist than its PIP joint."""
    wrist = points[WRIST]
    return {
        name: planar_dist_sq(wrist, points[tip]) > planar_dist_sq(wrist, points[pip])
        for name, (tip, pip) in FINGER_TIPS.items()
    }


def extended_count(points: Sequence[Point]) -> int:
    return sum(1 for v in extended_fingers(points).values() if v)
