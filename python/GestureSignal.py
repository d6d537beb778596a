from dataclasses import dataclass

NEUTRAL = 0.5


@dataclass(frozen=True)
class GestureSignal:
    """
    Per-cycle classifier output. When tracked is False the position is the
    neutral (0.5, 0.5, 0.5) and open is False.
    """

    x: float = NEUTRAL
    y: float = NEUTRAL
    z: float = NEUTRAL
    tracked: bool = False
    open: bool = False

    @classmethod
    def untracked(cls):
        return cls()

    @property
    def position(self):
        return (self.x, self.y, self.z)

    def to_dict(self):
        return {
            "x": self.x,
            "y": self.y,
            "z": self.z,
            "tracked": self.tracked,
            "open": self.open,
        }
