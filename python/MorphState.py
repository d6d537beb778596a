from helpers import clamp01, damp_factor

FORMED = 0.0
SCATTERED = 1.0


class MorphState:
    """
    Morph progress between the formed (0) and scattered (1) arrangements.
    The stored value only ever moves toward its target with clamped
    exponential damping, so it stays inside [0, 1].
    """

    def __init__(self, rate=2.0, progress=FORMED):
        self.rate = rate
        self.progress = clamp01(progress)
        self.target = FORMED

    def set_gesture(self, is_open):
        self.target = SCATTERED if is_open else FORMED

    def update(self, dt):
        self.progress += (self.target - self.progress) * damp_factor(dt, self.rate)
        return self.progress

    def tick(self, is_open, dt):
        self.set_gesture(is_open)
        return self.update(dt)

    @property
    def scattered(self):
        """Which pose threshold-gated objects are heading for."""
        return self.progress > 0.5
