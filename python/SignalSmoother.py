import numpy as np

from helpers import damp_factor


class SignalSmoother:
    """
    Exponential low-pass filter over a vector (or a batch of vectors).

        S_t = S_{t-1} + (target - S_{t-1}) * min(1, dt * rate)

    Keeps the last output as the "last known" value; sync() snaps it to a
    live value so a later update continues from there without a jump.
    """

    def __init__(self, initial, rate=3.0):
        self.value = np.array(initial, dtype=float)
        self.rate = rate

    def update(self, target, dt):
        alpha = damp_factor(dt, self.rate)
        self.value += (np.asarray(target, dtype=float) - self.value) * alpha
        return self.value

    def sync(self, live):
        self.value[...] = live
        return self.value
