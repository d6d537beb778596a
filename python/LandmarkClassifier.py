# LandmarkClassifier.py
from FeatureExtractor import extended_count, hand_position
from GestureSignal import GestureSignal
from helpers import merge_config


class LandmarkClassifier:
    """
    Turns one HandSample (or None) into a GestureSignal.
    Always returns a signal; a missing or incomplete hand is reported as
    tracked=False rather than skipped.
    """

    def __init__(self, cfg=None):
        self.cfg = {
            "classifier": {
                "mirror_x": True,
                "open_finger_threshold": 3,
            },
        }
        self.last_extended = 0
        self.update_config(cfg)

    def update_config(self, cfg):
        merge_config(self.cfg, cfg)

        c = self.cfg.get("classifier", {})
        self.mirror_x = bool(c.get("mirror_x", True))
        self.open_finger_threshold = int(c.get("open_finger_threshold", 3))

    def is_hand_open(self, points):
        """Pure function of landmark distances: 3 of 4 fingers extended = open."""
        return extended_count(points) >= self.open_finger_threshold

    def classify_with_details(self, sample):
        """Returns (GestureSignal, extended finger count)."""
        if sample is None or not sample.complete:
            return GestureSignal.untracked(), 0

        points = sample.points
        x, y, z = hand_position(points, mirror_x=self.mirror_x)
        count = extended_count(points)
        signal = GestureSignal(
            x=x,
            y=y,
            z=z,
            tracked=True,
            open=count >= self.open_finger_threshold,
        )
        return signal, count

    def classify(self, sample):
        signal, self.last_extended = self.classify_with_details(sample)
        return signal
