from FeatureExtractor import NUM_LANDMARKS, extract_point


class HandSample:
    """
    One frame of hand landmarks for a single hand.
    Landmarks are normalized (x, y in 0..1 image space, z relative depth).
    """

    def __init__(self, landmarks, handedness="Unknown", timestamp=0.0, raw_landmarks=None):
        # list of (x, y, z) tuples
        self.points = [extract_point(lm) for lm in landmarks]

        # "Left" / "Right"
        self.handedness = handedness

        # absolute time (seconds)
        self.timestamp = timestamp

        # raw mediapipe landmark object (for drawing)
        self.raw_landmarks = raw_landmarks

    @property
    def complete(self):
        return len(self.points) >= NUM_LANDMARKS
