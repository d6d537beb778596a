import mediapipe as mp
from HandData import HandSample


class HandTracker:
    def __init__(
        self,
        cfg,
    ):
        self.mp_drawing = mp.solutions.drawing_utils
        self.cfg = cfg
        tcfg = cfg.get("tracker", {})

        self.mp_hands = mp.solutions.hands.Hands(
            model_complexity=tcfg.get("model_complexity", 1),
            min_detection_confidence=tcfg.get("min_detection_confidence", 0.5),
            min_tracking_confidence=tcfg.get("min_tracking_confidence", 0.5),
            max_num_hands=1,
        )

    def process_frame(self, frame_rgb, timestamp):
        """
        Process an RGB frame (caller does the BGR->RGB conversion).
        Returns a HandSample for the first detected hand, or None.
        timestamp: absolute time (seconds) for this frame.
        """
        result = self.mp_hands.process(frame_rgb)

        if not result.multi_hand_landmarks:
            return None

        lm = result.multi_hand_landmarks[0]
        handedness = "Unknown"
        if result.multi_handedness:
            handedness = result.multi_handedness[0].classification[0].label

        return HandSample(
            lm.landmark,
            handedness=handedness,
            timestamp=timestamp,
            raw_landmarks=lm,
        )

    def draw(self, frame, sample, is_open=False):
        """Draw the tracked hand skeleton; cyan when open, magenta when closed."""
        if sample is None or sample.raw_landmarks is None:
            return
        color = (255, 255, 0) if is_open else (255, 0, 255)
        self.mp_drawing.draw_landmarks(
            frame,
            sample.raw_landmarks,
            mp.solutions.hands.HAND_CONNECTIONS,
            self.mp_drawing.DrawingSpec(color=(255, 255, 255), thickness=1, circle_radius=2),
            self.mp_drawing.DrawingSpec(color=color, thickness=2),
        )

    def close(self):
        self.mp_hands.close()
