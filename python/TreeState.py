from GestureSignal import GestureSignal


# ==========================================
# 2. SHARED STATE (single writer, many readers)
# ==========================================
class TreeState:
    """
    The one piece of state shared between the capture thread and the tick
    loop. The capture thread replaces `signal` wholesale (last writer wins);
    readers take a reference once per tick and get a consistent snapshot.
    """

    def __init__(self):
        self.signal = GestureSignal.untracked()
        self.extended_fingers = 0
        self._photos = []

    def set_hand_position(self, signal, extended_fingers=0):
        self.signal = signal
        self.extended_fingers = extended_fingers

    def add_user_photos(self, photos):
        # new list object so readers holding the old one are unaffected
        self._photos = self._photos + list(photos)

    @property
    def photos(self):
        return self._photos

    def to_dict(self):
        s = self.signal
        return {
            "handPosition": [s.x, s.y, s.z],
            "tracking": s.tracked,
            "gestureOpen": s.open,
            "extendedFingers": self.extended_fingers,
            "photos": [getattr(p, "name", str(i)) for i, p in enumerate(self._photos)],
        }
