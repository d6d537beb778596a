"""
Unified entry point for the gesture tree.

Usage examples:
    python gesture_tree.py --mode full                 # webcam + preview window (default)
    python gesture_tree.py --mode demo                 # scripted hand, no webcam needed
    python gesture_tree.py --mode simple               # ZeroMQ gesture-signal publisher only
    python gesture_tree.py --photos ~/Pictures/xmas    # bind photos to the panels
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
PY_DIR = ROOT / "python"
if str(PY_DIR) not in sys.path:
    sys.path.insert(0, str(PY_DIR))


def run_simple_mode() -> None:
    """Publish the classifier's gesture signal on ZeroMQ, no scene."""
    import json
    import time

    import cv2
    import zmq

    from HandTracker import HandTracker
    from helpers import load_config
    from LandmarkClassifier import LandmarkClassifier

    cfg = load_config(str(PY_DIR / "config.json"))
    tracker = HandTracker(cfg)
    classifier = LandmarkClassifier(cfg)

    context = zmq.Context()
    socket = context.socket(zmq.PUB)
    socket.bind(cfg.get("network", {}).get("zmq_endpoint", "tcp://*:5555"))

    cap = cv2.VideoCapture(0)

    print("[PY] Running simple gesture publisher (ZeroMQ). Press ESC to stop.")

    try:
        while True:
            ok, frame = cap.read()
            if not ok:
                time.sleep(0.01)
                continue

            frame_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
            sample = tracker.process_frame(frame_rgb, time.time())
            signal = classifier.classify(sample)
            socket.send_string(json.dumps(signal.to_dict()))

            tracker.draw(frame, sample, signal.open)
            cv2.imshow("MediaPipe Hands", cv2.flip(frame, 1))
            if cv2.waitKey(1) & 0xFF == 27:
                break
    finally:
        tracker.close()
        cap.release()
        socket.close()
        context.term()
        cv2.destroyAllWindows()


def run_full_mode(photos: str | None, demo: bool) -> None:
    """Delegate to the threaded capture + tick loop (python/main_loop)."""
    from main_loop import main as run_main_loop

    if photos:
        photos = os.path.abspath(os.path.expanduser(photos))
    prev_cwd = os.getcwd()
    os.chdir(str(PY_DIR))
    try:
        run_main_loop(photo_dir=photos, demo=demo)
    finally:
        os.chdir(prev_cwd)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Gesture tree launcher")
    parser.add_argument(
        "--mode",
        choices=("full", "demo", "simple"),
        default="full",
        help="'full' uses the webcam, 'demo' drives the scene with a scripted hand, "
        "'simple' only publishes gesture signals over ZeroMQ.",
    )
    parser.add_argument("--photos", default=None, help="Directory of images for the photo panels.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    if args.mode == "simple":
        run_simple_mode()
    else:
        run_full_mode(args.photos, demo=args.mode == "demo")


if __name__ == "__main__":
    main()
