import math
import time
import threading

import cv2
import numpy as np

from GestureSignal import GestureSignal
from helpers import ConfigWatcher, load_config
from LandmarkClassifier import LandmarkClassifier
from Network import NetworkBridge
from PhotoLibrary import find_photos, load_photos
from Preview import PreviewRenderer
from Scene import Scene, SceneInitError
from TreeState import TreeState

WINDOW = "Gesture Tree"


# --------------------------------------------------------
# CAPTURE + CLASSIFIER THREAD
# --------------------------------------------------------
def capture_thread(state, stop_event, cfg, inset):
    """
    Producer: camera -> MediaPipe -> classifier -> state.signal.
    Runs at the camera's own cadence. If the camera goes away the thread
    exits and the tick loop keeps running on the last published signal.
    """
    from HandTracker import HandTracker

    camera_cfg = cfg.get("camera", {})
    cap = cv2.VideoCapture(camera_cfg.get("device", 0))
    if not cap.isOpened():
        print("[PY] ERROR: Cannot open camera, continuing without gesture input")
        return
    cap.set(cv2.CAP_PROP_FRAME_WIDTH, camera_cfg.get("frame_width", 640))
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, camera_cfg.get("frame_height", 480))

    tracker = HandTracker(cfg)
    classifier = LandmarkClassifier(cfg)

    print("[PY] Capture thread started.")

    while not stop_event.is_set():
        ok, frame = cap.read()
        if not ok:
            time.sleep(0.01)
            continue

        now = time.time()
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        sample = tracker.process_frame(rgb, now)
        signal, extended = classifier.classify_with_details(sample)
        state.set_hand_position(signal, extended)

        if cfg.get("debug", {}).get("draw_landmarks", True):
            tracker.draw(frame, sample, signal.open)
            inset[0] = cv2.flip(frame, 1)

    tracker.close()
    cap.release()
    print("[PY] Capture thread exiting.")


# --------------------------------------------------------
# DEMO PRODUCER (no camera)
# --------------------------------------------------------
def demo_thread(state, stop_event, period=6.0, rate=30.0):
    """Scripted hand: slow circle, opens for half of every period."""
    start = time.time()
    while not stop_event.is_set():
        t = time.time() - start
        signal = GestureSignal(
            x=0.5 + 0.25 * math.sin(t * 0.5),
            y=0.5 + 0.2 * math.sin(t * 0.3),
            z=0.2 + 0.1 * math.sin(t * 0.2),
            tracked=True,
            open=(t % period) > period / 2.0,
        )
        state.set_hand_position(signal, 4 if signal.open else 0)
        time.sleep(1.0 / rate)


# --------------------------------------------------------
# MANUAL ORBIT (only while no hand is tracked)
# --------------------------------------------------------
def manual_orbit(scene, key, step=0.08):
    if not scene.camera.orbit_controls_enabled:
        return
    pos = scene.camera.live_position.copy()
    pivot = scene.camera.look_at
    rel = pos - pivot
    if key in (ord("a"), ord("d")):
        angle = step if key == ord("a") else -step
        c, s = math.cos(angle), math.sin(angle)
        rel = np.array([c * rel[0] + s * rel[2], rel[1], -s * rel[0] + c * rel[2]])
    elif key in (ord("w"), ord("s")):
        rel = rel * (0.95 if key == ord("w") else 1.05)
    else:
        return
    scene.camera.set_live_position(pivot + rel)


# --------------------------------------------------------
# MAIN ENTRY
# --------------------------------------------------------
def main(config_path="config.json", photo_dir=None, demo=False):
    cfg = load_config(config_path)
    if not cfg:
        print("[PY] WARNING: no config.json or failed to load.")
    cfg_watcher = ConfigWatcher(config_path)

    render_cfg = cfg.get("render", {})
    width = render_cfg.get("window_width", 1280)
    height = render_cfg.get("window_height", 720)
    fps = render_cfg.get("fps", 60)

    try:
        scene = Scene(cfg, viewport=(width, height))
    except SceneInitError as e:
        print("[PY] ERROR: scene initialisation failed:", e)
        return

    state = TreeState()
    photo_dir = photo_dir or cfg.get("photos", {}).get("directory")
    state.add_user_photos(load_photos(find_photos(photo_dir)))
    if state.photos:
        print(f"[PY] Loaded {len(state.photos)} photos.")

    renderer = PreviewRenderer(width, height)
    net_cfg = cfg.get("network", {})
    network = None
    if net_cfg.get("enabled", False):
        network = NetworkBridge(net_cfg.get("host", "127.0.0.1"), net_cfg.get("port", 5556))

    stop_event = threading.Event()
    inset = [None]
    if demo:
        producer = threading.Thread(target=demo_thread, args=(state, stop_event), daemon=True)
    else:
        producer = threading.Thread(
            target=capture_thread, args=(state, stop_event, cfg, inset), daemon=True
        )
    producer.start()

    cv2.namedWindow(WINDOW, cv2.WINDOW_NORMAL)
    cv2.resizeWindow(WINDOW, width, height)

    frame_time = 1.0 / fps
    last = time.perf_counter()
    print("[PY] Tick loop started. ESC to quit, A/D/W/S to orbit while no hand is tracked.")

    try:
        while not stop_event.is_set():
            now = time.perf_counter()
            dt = now - last
            last = now

            new_cfg = cfg_watcher.check_reload()
            if new_cfg and new_cfg != cfg:
                cfg = new_cfg
                scene.update_config(cfg)

            signal = state.signal
            render_state = scene.advance(dt, signal, photos=state.photos)

            if network is not None:
                network.publish(state, render_state)

            status = (
                f"progress {render_state.progress:.2f} | "
                f"{'tracking' if signal.tracked else 'no hand'} | "
                f"{'OPEN' if signal.open else 'closed'}"
            )
            cv2.imshow(WINDOW, renderer.render(render_state, inset=inset[0], status=status))
            key = cv2.waitKey(1) & 0xFF
            if key == 27:
                break
            manual_orbit(scene, key)

            spare = frame_time - (time.perf_counter() - now)
            if spare > 0:
                time.sleep(spare)
    except KeyboardInterrupt:
        pass
    finally:
        stop_event.set()
        producer.join(timeout=1.0)
        if network is not None:
            network.close()
        cv2.destroyAllWindows()

    print("[PY] Shutdown complete.")


if __name__ == "__main__":
    main()
