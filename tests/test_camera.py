import math

import numpy as np
import pytest

from CameraRig import CameraRig
from GestureSignal import GestureSignal

LOST = GestureSignal.untracked()


def tracked(x=0.5, y=0.5, z=0.2, is_open=False):
    return GestureSignal(x=x, y=y, z=z, tracked=True, open=is_open)


def test_starts_at_default_pose():
    pose = CameraRig().pose()
    np.testing.assert_allclose(pose.position, [0.0, 1.5, 18.0])
    np.testing.assert_allclose(pose.target, [0.0, 1.5, 0.0])


def test_orbit_target_mapping():
    rig = CameraRig()
    # centered, hand at top of frame, far away
    np.testing.assert_allclose(rig.orbit_target(tracked(0.5, 0.0, 0.05)), [0.0, 8.0, 35.0])
    # hand very close: distance clamps to the near end
    np.testing.assert_allclose(rig.orbit_target(tracked(0.5, 1.0, 0.9)), [0.0, -2.0, 10.0])

    target = rig.orbit_target(tracked(0.9, 0.5, 0.2))
    azimuth = 0.4 * 2.5
    distance = 22.5
    np.testing.assert_allclose(
        target, [distance * math.sin(azimuth), 3.0, distance * math.cos(azimuth)]
    )


def test_tracked_camera_converges_to_target():
    rig = CameraRig()
    signal = tracked(0.7, 0.3, 0.3)
    goal = rig.orbit_target(signal)
    for _ in range(60):
        rig.update(signal, 1 / 60)
    # about one second of follow at rate 3
    remaining = np.linalg.norm(rig.pose().position - goal)
    start = np.linalg.norm(np.array([0.0, 1.5, 18.0]) - goal)
    assert remaining < 0.06 * start
    for _ in range(600):
        rig.update(signal, 1 / 60)
    np.testing.assert_allclose(rig.pose().position, goal, atol=1e-6)


def test_freezes_when_tracking_is_lost():
    rig = CameraRig()
    for _ in range(30):
        rig.update(tracked(0.8, 0.2, 0.3), 1 / 60)
    frozen = rig.pose().position.copy()

    for _ in range(500):
        pose = rig.update(LOST, 1 / 60)
        np.testing.assert_array_equal(pose.position, frozen)


def test_resume_continues_from_live_position():
    rig = CameraRig()
    for _ in range(30):
        rig.update(tracked(0.8, 0.2, 0.3), 1 / 60)

    # manual orbit moved the camera while no hand was visible
    rig.update(LOST, 1 / 60)
    moved = np.array([5.0, 2.0, 12.0])
    rig.set_live_position(moved)
    rig.update(LOST, 1 / 60)

    pose = rig.update(tracked(0.8, 0.2, 0.3), 1 / 60)
    step = np.linalg.norm(pose.position - moved)
    assert step < 1.0


def test_orbit_controls_disabled_while_tracked():
    rig = CameraRig()
    assert rig.orbit_controls_enabled
    rig.update(tracked(), 1 / 60)
    assert not rig.orbit_controls_enabled
    rig.update(LOST, 1 / 60)
    assert rig.orbit_controls_enabled


def test_huge_dt_does_not_overshoot():
    rig = CameraRig()
    signal = tracked(0.2, 0.7, 0.1)
    pose = rig.update(signal, 5.0)
    np.testing.assert_allclose(pose.position, rig.orbit_target(signal))


def test_config_overrides_ranges():
    rig = CameraRig({"camera": {"distance_range": [50.0, 20.0], "follow_rate": 6.0}})
    target = rig.orbit_target(tracked(0.5, 0.0, 0.05))
    assert target[2] == pytest.approx(50.0)
    assert rig.smoother.rate == 6.0


def test_config_reload_merges_into_camera_section():
    rig = CameraRig({"camera": {"distance_range": [50.0, 20.0]}})
    rig.update_config({"camera": {"follow_rate": 6.0}})
    assert rig.distance_range == (50.0, 20.0)
    assert rig.smoother.rate == 6.0
