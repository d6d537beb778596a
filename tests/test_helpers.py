import json
import os

import numpy as np
import pytest

from helpers import (
    ConfigWatcher,
    damp_factor,
    euler_from_matrix,
    load_config,
    look_at_matrix,
    map_linear,
    matrix_from_euler,
    merge_config,
)
from SignalSmoother import SignalSmoother


def test_damp_factor_is_clamped():
    assert damp_factor(1 / 60, 3.0) == pytest.approx(0.05)
    assert damp_factor(10.0, 3.0) == 1.0
    assert damp_factor(-1.0, 3.0) == 0.0


def test_map_linear_extrapolates():
    assert map_linear(0.05, 0.05, 0.35, 35.0, 10.0) == pytest.approx(35.0)
    assert map_linear(0.2, 0.05, 0.35, 35.0, 10.0) == pytest.approx(22.5)


@pytest.mark.parametrize("angles", [(0.1, 0.2, 0.3), (-1.0, 0.5, 2.0), (0.0, -1.2, -0.4)])
def test_euler_round_trip(angles):
    m = matrix_from_euler(*angles)
    np.testing.assert_allclose(euler_from_matrix(m), angles, atol=1e-9)


def test_look_at_points_z_at_target():
    m = look_at_matrix([1.0, 2.0, 3.0], [4.0, 2.0, -1.0])
    np.testing.assert_allclose(m[:, 2], [0.6, 0.0, -0.8])
    np.testing.assert_allclose(m.T @ m, np.eye(3), atol=1e-12)
    assert np.linalg.det(m) == pytest.approx(1.0)
    # stays upright
    assert m[1, 1] > 0.0


def test_look_at_straight_up_is_still_a_rotation():
    m = look_at_matrix([0.0, 0.0, 0.0], [0.0, 5.0, 0.0])
    assert np.linalg.det(m) == pytest.approx(1.0, abs=1e-6)
    np.testing.assert_allclose(m[:, 2], [0.0, 1.0, 0.0], atol=1e-3)


def test_smoother_sync_then_resume():
    s = SignalSmoother([0.0, 0.0], rate=2.0)
    s.update([10.0, 10.0], 0.25)
    np.testing.assert_allclose(s.value, [5.0, 5.0])
    s.sync([1.0, -1.0])
    s.update([1.0, -1.0], 0.1)
    np.testing.assert_allclose(s.value, [1.0, -1.0])


# ---------- config ----------
def test_merge_config_is_one_section_deep():
    base = {"camera": {"follow_rate": 3.0, "azimuth_gain": 2.5}, "debug": True}
    merge_config(base, {"camera": {"follow_rate": 6.0}, "debug": False})
    assert base == {"camera": {"follow_rate": 6.0, "azimuth_gain": 2.5}, "debug": False}


def test_load_config_missing_file(tmp_path):
    assert load_config(str(tmp_path / "nope.json")) == {}


def test_load_config_bad_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    assert load_config(str(path)) == {}


def test_config_watcher_reloads_on_change(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"morph": {"rate": 2.0}}))
    watcher = ConfigWatcher(str(path), min_check_interval=0.0)
    assert watcher.get_config() == {"morph": {"rate": 2.0}}

    path.write_text(json.dumps({"morph": {"rate": 4.0}}))
    mtime = os.path.getmtime(path) + 5.0
    os.utime(path, (mtime, mtime))
    assert watcher.check_reload() == {"morph": {"rate": 4.0}}


def test_config_watcher_keeps_config_when_file_disappears(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"a": 1}))
    watcher = ConfigWatcher(str(path), min_check_interval=0.0)
    path.unlink()
    assert watcher.check_reload() == {"a": 1}


def test_merge_config_copies_new_sections():
    base = {}
    override = {"camera": {"follow_rate": 6.0}}
    merge_config(base, override)
    base["camera"]["follow_rate"] = 1.0
    assert override == {"camera": {"follow_rate": 6.0}}
