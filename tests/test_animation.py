"""Test time-driven presentation state.

Run:
    pytest tests/test_animation.py -v
"""

import math

import pytest

from spiralgalaxy import config
from spiralgalaxy.model.animation import AnimationClock, core_tint, frame_state


class FakeTime:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


def test_clock_measures_elapsed():
    t = FakeTime()
    clock = AnimationClock(t)
    t.now += 2.5
    assert clock.elapsed() == pytest.approx(2.5)


def test_clock_reset():
    t = FakeTime()
    clock = AnimationClock(t)
    t.now += 4.0
    clock.reset()
    t.now += 1.0
    assert clock.elapsed() == pytest.approx(1.0)


def test_clock_never_negative():
    t = FakeTime()
    clock = AnimationClock(t)
    t.now -= 1.0
    assert clock.elapsed() == 0.0


def test_frame_state_at_start():
    state = frame_state(0.0, size=0.01)
    assert state.galaxy_rotation == 0.0
    assert state.star_field_rotation == 0.0
    assert state.core_size == pytest.approx(0.01)
    assert state.glow_size == pytest.approx(0.03)
    assert state.camera_height == pytest.approx(config.CAMERA_POSITION[1])


def test_rotation_speeds():
    state = frame_state(100.0, size=0.01)
    assert state.galaxy_rotation == pytest.approx(2.0)
    assert state.star_field_rotation == pytest.approx(0.5)


def test_size_pulse_peak():
    # sin(0.5 t) == 1
    state = frame_state(math.pi, size=0.01)
    assert state.core_size == pytest.approx(0.013)
    assert state.glow_size == pytest.approx(0.039)


def test_camera_bob_amplitude():
    # sin(0.2 t) == -1
    state = frame_state(7.5 * math.pi, size=0.01)
    assert state.camera_height == pytest.approx(config.CAMERA_POSITION[1] - 0.2)


def test_tint_channels_in_range():
    for t in (0.0, 3.0, 17.0, 250.0):
        assert all(0.0 <= c <= 1.0 for c in core_tint(t))


def test_tint_at_hue_extreme_is_red():
    r, g, _ = core_tint(5 * math.pi)
    assert r == pytest.approx(0.85)
    assert g == pytest.approx(0.15)
