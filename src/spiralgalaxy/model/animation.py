"""
Animation
=========
Time-driven presentation state for the frame loop.

Everything here is a pure function of elapsed time (and the base sprite
size). The frame loop reads the result and applies it to render objects;
it never writes back into a GalaxyBuffer.
"""
from __future__ import annotations

import colorsys
import math
import time
from dataclasses import dataclass
from typing import Callable

from spiralgalaxy import config


class AnimationClock:
    """Monotonic elapsed-time source, started on construction."""

    def __init__(self, time_fn: Callable[[], float] = time.perf_counter) -> None:
        self._time_fn = time_fn
        self._start = time_fn()

    def elapsed(self) -> float:
        """Seconds since the clock was created (or last reset)."""
        return max(0.0, self._time_fn() - self._start)

    def reset(self) -> None:
        self._start = self._time_fn()


@dataclass(frozen=True)
class FrameState:
    galaxy_rotation: float  # radians about +Y
    star_field_rotation: float  # radians about +Y
    core_size: float
    glow_size: float
    core_tint: tuple[float, float, float]
    camera_height: float


def core_tint(elapsed: float) -> tuple[float, float, float]:
    """
    Slowly cycling hue multiplied into the core layer colors.
    Saturation 0.7, lightness 0.5.
    """
    hue = (math.sin(elapsed * 0.1) + 1.0) / 2.0
    # colorsys takes (h, l, s)
    return colorsys.hls_to_rgb(hue, 0.5, 0.7)


def frame_state(elapsed: float, size: float) -> FrameState:
    """Compute the animated values for one frame."""
    pulse = math.sin(elapsed * 0.5)
    return FrameState(
        galaxy_rotation=elapsed * config.GALAXY_ROTATION_SPEED,
        star_field_rotation=elapsed * config.STAR_FIELD_ROTATION_SPEED,
        core_size=size + pulse * size * 0.3,
        glow_size=size * config.GLOW_SIZE_FACTOR + pulse * size * 0.9,
        core_tint=core_tint(elapsed),
        camera_height=config.CAMERA_POSITION[1] + math.sin(elapsed * 0.2) * 0.2,
    )
