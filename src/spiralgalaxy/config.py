"""
Configuration & Global Constants
================================
This module serves as the central registry for tunable constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (layer opacities, panel ranges,
   camera placement) from being scattered throughout the code.
2. Consistency: The parameter panel, the renderer and the generator all read
   the same limits from here.

Exports:
    PARAMETER_RANGES: Panel limits per GalaxyParameters field.
    BACKGROUND_THRESHOLD: Point count from which generation runs on a worker.
"""
from __future__ import annotations

from typing import NamedTuple


class ParameterRange(NamedTuple):
    minimum: float
    maximum: float
    step: float
    decimals: int = 3


# --- Parameter panel limits ---
PARAMETER_RANGES: dict[str, ParameterRange] = {
    "count": ParameterRange(100, 1_000_000, 100, 0),
    "size": ParameterRange(0.001, 0.1, 0.001),
    "radius": ParameterRange(0.01, 20.0, 0.01),
    "branches": ParameterRange(2, 20, 1, 0),
    "spin": ParameterRange(-5.0, 5.0, 0.001),
    "randomness": ParameterRange(0.0, 2.0, 0.001),
    "randomness_power": ParameterRange(1.0, 10.0, 0.001),
}

# --- Render layers ---
CORE_LAYER_OPACITY: float = 0.9
GLOW_LAYER_OPACITY: float = 0.2
GLOW_SIZE_FACTOR: float = 3.0

# --- Scene ---
BACKGROUND_COLOR: str = "#000011"
CAMERA_POSITION: tuple[float, float, float] = (3.0, 3.0, 3.0)
CAMERA_MIN_DISTANCE: float = 2.0
CAMERA_MAX_DISTANCE: float = 12.0

STAR_FIELD_COUNT: int = 2000
STAR_FIELD_EXTENT: float = 200.0
STAR_FIELD_SIZE: float = 0.5
STAR_FIELD_COLOR: str = "#ffffff"

# --- Animation ---
FRAME_INTERVAL_MS: int = 16
GALAXY_ROTATION_SPEED: float = 0.02
STAR_FIELD_ROTATION_SPEED: float = 0.005
# Seconds between refreshes of the core layer hue tint
TINT_UPDATE_INTERVAL: float = 0.25

# --- Generation ---
BACKGROUND_THRESHOLD: int = 100_000
