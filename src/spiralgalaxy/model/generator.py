"""
Point Field Generator
=====================
Maps the flat index space [0, count) onto a spiral galaxy.

Model, per point i:
    radius       = u0 * R
    spin_angle   = radius * spin
    branch_angle = (i mod branches) / branches * 2*pi
    jitter_k     = u_k ** randomness_power * sign_k (* randomness)
    x = cos(branch_angle + spin_angle) * radius + jitter_x
    y = jitter_y
    z = sin(branch_angle + spin_angle) * radius + jitter_z
    color        = lerp(inside, outside, radius / R)

Arms are assigned by index modulo, not by a random draw, so at low point
densities the arms show a regular striping.

Random stream layout: one (count, 7) block per call. Row i holds
(u0, |jx|, sign x, |jy|, sign y, |jz|, sign z), the same order in which a
per-point loop would consume draws. A sign draw < 0.5 gives +1.
"""
from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

import numpy as np

from spiralgalaxy.model.buffer import GalaxyBuffer
from spiralgalaxy.model.color import blend, radial_fraction
from spiralgalaxy.model.errors import ResourceExhaustionError

if TYPE_CHECKING:
    import numpy.typing as npt

    from spiralgalaxy.model.parameters import GalaxyParameters
    from spiralgalaxy.model.random_source import RandomSource

logger = logging.getLogger(__name__)

DRAWS_PER_POINT = 7


def branch_angles(count: int, branches: int) -> npt.NDArray[np.float64]:
    """Base angle of the arm each index belongs to."""
    return (np.arange(count) % branches) / branches * (2.0 * np.pi)


class PointFieldGenerator:
    """
    Builds GalaxyBuffers from parameter snapshots.

    Args:
        scale_jitter: Multiply the per-axis jitter by ``randomness``. When
            False, jitter is only shaped by ``randomness_power`` and has a
            magnitude of up to 1 regardless of ``randomness``.
    """

    def __init__(self, scale_jitter: bool = True) -> None:
        self.scale_jitter = scale_jitter

    def generate(self, params: GalaxyParameters, rng: RandomSource) -> GalaxyBuffer:
        """
        Generate a new galaxy.

        Raises:
            InvalidParameterError: If ``params`` fails validation. Nothing is
                drawn from ``rng`` in that case.
            ResourceExhaustionError: If the arrays cannot be allocated.
        """
        params.validate()
        n = params.count

        start = time.perf_counter()
        try:
            positions, colors = self._compute(params, rng)
        except MemoryError as e:
            logger.error(f"Allocation failed for {n} points.")
            raise ResourceExhaustionError(n) from e

        buffer = GalaxyBuffer(positions, colors, size=params.size)
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        logger.info(f"Generated galaxy with {n} points in {elapsed_ms:.1f} ms.")
        return buffer

    def _compute(
        self, params: GalaxyParameters, rng: RandomSource
    ) -> tuple[npt.NDArray[np.float32], npt.NDArray[np.float32]]:
        n = params.count
        draws = rng.uniform((n, DRAWS_PER_POINT))

        radius = draws[:, 0] * params.radius
        angle = branch_angles(n, params.branches) + radius * params.spin

        # columns 1/3/5 are magnitudes, 2/4/6 are signs
        jitter = np.power(draws[:, 1::2], params.randomness_power)
        jitter *= np.where(draws[:, 2::2] < 0.5, 1.0, -1.0)
        if self.scale_jitter:
            jitter *= params.randomness

        positions = np.empty((n, 3), dtype=np.float32)
        positions[:, 0] = np.cos(angle) * radius + jitter[:, 0]
        positions[:, 1] = jitter[:, 1]
        positions[:, 2] = np.sin(angle) * radius + jitter[:, 2]

        t = radial_fraction(radius, params.radius)
        colors = np.clip(blend(params.inside_color, params.outside_color, t), 0.0, 1.0).astype(np.float32)

        return positions, colors
