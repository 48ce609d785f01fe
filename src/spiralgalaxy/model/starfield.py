"""Static background star field, generated once at start-up."""
from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from spiralgalaxy import config

if TYPE_CHECKING:
    import numpy.typing as npt

    from spiralgalaxy.model.random_source import RandomSource


def generate_star_field(
    rng: RandomSource,
    count: int = config.STAR_FIELD_COUNT,
    extent: float = config.STAR_FIELD_EXTENT,
) -> npt.NDArray[np.float32]:
    """
    Uniformly scatter ``count`` points in a cube of side ``extent`` centred
    on the origin.

    Returns:
        (count, 3) float32 array.
    """
    if count < 0:
        raise ValueError(f"Star count must be >= 0, got {count}.")
    return ((rng.uniform((count, 3)) - 0.5) * extent).astype(np.float32)
