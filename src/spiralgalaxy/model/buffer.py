"""
Galaxy Buffer
=============
Owns the generated position/color arrays and hands them to the renderer.

Why is this file needed?
------------------------
1. Ownership: Exactly one object owns the (N, 3) arrays. Renderers only get
   read-only views, so nobody can mutate an installed galaxy in place.
2. Lifecycle: ``release()`` drops the arrays and runs release hooks, which is
   where the renderer disposes of its GPU-side objects. It is idempotent.
3. Layers: The core and glow sprite passes are described by lightweight
   RenderLayer descriptors over the SAME buffer, so they can never get out
   of sync with each other.

Classes:
    BlendMode: How a layer is composited.
    RenderLayer: Size/opacity/blend descriptor for one sprite pass.
    GalaxyBuffer: The buffer itself.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Callable, TYPE_CHECKING

import numpy as np

from spiralgalaxy import config

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

ReleaseHook = Callable[["GalaxyBuffer"], None]


class BlendMode(StrEnum):
    NORMAL = "normal"
    ADDITIVE = "additive"


@dataclass(frozen=True)
class RenderLayer:
    """One rendering pass over a GalaxyBuffer."""
    name: str
    size: float
    opacity: float
    blending: BlendMode = BlendMode.ADDITIVE

    @property
    def emissive(self) -> bool:
        """Additive layers are drawn as self-lit splats that brighten where they overlap."""
        return self.blending is BlendMode.ADDITIVE


class GalaxyBuffer:
    """
    Index-aligned positions and colors of one generated galaxy.

    Both arrays are (count, 3) float32 and are frozen (``writeable=False``)
    on construction. float32 inputs are taken over without a copy, so the
    caller must not keep writing to them.
    """

    def __init__(
        self,
        positions: npt.NDArray[np.float32],
        colors: npt.NDArray[np.float32],
        size: float,
    ) -> None:
        positions = np.ascontiguousarray(positions, dtype=np.float32)
        colors = np.ascontiguousarray(colors, dtype=np.float32)

        if positions.ndim != 2 or positions.shape[1] != 3:
            raise ValueError(f"Expected positions of shape (N, 3), got {positions.shape}.")
        if colors.shape != positions.shape:
            raise ValueError(
                f"Positions and colors must be index-aligned, got {positions.shape} and {colors.shape}."
            )

        positions.flags.writeable = False
        colors.flags.writeable = False

        self._positions: npt.NDArray[np.float32] | None = positions
        self._colors: npt.NDArray[np.float32] | None = colors
        self._count = positions.shape[0]
        self._size = float(size)
        self._release_hooks: list[ReleaseHook] = []

    def __repr__(self) -> str:
        state = "released" if self.is_released else "live"
        return f"<GalaxyBuffer count={self._count} size={self._size} {state}>"

    # ------------------------------------------------------------------------------
    # Read-only access
    # ------------------------------------------------------------------------------

    @property
    def count(self) -> int:
        return self._count

    @property
    def size(self) -> float:
        return self._size

    @property
    def is_released(self) -> bool:
        return self._positions is None

    @property
    def positions(self) -> npt.NDArray[np.float32]:
        return self._view(self._positions)

    @property
    def colors(self) -> npt.NDArray[np.float32]:
        return self._view(self._colors)

    def layers(self) -> tuple[RenderLayer, RenderLayer]:
        """The core and glow passes. Both draw this buffer's data."""
        core = RenderLayer(
            name="core",
            size=self._size,
            opacity=config.CORE_LAYER_OPACITY,
        )
        glow = RenderLayer(
            name="glow",
            size=self._size * config.GLOW_SIZE_FACTOR,
            opacity=config.GLOW_LAYER_OPACITY,
        )
        return core, glow

    # ------------------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------------------

    def add_release_hook(self, hook: ReleaseHook) -> None:
        """
        Register a callback run once when the buffer is released.

        Renderers use this to dispose of GPU objects built from the buffer.
        Registering on an already released buffer runs the hook immediately.
        """
        if self.is_released:
            hook(self)
            return
        self._release_hooks.append(hook)

    def release(self) -> None:
        """Drop the arrays and run release hooks. Safe to call repeatedly."""
        if self.is_released:
            return

        hooks, self._release_hooks = self._release_hooks, []
        self._positions = None
        self._colors = None
        logger.debug(f"Released galaxy buffer with {self._count} points.")

        for hook in hooks:
            hook(self)

    @staticmethod
    def _view(arr: npt.NDArray[np.float32] | None) -> npt.NDArray[np.float32]:
        if arr is None:
            raise RuntimeError("Galaxy buffer has been released.")
        view = arr.view()
        view.flags.writeable = False
        return view


def release_buffer(buffer: GalaxyBuffer | None) -> None:
    """Release ``buffer`` if there is one. ``None`` is a no-op."""
    if buffer is not None:
        buffer.release()
