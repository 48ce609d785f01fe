from __future__ import annotations

import logging
import math
from typing import Callable, TYPE_CHECKING

import numpy as np
import pyvista as pv
from PySide6.QtCore import QTimer
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import QWidget, QVBoxLayout
from pyvistaqt import QtInteractor

from spiralgalaxy import config
from spiralgalaxy.model.animation import AnimationClock, FrameState, frame_state
from spiralgalaxy.model.buffer import GalaxyBuffer, RenderLayer

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)

BufferSource = Callable[[], "GalaxyBuffer | None"]

# -------------------------------------------------------------------------------
# Preview widget
# -------------------------------------------------------------------------------

class GalaxyPreview(QWidget):
    """
    PyVista/Qt renderer for the galaxy with:
      - core + glow sprite layers sharing one point set (additive splats),
      - a static background star field,
      - a frame loop that pulls the current buffer once per frame,
      - slow rotation, size pulsing and hue cycling driven by an animation clock.
    """
    def __init__(
        self,
        buffer_source: BufferSource,
        star_field: npt.NDArray[np.float32] | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent=parent)

        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        self.setLayout(layout)

        self.plotter: QtInteractor | None = None
        self._init_plotter()
        layout.addWidget(self.plotter.interactor)

        self._buffer_source = buffer_source
        self._clock = AnimationClock()

        # actors state
        self._drawn: GalaxyBuffer | None = None
        self._core_actor: pv.Actor | None = None
        self._glow_actor: pv.Actor | None = None
        self._core_data: pv.PolyData | None = None
        self._base_colors: npt.NDArray[np.float32] | None = None
        self._star_actor: pv.Actor | None = None

        # animation cache
        self._last_camera_height: float = config.CAMERA_POSITION[1]
        self._last_tint_update: float = -math.inf

        if star_field is not None:
            self._add_star_field(star_field)

        # frame loop
        self._frame_timer = QTimer(self)
        self._frame_timer.setInterval(config.FRAME_INTERVAL_MS)
        self._frame_timer.timeout.connect(self._tick)
        self._frame_timer.start()

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def drawn_buffer(self) -> GalaxyBuffer | None:
        """The buffer the galaxy actors were built from, if any."""
        return self._drawn

    def stop(self) -> None:
        """Stop the frame loop and dispose of all actors."""
        self._frame_timer.stop()
        self._clear_galaxy_layer()
        if self.plotter is not None:
            self.plotter.close()

    def closeEvent(self, event: QCloseEvent) -> None:
        self.stop()
        super().closeEvent(event)

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    # ---- plotter ----

    def _init_plotter(self) -> None:
        """Lazy initialization of the plotter."""
        if self.plotter is not None:
            return
        self.plotter = QtInteractor(self)
        self.plotter.set_background(config.BACKGROUND_COLOR)
        self.plotter.camera_position = [config.CAMERA_POSITION, (0.0, 0.0, 0.0), (0.0, 1.0, 0.0)]

    # ---- frame loop ----

    def _tick(self) -> None:
        buffer = self._buffer_source()
        if buffer is not self._drawn:
            self._show_buffer(buffer)

        size = self._drawn.size if self._drawn is not None else 0.0
        elapsed = self._clock.elapsed()
        self._apply_frame_state(frame_state(elapsed, size), elapsed)
        self.plotter.render()

    def _apply_frame_state(self, state: FrameState, elapsed: float) -> None:
        galaxy_deg = math.degrees(state.galaxy_rotation)
        for actor, size in ((self._core_actor, state.core_size), (self._glow_actor, state.glow_size)):
            if actor is None:
                continue
            actor.orientation = (0.0, galaxy_deg, 0.0)
            actor.mapper.scale_factor = size

        if self._star_actor is not None:
            self._star_actor.orientation = (0.0, math.degrees(state.star_field_rotation), 0.0)

        if self._core_data is not None and elapsed - self._last_tint_update >= config.TINT_UPDATE_INTERVAL:
            tint = np.asarray(state.core_tint, dtype=np.float32)
            self._core_data.point_data["display"] = self._base_colors * tint
            self._last_tint_update = elapsed

        self._bob_camera(state.camera_height)

    def _bob_camera(self, height: float) -> None:
        """Shift the camera vertically by the change in bob height, keeping user orbits."""
        camera = self.plotter.camera
        x, y, z = camera.position
        y += height - self._last_camera_height
        self._last_camera_height = height

        # keep the orbit distance within limits
        fx, fy, fz = camera.focal_point
        offset = np.array([x - fx, y - fy, z - fz])
        distance = float(np.linalg.norm(offset))
        if distance > 0.0:
            clamped = min(max(distance, config.CAMERA_MIN_DISTANCE), config.CAMERA_MAX_DISTANCE)
            offset *= clamped / distance
        camera.position = tuple(np.array([fx, fy, fz]) + offset)

    # ---- galaxy layer ----

    def _show_buffer(self, buffer: GalaxyBuffer | None) -> None:
        self._clear_galaxy_layer()
        self._drawn = buffer
        if buffer is None or buffer.is_released:
            return

        logger.debug(f"Building galaxy actors for {buffer.count} points.")
        galaxy = pv.PolyData(np.array(buffer.positions))
        galaxy.point_data["colors"] = np.array(buffer.colors)

        # The core layer gets its own tinted color array; points are shared.
        core = galaxy.copy(deep=False)
        self._base_colors = np.array(buffer.colors)
        core.point_data["display"] = self._base_colors

        core_layer, glow_layer = buffer.layers()
        self._glow_actor = self._add_layer(galaxy, "colors", glow_layer)
        self._core_actor = self._add_layer(core, "display", core_layer)
        self._core_data = core
        self._last_tint_update = -math.inf

        buffer.add_release_hook(self._on_buffer_released)

    def _add_layer(self, data: pv.PolyData, scalars: str, layer: RenderLayer) -> pv.Actor:
        actor = self.plotter.add_mesh(
            data,
            scalars=scalars,
            rgb=True,
            style="points_gaussian",
            emissive=layer.emissive,
            render_points_as_spheres=False,
            opacity=layer.opacity,
            show_scalar_bar=False,
            pickable=False,
            reset_camera=False,
            name=f"galaxy-{layer.name}",
        )
        actor.mapper.scale_factor = layer.size
        return actor

    def _on_buffer_released(self, buffer: GalaxyBuffer) -> None:
        if buffer is self._drawn:
            self._clear_galaxy_layer()
            self._drawn = None

    def _clear_galaxy_layer(self) -> None:
        """Dispose of the GPU-side objects built from the drawn buffer."""
        for actor in (self._core_actor, self._glow_actor):
            if actor is not None:
                self.plotter.remove_actor(actor, render=False)
        self._core_actor = None
        self._glow_actor = None
        self._core_data = None
        self._base_colors = None

    # ---- star field ----

    def _add_star_field(self, points: npt.NDArray[np.float32]) -> None:
        if len(points) == 0:
            return
        self._star_actor = self.plotter.add_mesh(
            pv.PolyData(np.asarray(points, dtype=np.float32)),
            color=config.STAR_FIELD_COLOR,
            style="points_gaussian",
            emissive=True,
            render_points_as_spheres=False,
            pickable=False,
            reset_camera=False,
            name="star-field",
        )
        self._star_actor.mapper.scale_factor = config.STAR_FIELD_SIZE
