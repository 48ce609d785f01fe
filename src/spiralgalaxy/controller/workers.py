"""
Background Workers (Threading)
==============================
This module contains QThread subclasses for handling long-running tasks.

Why is this file needed?
------------------------
1. Responsiveness: Generating a million points on the main thread stalls the
   frame loop. This class pushes the generation to a background thread.
2. Ownership: The worker owns its parameters, its random stream and the
   buffer it builds until it hands the buffer over via a signal. Nothing it
   touches is shared with the render thread while it runs.

Classes:
    GenerationWorker: Runs PointFieldGenerator for one ticket.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from PySide6.QtCore import QThread, Signal

if TYPE_CHECKING:
    from spiralgalaxy.model.generator import PointFieldGenerator
    from spiralgalaxy.model.parameters import GalaxyParameters
    from spiralgalaxy.model.random_source import RandomSource

logger = logging.getLogger(__name__)


class GenerationWorker(QThread):
    # Signals to hand results to the main thread
    generated = Signal(int, object)  # (ticket, GalaxyBuffer)
    error_occurred = Signal(int, str)  # (ticket, message)

    def __init__(
        self,
        ticket: int,
        params: GalaxyParameters,
        generator: PointFieldGenerator,
        rng: RandomSource,
    ) -> None:
        super().__init__()
        self.ticket = ticket
        self.params = params
        self.generator = generator
        self.rng = rng

    def run(self) -> None:
        try:
            logger.info(f"Generating {self.params.count} points in background (ticket {self.ticket})...")
            buffer = self.generator.generate(self.params, self.rng)
            self.generated.emit(self.ticket, buffer)
        except Exception as e:
            logger.error(f"Error in GenerationWorker: {e}")
            self.error_occurred.emit(self.ticket, str(e))
