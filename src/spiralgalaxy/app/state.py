from __future__ import annotations

import logging

from PySide6.QtCore import QObject, Signal, Slot

from spiralgalaxy import config
from spiralgalaxy.controller.regeneration import GalaxyContext, GenerationState, RegenerationController
from spiralgalaxy.controller.workers import GenerationWorker
from spiralgalaxy.model.buffer import GalaxyBuffer
from spiralgalaxy.model.errors import GalaxyError
from spiralgalaxy.model.parameters import GalaxyParameters

logger = logging.getLogger(__name__)


class Store(QObject):
    """Central state store with signals for panel/preview sync."""
    buffer_changed = Signal(object)
    parameters_changed = Signal(object)
    generation_started = Signal(int)
    generation_failed = Signal(str)

    def __init__(
        self,
        context: GalaxyContext | None = None,
        background_threshold: int = config.BACKGROUND_THRESHOLD,
    ) -> None:
        super().__init__()
        self.controller = RegenerationController(context)
        self.controller.add_install_listener(self._on_installed)
        self.background_threshold = background_threshold
        self._workers: dict[int, GenerationWorker] = {}

    @property
    def context(self) -> GalaxyContext:
        return self.controller.context

    def parameters(self) -> GalaxyParameters:
        """Parameters of the installed galaxy."""
        return self.context.parameters

    def latest_parameters(self) -> GalaxyParameters:
        """Parameters of the newest request; newer than ``parameters()`` while generating."""
        return self.controller.latest_parameters()

    def current_buffer(self) -> GalaxyBuffer | None:
        return self.controller.current_buffer()

    def is_generating(self) -> bool:
        return self.controller.state == GenerationState.GENERATING

    def commit_parameters(self, params: GalaxyParameters) -> bool:
        """
        Regenerate the galaxy for ``params``.

        Small galaxies are generated synchronously, large ones on a worker
        thread. Errors are reported through ``generation_failed``; the
        previous galaxy stays installed.

        Returns:
            False if the request was rejected or failed synchronously.
        """
        if params.count < self.background_threshold:
            self.generation_started.emit(params.count)
            try:
                self.controller.commit(params)
            except GalaxyError as e:
                self.generation_failed.emit(str(e))
                return False
            return True

        try:
            ticket = self.controller.request(params)
        except GalaxyError as e:
            self.generation_failed.emit(str(e))
            return False

        self.generation_started.emit(params.count)
        worker = GenerationWorker(ticket, params, self.context.generator, self.context.rng.spawn())
        worker.generated.connect(self._on_worker_generated)
        worker.error_occurred.connect(self._on_worker_failed)
        worker.finished.connect(self._on_worker_finished)
        self._workers[ticket] = worker
        worker.start()
        return True

    def wait_for_workers(self) -> None:
        """
        Block until every running worker has finished.

        Their results are queued to this object's thread and delivered by
        the next event processing, not by this call.
        """
        for worker in list(self._workers.values()):
            worker.wait()

    def shutdown(self) -> None:
        """Wait for running workers and release the installed galaxy."""
        self.wait_for_workers()
        self._workers.clear()
        self.controller.close()

    @Slot(int, object)
    def _on_worker_generated(self, ticket: int, buffer: GalaxyBuffer) -> None:
        self.controller.install(ticket, buffer)

    @Slot(int, str)
    def _on_worker_failed(self, ticket: int, message: str) -> None:
        if self.controller.fail(ticket, RuntimeError(message)):
            self.generation_failed.emit(message)

    @Slot()
    def _on_worker_finished(self) -> None:
        worker = self.sender()
        if isinstance(worker, GenerationWorker):
            self._workers.pop(worker.ticket, None)
            worker.deleteLater()

    def _on_installed(self, buffer: GalaxyBuffer, params: GalaxyParameters) -> None:
        self.parameters_changed.emit(params)
        self.buffer_changed.emit(buffer)
