from __future__ import annotations

import logging
from datetime import datetime

from PySide6.QtCore import Qt, QObject, Signal, Slot
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QMainWindow, QSplitter, QDockWidget, QPlainTextEdit, QStatusBar,
)

from spiralgalaxy.app.application import VISIBLE_APP_NAME
from spiralgalaxy.app.state import Store
from spiralgalaxy.app.ui.panels.parameters import ParametersPanel
from spiralgalaxy.app.ui.preview import GalaxyPreview
from spiralgalaxy.model.buffer import GalaxyBuffer
from spiralgalaxy.model.starfield import generate_star_field


class Console(QPlainTextEdit):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setReadOnly(True)

    def _log(self, level: str, msg: str) -> None:
        self.appendPlainText(f"{datetime.now().strftime('%d.%m.%Y %H:%M:%S')} [{level}] {msg}")

    def info(self, msg: str) -> None:
        self._log("info", msg)

    def warn(self, msg: str) -> None:
        self._log("warn", msg)

    def error(self, msg: str) -> None:
        self._log("error", msg)

    @Slot(str, str)
    def append_record(self, level: str, msg: str) -> None:
        if level in ("ERROR", "CRITICAL"):
            self.error(msg)
        elif level == "WARNING":
            self.warn(msg)
        else:
            self.info(msg)


class _LogBridge(QObject):
    record_emitted = Signal(str, str)


class ConsoleLogHandler(logging.Handler):
    """Forwards package log records to the console widget (queued, so workers may log too)."""

    def __init__(self, console: Console) -> None:
        super().__init__()
        self.setFormatter(logging.Formatter("%(message)s"))
        self._bridge = _LogBridge()
        self._bridge.record_emitted.connect(console.append_record)

    def emit(self, record: logging.LogRecord) -> None:
        self._bridge.record_emitted.emit(record.levelname, self.format(record))


class MainWindow(QMainWindow):
    def __init__(self, store: Store | None = None):
        super().__init__()
        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1400, 900)

        # Global store
        self.store = store if store is not None else Store()

        # ---- Central: panel | preview ----
        split = QSplitter(Qt.Orientation.Horizontal, self)
        split.setChildrenCollapsible(False)

        self.panel = ParametersPanel(self.store, parent=split)
        star_field = generate_star_field(self.store.context.rng.spawn())
        self.preview = GalaxyPreview(self.store.current_buffer, star_field, parent=split)

        split.addWidget(self.panel)
        split.addWidget(self.preview)
        split.setStretchFactor(0, 0)
        split.setStretchFactor(1, 1)
        self.setCentralWidget(split)

        # ---- Console dock ----
        self.console = Console(self)
        self.dock_console = QDockWidget(self.tr("Console"), self)
        self.dock_console.setWidget(self.console)
        self.addDockWidget(Qt.DockWidgetArea.BottomDockWidgetArea, self.dock_console)

        self._log_handler = ConsoleLogHandler(self.console)
        logging.getLogger("spiralgalaxy").addHandler(self._log_handler)

        self.setStatusBar(QStatusBar(self))

        self.store.buffer_changed.connect(self._on_buffer_changed)
        self.store.generation_started.connect(self._on_generation_started)
        self.store.generation_failed.connect(self._on_generation_failed)

    def generate_initial(self) -> None:
        """Build the first galaxy from the store's current parameters."""
        self.store.commit_parameters(self.store.parameters())

    @Slot(object)
    def _on_buffer_changed(self, buffer: GalaxyBuffer) -> None:
        self.statusBar().showMessage(self.tr("{n} points").format(n=f"{buffer.count:,}"))

    @Slot(int)
    def _on_generation_started(self, count: int) -> None:
        self.statusBar().showMessage(self.tr("Generating {n} points...").format(n=f"{count:,}"))

    @Slot(str)
    def _on_generation_failed(self, message: str) -> None:
        self.statusBar().showMessage(self.tr("Generation failed; keeping the previous galaxy."))

    def closeEvent(self, event: QCloseEvent) -> None:
        logging.getLogger("spiralgalaxy").removeHandler(self._log_handler)
        self.preview.stop()
        self.store.shutdown()
        super().closeEvent(event)
