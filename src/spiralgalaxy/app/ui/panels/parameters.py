from __future__ import annotations

import logging

from PySide6.QtCore import Slot, QTimer
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QGroupBox, QLabel, QGridLayout, QSizePolicy,
    QDoubleSpinBox, QSpinBox, QPushButton, QColorDialog, QAbstractSpinBox,
)

from spiralgalaxy import config
from spiralgalaxy.app.state import Store
from spiralgalaxy.model.color import Color
from spiralgalaxy.model.parameters import DEFAULT_PARAMETERS, GalaxyParameters

logger = logging.getLogger(__name__)

INT_FIELDS = ("count", "branches")

LABELS = {
    "count": "Count:",
    "size": "Size:",
    "radius": "Radius:",
    "branches": "Branches:",
    "spin": "Spin:",
    "randomness": "Randomness:",
    "randomness_power": "Randomness power:",
}

COLOR_LABELS = {
    "inside_color": "Inside color:",
    "outside_color": "Outside color:",
}


class ParametersPanel(QWidget):
    """
    Panel for editing the galaxy parameters.

    Edits are debounced and committed to the Store as one snapshot once the
    interaction is over. A rejected snapshot is reported in the status label
    while the last valid galaxy stays on screen.
    """
    def __init__(self, store: Store, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.store = store

        root = QVBoxLayout(self)

        box = QGroupBox(self.tr("Galaxy"), self)
        root.addWidget(box, 0)
        self.grid = QGridLayout(box)
        self.grid.setVerticalSpacing(8)
        self._row = 0

        self._spins: dict[str, QAbstractSpinBox] = {}
        self._color_buttons: dict[str, QPushButton] = {}
        self._colors: dict[str, Color] = {}

        for key, label in LABELS.items():
            self._add_spin(key, label)
        for key, label in COLOR_LABELS.items():
            self._add_color_button(key, label)

        self.btn_reset = QPushButton(self.tr("Reset to defaults"), self)
        self.btn_reset.clicked.connect(self._on_reset)
        root.addWidget(self.btn_reset, 0)

        self.label_status = QLabel("", self)
        self.label_status.setWordWrap(True)
        root.addWidget(self.label_status, 0)

        root.addStretch()

        # Debounce timer: commit once the user stops clicking/typing
        self._commit_timer = QTimer(self)
        self._commit_timer.setSingleShot(True)
        self._commit_timer.setInterval(300)
        self._commit_timer.timeout.connect(self._commit)

        self.store.parameters_changed.connect(self._on_parameters_changed)
        self.store.generation_failed.connect(self._on_generation_failed)
        self.store.generation_started.connect(self._on_generation_started)

        self.set_parameters(self.store.parameters())

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def set_parameters(self, params: GalaxyParameters) -> None:
        """Show ``params`` in the widgets without committing anything."""
        for key, spin in self._spins.items():
            spin.blockSignals(True)
            spin.setValue(getattr(params, key))
            spin.blockSignals(False)
        for key in COLOR_LABELS:
            self._set_color(key, getattr(params, key))

    def current_parameters(self) -> GalaxyParameters:
        """Snapshot of the values currently shown in the panel."""
        values = {key: spin.value() for key, spin in self._spins.items()}
        values.update(self._colors)
        return self.store.parameters().replace(**values)

    # ------------------------------------------------------------------------------
    # Widgets
    # ------------------------------------------------------------------------------

    def _next_row(self) -> int:
        r = self._row
        self._row += 1
        return r

    def _add_spin(self, key: str, label: str) -> QAbstractSpinBox:
        rng = config.PARAMETER_RANGES[key]
        row = self._next_row()
        self.grid.addWidget(QLabel(self.tr(label), self), row, 0)

        if key in INT_FIELDS:
            w = QSpinBox(self)
            w.setRange(int(rng.minimum), int(rng.maximum))
            w.setSingleStep(int(rng.step))
        else:
            w = QDoubleSpinBox(self)
            w.setRange(rng.minimum, rng.maximum)
            w.setSingleStep(rng.step)
            w.setDecimals(rng.decimals)
        w.setKeyboardTracking(False)
        w.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
        w.valueChanged.connect(self._schedule_commit)

        self.grid.addWidget(w, row, 1)
        self._spins[key] = w
        return w

    def _add_color_button(self, key: str, label: str) -> QPushButton:
        row = self._next_row()
        self.grid.addWidget(QLabel(self.tr(label), self), row, 0)
        btn = QPushButton(self)
        btn.clicked.connect(lambda *_, k=key: self._pick_color(k))
        self.grid.addWidget(btn, row, 1)
        self._color_buttons[key] = btn
        return btn

    def _set_color(self, key: str, color: Color) -> None:
        self._colors[key] = color
        hex_value = color.to_hex()
        btn = self._color_buttons[key]
        btn.setText(hex_value)
        btn.setStyleSheet(f"background-color: {hex_value};")

    # ------------------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------------------

    @Slot()
    def _schedule_commit(self) -> None:
        self._commit_timer.start()

    @Slot()
    def _commit(self) -> None:
        params = self.current_parameters()
        if params == self.store.latest_parameters():
            return
        self.store.commit_parameters(params)

    def _pick_color(self, key: str) -> None:
        initial = QColor(self._colors[key].to_hex())
        chosen = QColorDialog.getColor(initial, self, self.tr(COLOR_LABELS[key].rstrip(":")))
        if not chosen.isValid():
            return
        self._set_color(key, Color(chosen.redF(), chosen.greenF(), chosen.blueF()))
        self._commit_timer.stop()
        self._commit()

    @Slot()
    def _on_reset(self) -> None:
        self.set_parameters(DEFAULT_PARAMETERS)
        self._commit_timer.stop()
        self._commit()

    @Slot(object)
    def _on_parameters_changed(self, params: GalaxyParameters) -> None:
        # Newer edits are still on their way; keep them on screen
        if not self._commit_timer.isActive() and not self.store.is_generating():
            self.set_parameters(params)
        self.label_status.setStyleSheet("")
        self.label_status.setText(self.tr("{n} points").format(n=f"{params.count:,}"))

    @Slot(int)
    def _on_generation_started(self, count: int) -> None:
        self.label_status.setStyleSheet("")
        self.label_status.setText(self.tr("Generating {n} points...").format(n=f"{count:,}"))

    @Slot(str)
    def _on_generation_failed(self, message: str) -> None:
        self.label_status.setStyleSheet("color: #c0392b;")
        self.label_status.setText(message)
