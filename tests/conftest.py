"""Shared fixtures: seeded random sources, small parameter sets and a headless Qt app."""

import os
import threading

import numpy as np
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from spiralgalaxy.model.errors import ResourceExhaustionError
from spiralgalaxy.model.generator import PointFieldGenerator
from spiralgalaxy.model.parameters import GalaxyParameters
from spiralgalaxy.model.random_source import NumpyRandomSource


class GatedGenerator(PointFieldGenerator):
    """
    Generator that holds large requests until ``gate`` is set.

    Requests with ``count >= hold_from`` block, smaller ones run at once.
    Every buffer produced is kept in ``produced`` and requests listed in
    ``fail_counts`` raise instead.
    """

    def __init__(self, hold_from, fail_counts=()):
        super().__init__()
        self.gate = threading.Event()
        self.hold_from = hold_from
        self.fail_counts = set(fail_counts)
        self.produced = []

    def generate(self, params, rng):
        if params.count >= self.hold_from:
            assert self.gate.wait(10), "gate was never opened"
        if params.count in self.fail_counts:
            raise ResourceExhaustionError(params.count)
        buffer = super().generate(params, rng)
        self.produced.append(buffer)
        return buffer


class ExhaustedMemorySource:
    """RandomSource whose allocation always fails."""

    def uniform(self, shape):
        raise MemoryError("simulated allocation failure")

    def spawn(self):
        return self


@pytest.fixture
def rng():
    return NumpyRandomSource(seed=1234)


@pytest.fixture
def small_params():
    return GalaxyParameters(count=2_000, radius=5.0, branches=3, spin=1.0, randomness=0.2)


@pytest.fixture
def exhausted_rng():
    return ExhaustedMemorySource()


def make_draws(radii, jitter_magnitude=0.0, jitter_sign=0.25):
    """
    Build a draw stream for the generator: 7 draws per point.

    radii: per-point radius draws in [0, 1)
    jitter_magnitude / jitter_sign: used for all three axes
    """
    rows = [[r, jitter_magnitude, jitter_sign, jitter_magnitude, jitter_sign, jitter_magnitude, jitter_sign]
            for r in radii]
    return np.asarray(rows, dtype=np.float64).ravel()


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app


# Counts from here on go to a worker thread and wait for the gate.
BACKGROUND_FROM = 1_000


@pytest.fixture
def gated_generator():
    return GatedGenerator(hold_from=BACKGROUND_FROM)


@pytest.fixture
def background_store(qapp, gated_generator):
    from spiralgalaxy.app.state import Store
    from spiralgalaxy.controller.regeneration import GalaxyContext

    store = Store(
        GalaxyContext(rng=NumpyRandomSource(seed=7), generator=gated_generator),
        background_threshold=BACKGROUND_FROM,
    )
    yield store
    gated_generator.gate.set()
    store.shutdown()


def finish_workers(store, generator):
    """Let held workers run to completion and deliver their queued results."""
    from PySide6.QtCore import QCoreApplication

    generator.gate.set()
    store.wait_for_workers()
    QCoreApplication.processEvents()
