"""
Random Sources
==============
Injectable streams of uniform [0, 1) draws.

The generator never calls a global RNG. It receives a RandomSource, so a
test (or a background worker) can supply its own seeded stream.
"""
from __future__ import annotations

from typing import Protocol, Sequence, TYPE_CHECKING, runtime_checkable

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt


@runtime_checkable
class RandomSource(Protocol):
    def uniform(self, shape: tuple[int, ...]) -> npt.NDArray[np.float64]:
        """Return an array of the given shape filled with draws in [0, 1)."""
        ...

    def spawn(self) -> RandomSource:
        """Return an independent child stream for use by another owner."""
        ...


class NumpyRandomSource:
    """RandomSource backed by ``numpy.random.Generator``."""

    def __init__(self, seed: int | None = None, generator: np.random.Generator | None = None) -> None:
        self._rng = generator if generator is not None else np.random.default_rng(seed)

    def uniform(self, shape: tuple[int, ...]) -> npt.NDArray[np.float64]:
        return self._rng.random(shape, dtype=np.float64)

    def spawn(self) -> NumpyRandomSource:
        return NumpyRandomSource(generator=self._rng.spawn(1)[0])


class SequenceRandomSource:
    """
    Replays a fixed list of draws, in order.

    Useful for scripted scenarios where each value must be known in advance.
    Running past the end of the sequence raises IndexError.
    """

    def __init__(self, values: Sequence[float]) -> None:
        arr = np.asarray(values, dtype=np.float64).ravel()
        if np.any((arr < 0.0) | (arr >= 1.0)):
            raise ValueError("All draws must lie in [0, 1).")
        self._values = arr
        self._pos = 0

    @property
    def remaining(self) -> int:
        return self._values.size - self._pos

    def uniform(self, shape: tuple[int, ...]) -> npt.NDArray[np.float64]:
        n = int(np.prod(shape))
        if n > self.remaining:
            raise IndexError(f"Requested {n} draws, only {self.remaining} left.")
        out = self._values[self._pos:self._pos + n].reshape(shape)
        self._pos += n
        return out.copy()

    def spawn(self) -> SequenceRandomSource:
        # The child takes over the unread tail; this stream is left exhausted.
        child = SequenceRandomSource(self._values[self._pos:])
        self._pos = self._values.size
        return child
