"""
Color Utilities
===============
RGB color value type and the linear interpolation used for the radial
inside -> outside gradient.

Colors are stored as floats in [0, 1]. Hex strings (``#rrggbb``) are the
format used by the parameter panel and the default parameters.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, overload

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt

_HEX_PATTERN = re.compile(r"#?([0-9a-fA-F]{6})")


@dataclass(frozen=True)
class Color:
    r: float
    g: float
    b: float

    @classmethod
    def from_hex(cls, value: str) -> Color:
        """
        Parse ``#rrggbb`` (or ``rrggbb``) into a color.

        Raises:
            ValueError: If the string is not a six digit hex color.
        """
        match = _HEX_PATTERN.fullmatch(value.strip())
        if match is None:
            raise ValueError(f"Expected a color like '#rrggbb', got {value!r}.")
        raw = int(match.group(1), 16)
        return cls(
            ((raw >> 16) & 0xFF) / 255.0,
            ((raw >> 8) & 0xFF) / 255.0,
            (raw & 0xFF) / 255.0,
        )

    def to_hex(self) -> str:
        channels = (round(min(max(c, 0.0), 1.0) * 255) for c in self.as_tuple())
        return "#" + "".join(f"{c:02x}" for c in channels)

    def as_tuple(self) -> tuple[float, float, float]:
        return self.r, self.g, self.b

    def as_array(self) -> npt.NDArray[np.float64]:
        return np.array(self.as_tuple(), dtype=np.float64)

    def is_normalized(self) -> bool:
        """True if every channel lies in [0, 1]."""
        return all(0.0 <= c <= 1.0 for c in self.as_tuple())


@overload
def blend(inside: Color, outside: Color, t: float) -> Color: ...
@overload
def blend(inside: Color, outside: Color, t: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]: ...

def blend(inside, outside, t):
    """
    Linearly interpolate between two colors, per channel.

    ``result = inside + (outside - inside) * t``

    Args:
        inside: Color at t = 0.
        outside: Color at t = 1.
        t: A scalar, or an (N,) array of interpolation factors. Values
            outside [0, 1] extrapolate; callers clamp upstream if needed.

    Returns:
        A Color for scalar t, otherwise an (N, 3) float64 array.
    """
    if np.ndim(t) == 0:
        t = float(t)
        return Color(
            inside.r + (outside.r - inside.r) * t,
            inside.g + (outside.g - inside.g) * t,
            inside.b + (outside.b - inside.b) * t,
        )

    a = inside.as_array()
    b = outside.as_array()
    t_col = np.asarray(t, dtype=np.float64).reshape(-1, 1)
    return a + (b - a) * t_col


def radial_fraction(radius, max_radius: float):
    """
    Normalized radial position used as the gradient parameter.

    Returns 0 when ``max_radius`` is 0 instead of dividing by zero.
    """
    if np.ndim(radius) == 0:
        return 0.0 if max_radius == 0 else radius / max_radius
    radius = np.asarray(radius, dtype=np.float64)
    if max_radius == 0:
        return np.zeros_like(radius)
    return radius / max_radius
