"""
Galaxy Parameters (Data Model)
==============================
Immutable snapshot of everything the generator needs.

Why is this file needed?
------------------------
1. Immutability: A frozen dataclass guarantees a generation call never sees
   its inputs change halfway through.
2. Validation: All range checks live in one place and run before any
   allocation, so a rejected edit never touches the installed galaxy.
3. Editing: The parameter panel produces new snapshots via ``replace``.

Classes:
    GalaxyParameters: The parameter snapshot.
"""
from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass, field
from numbers import Integral
from typing import Any

from spiralgalaxy.model.color import Color
from spiralgalaxy.model.errors import InvalidParameterError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GalaxyParameters:
    count: int = 100_000
    size: float = 0.01
    radius: float = 5.0
    branches: int = 3
    spin: float = 1.0
    randomness: float = 0.2
    randomness_power: float = 3.0
    inside_color: Color = field(default_factory=lambda: Color.from_hex("#ff6030"))
    outside_color: Color = field(default_factory=lambda: Color.from_hex("#1b3984"))

    def validate(self) -> GalaxyParameters:
        """
        Check every field against its allowed range.

        Returns:
            self, so calls can be chained.

        Raises:
            InvalidParameterError: On the first field that is out of range.
        """
        _require_int("count", self.count, minimum=1)
        _require_int("branches", self.branches, minimum=1)

        for name in ("size", "radius", "spin", "randomness", "randomness_power"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidParameterError(name, value, "must be a number")
            if not math.isfinite(value):
                raise InvalidParameterError(name, value, "must be finite")

        if self.size <= 0:
            raise InvalidParameterError("size", self.size, "must be > 0")
        if self.radius <= 0:
            raise InvalidParameterError("radius", self.radius, "must be > 0")
        if self.randomness < 0:
            raise InvalidParameterError("randomness", self.randomness, "must be >= 0")
        if self.randomness_power < 1:
            raise InvalidParameterError("randomness_power", self.randomness_power, "must be >= 1")

        for name in ("inside_color", "outside_color"):
            color = getattr(self, name)
            if not isinstance(color, Color) or not color.is_normalized():
                raise InvalidParameterError(name, color, "channels must lie in [0, 1]")

        return self

    def replace(self, **changes: Any) -> GalaxyParameters:
        """Return a copy with the given fields changed (not validated)."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        data = dataclasses.asdict(self)
        data["inside_color"] = self.inside_color.to_hex()
        data["outside_color"] = self.outside_color.to_hex()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GalaxyParameters:
        """
        Build parameters from a plain dict, e.g. the command line options merged
        over ``to_dict()`` of the defaults.
        Colors may be given as hex strings. Unknown keys are ignored.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        for key in ("inside_color", "outside_color"):
            if isinstance(kwargs.get(key), str):
                kwargs[key] = Color.from_hex(kwargs[key])
        ignored = set(data) - known
        if ignored:
            logger.debug(f"Ignoring unknown parameter keys: {sorted(ignored)}")
        return cls(**kwargs)


def _require_int(name: str, value: Any, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise InvalidParameterError(name, value, "must be an integer")
    if value < minimum:
        raise InvalidParameterError(name, value, f"must be >= {minimum}")


DEFAULT_PARAMETERS = GalaxyParameters()
