"""
Error Types
===========
Exceptions raised while validating parameters or generating a galaxy.

Both error kinds leave the installed galaxy untouched: generation is
all-or-nothing, so the caller can report the problem and keep rendering the
last valid buffer.
"""
from __future__ import annotations

from typing import Any


class GalaxyError(Exception):
    """Base class for all galaxy generation errors."""


class InvalidParameterError(GalaxyError, ValueError):
    """A parameter value is outside its allowed range."""

    def __init__(self, name: str, value: Any, reason: str) -> None:
        super().__init__(f"Invalid parameter '{name}' = {value!r}: {reason}")
        self.name = name
        self.value = value
        self.reason = reason


class ResourceExhaustionError(GalaxyError):
    """Allocation of the point buffers failed."""

    def __init__(self, count: int) -> None:
        super().__init__(f"Not enough memory to generate {count} points.")
        self.count = count
