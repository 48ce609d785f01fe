"""
Regeneration Controller
=======================
Turns committed parameter edits into installed galaxies.

Why is this file needed?
------------------------
1. Atomicity: The renderer only ever sees a fully built buffer. A new buffer
   is swapped in with a single reference assignment, and the previous one is
   released in the same step.
2. All-or-nothing: If validation or generation fails, the installed buffer
   stays exactly as it was and the error propagates to the caller.
3. Latest-wins: Every request gets a ticket. Results of superseded tickets
   (e.g. from a slow background worker) are released instead of installed.

Classes:
    GenerationState: IDLE or GENERATING.
    GalaxyContext: Explicit application context (no module-level state).
    RegenerationController: The state machine.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable

from spiralgalaxy.model.buffer import GalaxyBuffer, release_buffer
from spiralgalaxy.model.generator import PointFieldGenerator
from spiralgalaxy.model.parameters import GalaxyParameters
from spiralgalaxy.model.random_source import NumpyRandomSource, RandomSource

logger = logging.getLogger(__name__)

InstallListener = Callable[[GalaxyBuffer, GalaxyParameters], None]


class GenerationState(IntEnum):
    IDLE = 0
    GENERATING = 1


@dataclass
class GalaxyContext:
    """
    Everything the controller and the frame loop share.
    Pass this instance around instead of using globals.
    """
    parameters: GalaxyParameters = field(default_factory=GalaxyParameters)
    rng: RandomSource = field(default_factory=NumpyRandomSource)
    generator: PointFieldGenerator = field(default_factory=PointFieldGenerator)
    buffer: GalaxyBuffer | None = None


class RegenerationController:
    def __init__(self, context: GalaxyContext | None = None) -> None:
        self.context = context if context is not None else GalaxyContext()
        self._latest_ticket = 0
        self._pending: dict[int, GalaxyParameters] = {}
        self._listeners: list[InstallListener] = []

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    @property
    def state(self) -> GenerationState:
        if self._latest_ticket in self._pending:
            return GenerationState.GENERATING
        return GenerationState.IDLE

    @property
    def latest_ticket(self) -> int:
        return self._latest_ticket

    def latest_parameters(self) -> GalaxyParameters:
        """Parameters of the newest request, or of the installed galaxy when nothing is pending."""
        return self._pending.get(self._latest_ticket, self.context.parameters)

    def current_buffer(self) -> GalaxyBuffer | None:
        """The installed buffer. Call once per frame; do not cache it."""
        return self.context.buffer

    def add_install_listener(self, listener: InstallListener) -> None:
        """Called with (buffer, parameters) after every successful install."""
        self._listeners.append(listener)

    def commit(self, params: GalaxyParameters) -> GalaxyBuffer:
        """
        Generate and install synchronously.

        Raises:
            InvalidParameterError: Parameters rejected; nothing changed.
            ResourceExhaustionError: Allocation failed; nothing changed.
        """
        ticket = self.request(params)
        try:
            buffer = self.context.generator.generate(params, self.context.rng)
        except Exception as e:
            self.fail(ticket, e)
            raise
        self.install(ticket, buffer)
        return buffer

    def request(self, params: GalaxyParameters) -> int:
        """
        Validate ``params`` and open a new generation ticket.

        The new ticket supersedes every earlier one: their results will be
        discarded when they arrive.

        Raises:
            InvalidParameterError: Parameters rejected; no ticket is opened.
        """
        try:
            params.validate()
        except ValueError as e:
            logger.warning(f"Rejected parameters: {e}")
            raise

        self._latest_ticket += 1
        self._pending[self._latest_ticket] = params
        logger.debug(f"Opened generation ticket {self._latest_ticket} ({params.count} points).")
        return self._latest_ticket

    def install(self, ticket: int, buffer: GalaxyBuffer) -> bool:
        """
        Install the result of ``ticket`` if it is still the latest request.

        Returns:
            True if installed. False if the ticket was superseded, in which
            case ``buffer`` is released.
        """
        params = self._pending.pop(ticket, None)
        if ticket != self._latest_ticket or params is None:
            logger.debug(f"Discarding stale result of ticket {ticket} (latest is {self._latest_ticket}).")
            buffer.release()
            return False

        previous = self.context.buffer
        self.context.buffer = buffer
        self.context.parameters = params
        release_buffer(previous)
        logger.debug(f"Installed galaxy buffer from ticket {ticket}.")

        for listener in self._listeners:
            listener(buffer, params)
        return True

    def fail(self, ticket: int, error: BaseException) -> bool:
        """
        Close ``ticket`` after its generation failed.

        Returns:
            True if the failed ticket was the latest request (the error is
            relevant to the user), False if it had been superseded anyway.
        """
        self._pending.pop(ticket, None)
        if ticket != self._latest_ticket:
            logger.debug(f"Ignoring failure of stale ticket {ticket}: {error}")
            return False
        logger.error(f"Galaxy generation failed: {error}")
        return True

    def close(self) -> None:
        """Release the installed buffer and drop all pending tickets."""
        self._pending.clear()
        buffer, self.context.buffer = self.context.buffer, None
        release_buffer(buffer)
