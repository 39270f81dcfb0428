"""Status Board - Imperative Shell.

Receives human-readable status strings from the pipeline and keeps the
current one for display, with a short cosmetic pulse after each change.
"""

import asyncio
import logging
from datetime import datetime, timezone


logger = logging.getLogger(__name__)


DEFAULT_PULSE_SECONDS = 1.0


class StatusBoard:
    """Latest status message plus a transient "pulsing" flag."""

    def __init__(self, pulse_seconds: float = DEFAULT_PULSE_SECONDS) -> None:
        self.pulse_seconds = pulse_seconds
        self.message = ""
        self.updated_at: datetime | None = None
        self.pulsing = False
        self._pulse_handle: asyncio.TimerHandle | None = None

    def report(self, message: str) -> None:
        """Show a new status message and start its pulse."""
        self.message = message
        self.updated_at = datetime.now(timezone.utc)
        logger.info("Status: %s", message)
        self._start_pulse()

    def _start_pulse(self) -> None:
        if self._pulse_handle is not None:
            self._pulse_handle.cancel()
            self._pulse_handle = None

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop to clear the flag later, so skip the pulse
            self.pulsing = False
            return

        self.pulsing = True
        self._pulse_handle = loop.call_later(self.pulse_seconds, self._end_pulse)

    def _end_pulse(self) -> None:
        self.pulsing = False
        self._pulse_handle = None

    def close(self) -> None:
        """Cancel a pending pulse."""
        if self._pulse_handle is not None:
            self._pulse_handle.cancel()
            self._pulse_handle = None
        self.pulsing = False
