"""Tracks in-flight submissions so shutdown can drain them"""

import asyncio
import logging
from contextlib import contextmanager

from squid_registration.errors import ShuttingDownError

logger = logging.getLogger(__name__)


class SubmissionGate:
    """
    Admits submissions while open and counts the ones still running.

    Once closed, new submissions are refused with ShuttingDownError and
    drain() waits for the in-flight ones to finish their store writes.
    """

    def __init__(self):
        self._accepting = True
        self._in_flight = 0
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def accepting(self) -> bool:
        return self._accepting

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @contextmanager
    def track(self):
        if not self._accepting:
            raise ShuttingDownError("Server is shutting down")

        self._in_flight += 1
        self._idle.clear()
        try:
            yield
        finally:
            self._in_flight -= 1
            if self._in_flight == 0:
                self._idle.set()

    def close(self):
        self._accepting = False

    async def drain(self, timeout: float) -> bool:
        """Wait up to timeout seconds for in-flight submissions. True if drained."""
        if self._in_flight:
            logger.info(f"Waiting for {self._in_flight} in-flight submission(s)")
        try:
            await asyncio.wait_for(self._idle.wait(), timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Shutdown grace period elapsed with {self._in_flight} submission(s) running"
            )
            return False
        return True
