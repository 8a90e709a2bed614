"""Trailing-edge debounce for search keystrokes"""

import asyncio
from typing import Callable, Optional


class QueryDebouncer:
    """
    Collapse rapid updates into one emission after a quiet period.

    Every push() cancels the pending emission and schedules a new one
    `delay` seconds later, so only the last value of a burst is emitted.
    Nothing is emitted on the leading edge.
    """

    _UNSET = object()

    def __init__(self, delay: float, callback: Callable[[str], None]):
        self.delay = delay
        self.callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._pending = self._UNSET

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def push(self, value: str):
        self.cancel()
        loop = asyncio.get_running_loop()
        self._pending = value
        self._handle = loop.call_later(self.delay, self._fire)

    def _fire(self):
        value = self._pending
        self._handle = None
        self._pending = self._UNSET
        self.callback(value)

    def flush(self):
        """Emit the pending value now instead of waiting"""
        if self._handle is None:
            return
        self._handle.cancel()
        self._fire()

    def cancel(self):
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._pending = self._UNSET
