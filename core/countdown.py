"""Cancellable once-per-interval countdown driving timed sessions."""
from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

log = logging.getLogger(__name__)


class Countdown:
    """
    Calls ``on_tick`` every ``interval`` seconds until it returns False or
    the countdown is cancelled.

    Only one timer is pending at a time. ``cancel()`` also suppresses a
    tick whose timer already fired but has not taken the lock yet.
    """

    def __init__(
        self,
        on_tick: Callable[[], bool],
        interval: float = 1.0,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ):
        self.on_tick = on_tick
        self.interval = interval
        self._timer_factory = timer_factory
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._cancelled = False

    @property
    def active(self) -> bool:
        return self._timer is not None and not self._cancelled

    def start(self) -> None:
        with self._lock:
            if self._timer is not None:
                return
            self._cancelled = False
            self._schedule()

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _schedule(self) -> None:
        timer = self._timer_factory(self.interval, self._fire)
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _fire(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._timer = None
        keep_going = self.on_tick()
        with self._lock:
            if keep_going and not self._cancelled and self._timer is None:
                self._schedule()
            elif not keep_going:
                log.debug("Countdown finished")
