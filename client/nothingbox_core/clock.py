"""
SessionClock — fixed-period repeating tick on a Tk-style scheduler.

Tk's root.after() is single-shot, so chaining "after(1000)" from each
callback drifts by however late every callback ran. Instead the clock keeps
an anchor on the monotonic clock and always schedules the *next due time*
(anchor + n * period). A late firing shortens the following delay rather
than pushing every later tick back. A stall longer than one period drops
the missed ticks.
"""

import time

from .config import log
from .constants import TICK_INTERVAL_SEC


class SessionClock:
    """
    `scheduler` needs after(ms, callback) -> id and after_cancel(id);
    a tk.Tk root fits. `on_tick` is called once per due time, on the
    scheduler's thread.
    """

    def __init__(self, scheduler, on_tick, period_sec=TICK_INTERVAL_SEC, monotonic=time.monotonic):
        self._scheduler = scheduler
        self._on_tick = on_tick
        self._period = float(period_sec)
        self._monotonic = monotonic
        self._anchor = None
        self._slot = 0
        self._fired = 0
        self._after_id = None

    @property
    def running(self) -> bool:
        return self._after_id is not None

    @property
    def ticks(self) -> int:
        return self._fired

    def start(self):
        if self.running:
            return
        self._anchor = self._monotonic()
        self._slot = 0
        self._fired = 0
        self._schedule_next()
        log.debug("Session clock started (period=%.3fs)", self._period)

    def stop(self):
        if self._after_id is None:
            return
        try:
            self._scheduler.after_cancel(self._after_id)
        except Exception as e:
            log.debug("after_cancel failed: %s", e)
        self._after_id = None
        log.debug("Session clock stopped after %d ticks", self._fired)

    def _schedule_next(self):
        now = self._monotonic()
        due = self._anchor + (self._slot + 1) * self._period
        if now - due > self._period:
            # Loop stalled (sleep, modal dialog): drop the missed slots like a
            # repeating timer would, and resume on the next period boundary.
            current = int((now - self._anchor) // self._period)
            log.info("Session clock stalled, skipping %d missed ticks", current - self._slot)
            self._slot = current
            due = self._anchor + (self._slot + 1) * self._period
        delay_ms = max(0, int(round((due - now) * 1000)))
        self._after_id = self._scheduler.after(delay_ms, self._fire)

    def _fire(self):
        if self._after_id is None:
            return
        self._slot += 1
        self._fired += 1
        try:
            self._on_tick()
        except Exception as e:
            log.error("Tick handler error: %s", e, exc_info=True)
        # on_tick may have stopped the clock
        if self._after_id is not None:
            self._schedule_next()
