"""
Live countdowns for birthday cards.

Each watched card gets its own :class:`CountdownTimer` that recomputes the
remaining time every ``interval`` seconds and hands it to a callback.
Timers share nothing but the callables they were built with. The
:class:`CountdownRegistry` owns them, keyed by (owner, item) where the
owner is a Socket.IO session id, so a disconnect releases every timer the
client started.
"""

import logging
import threading
import time
from datetime import datetime, timezone

from dashboard.recurrence import time_remaining

logger = logging.getLogger(__name__)


def _utc_now():
    return datetime.now(timezone.utc)


class CountdownTimer:

    def __init__(self, target, on_tick, interval=1.0, clock=_utc_now, sleep=time.sleep):
        self.target = target
        self.on_tick = on_tick
        self.interval = interval
        self._clock = clock
        self._sleep = sleep
        self._cancelled = False
        self.last = None

    @property
    def cancelled(self):
        return self._cancelled

    def tick(self):
        self.last = time_remaining(self.target, self._clock())
        self.on_tick(self.last)
        return self.last

    def run(self):
        while not self._cancelled:
            self.tick()
            self._sleep(self.interval)

    def cancel(self):
        self._cancelled = True


class CountdownRegistry:

    def __init__(self, spawn, sleep=time.sleep, clock=_utc_now, interval=1.0):
        self._spawn = spawn
        self._sleep = sleep
        self._clock = clock
        self.interval = interval
        self._timers = {}
        self._lock = threading.Lock()

    def watch(self, owner, item_id, target, on_tick):
        """Start a timer for ``item_id``, replacing any timer the owner already had for it."""
        timer = CountdownTimer(target, on_tick, self.interval, self._clock, self._sleep)
        with self._lock:
            previous = self._timers.pop((owner, item_id), None)
            self._timers[(owner, item_id)] = timer
        if previous:
            previous.cancel()
        self._spawn(timer.run)
        logger.debug('Countdown started for %s (owner %s)', item_id, owner)
        return timer

    def cancel(self, owner, item_id):
        with self._lock:
            timer = self._timers.pop((owner, item_id), None)
        if timer:
            timer.cancel()
        return timer is not None

    def cancel_owner(self, owner):
        with self._lock:
            keys = [key for key in self._timers if key[0] == owner]
            timers = [self._timers.pop(key) for key in keys]
        for timer in timers:
            timer.cancel()
        if timers:
            logger.debug('Cancelled %d countdown(s) for owner %s', len(timers), owner)
        return len(timers)

    def cancel_all(self):
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()

    def active(self, owner=None):
        with self._lock:
            return sorted(item for o, item in self._timers if owner is None or o == owner)
