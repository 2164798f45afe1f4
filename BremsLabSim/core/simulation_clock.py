"""Cooperative scheduler for the frame tick and the dose refresh."""

import threading
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..utils.logging import get_logger


logger = get_logger()


@dataclass
class PeriodicDriver:
    """Callback fired every ``period`` seconds.

    Attributes:
        name: Driver name for logging
        period: Interval between firings in seconds
        callback: Function invoked on each firing
        next_due: Time of the next firing (None while stopped)
        fired: Number of firings since start
    """
    name: str
    period: float
    callback: Callable[[], None]
    next_due: Optional[float] = None
    fired: int = 0

    def is_due(self, now: float) -> bool:
        return self.next_due is not None and now >= self.next_due

    def fire(self, now: float) -> None:
        self.callback()
        self.fired += 1
        # The callback stopped the clock
        if self.next_due is None:
            return
        # Skip missed periods instead of bursting to catch up
        self.next_due += self.period
        if self.next_due <= now:
            self.next_due = now + self.period


class SimulationClock:
    """Drives the frame tick and the dose sampler on one execution context.

    Both drivers are polled from a single loop, so their callbacks never
    overlap. A re-entrant lock is held while callbacks run and while the
    clock is stopped; once ``stop()`` returns no callback will run again
    until the next ``start()``, even when ``stop()`` is called from another
    thread.

    Attributes:
        frame_driver: Per-frame tick driver
        dose_driver: Dose refresh driver
        lock: Lock serialising callbacks against stop and external inputs
    """

    def __init__(
        self,
        frame_callback: Callable[[], None],
        dose_callback: Callable[[], None],
        frame_period: float = 1.0 / 60.0,
        dose_period: float = 0.5,
        time_source: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        lock: Optional[threading.RLock] = None
    ):
        if frame_period <= 0 or dose_period <= 0:
            raise ValueError(
                f"Driver periods must be positive, got frame={frame_period}, "
                f"dose={dose_period}"
            )
        self.frame_driver = PeriodicDriver('frame', frame_period, frame_callback)
        self.dose_driver = PeriodicDriver('dose', dose_period, dose_callback)
        self.time_source = time_source
        self.sleep = sleep
        self.lock = lock if lock is not None else threading.RLock()
        self._running = False

    @property
    def drivers(self) -> List[PeriodicDriver]:
        return [self.frame_driver, self.dose_driver]

    @property
    def running(self) -> bool:
        return self._running

    def start(self, now: Optional[float] = None) -> None:
        """Arm both drivers; the first firing of each is immediate."""
        with self.lock:
            if self._running:
                return
            now = self.time_source() if now is None else now
            for driver in self.drivers:
                driver.next_due = now
                driver.fired = 0
            self._running = True
            logger.info(
                f"Simulation clock started: frame every {self.frame_driver.period * 1000:.1f} ms, "
                f"dose every {self.dose_driver.period * 1000:.0f} ms"
            )

    def stop(self) -> None:
        with self.lock:
            if not self._running:
                return
            self._running = False
            for driver in self.drivers:
                driver.next_due = None
            logger.info(
                f"Simulation clock stopped after {self.frame_driver.fired} frames "
                f"and {self.dose_driver.fired} dose samples"
            )

    def poll(self, now: Optional[float] = None) -> int:
        """Fire every driver that is due at ``now``.

        Drivers due at the same instant fire in order of their due time,
        frame first on ties.

        Returns:
            Number of callbacks fired
        """
        with self.lock:
            if not self._running:
                return 0
            now = self.time_source() if now is None else now
            fired = 0
            for driver in sorted(self.drivers, key=lambda d: d.next_due):
                # A callback may stop the clock
                if not self._running:
                    break
                if driver.is_due(now):
                    driver.fire(now)
                    fired += 1
            return fired

    def time_until_next(self, now: Optional[float] = None) -> Optional[float]:
        """Seconds until the next driver is due (None while stopped)."""
        with self.lock:
            if not self._running:
                return None
            now = self.time_source() if now is None else now
            return max(0.0, min(d.next_due for d in self.drivers) - now)

    def run(self, duration: Optional[float] = None) -> None:
        """Block and drive the callbacks until stopped or ``duration`` elapses.

        Args:
            duration: Wall time to run in seconds (None runs until stop())
        """
        self.start()
        deadline = None if duration is None else self.time_source() + duration
        try:
            while self._running:
                now = self.time_source()
                if deadline is not None and now >= deadline:
                    break
                self.poll(now)
                wait = self.time_until_next()
                if wait is None:
                    break
                if deadline is not None:
                    wait = min(wait, max(0.0, deadline - self.time_source()))
                if wait > 0:
                    self.sleep(wait)
        finally:
            self.stop()
