"""
BroadcastScheduler: couples subscriber presence to the simulation driver.

- subscribe():   first subscriber starts the periodic driver
- unsubscribe(): last subscriber leaving stops it
- each period:   step the simulation, encode ONE snapshot, send it to
                 every subscriber

Every critical section here runs under the SimulationService lock, the
same lock the request layer takes for add/remove/reset/toggle. Within a
firing, step happens-before encoding happens-before all sends; firings
never overlap.

Sends are fire-and-forget. A subscriber's send() must hand the payload off
without waiting for I/O; a failing send is logged and only affects that
subscriber.
"""

from __future__ import annotations
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, Protocol

from orbsim.codec import encode_snapshot
from orbsim.core.particle import Particle
from orbsim.core.service import SimulationService

logger = logging.getLogger(__name__)


class Subscriber(Protocol):
    """A push target. Unique per connection."""

    def send(self, payload: str) -> None:
        """Dispatch payload without blocking on delivery."""
        ...


@dataclass
class SchedulerConfig:
    """Configuration for the broadcast driver."""

    period: float = 0.016  # Wall-clock seconds between firings (~60 Hz)
    thread_name: str = "orbsim-broadcast"


@dataclass
class BroadcastScheduler:
    """Periodic step-and-broadcast driver with subscriber lifecycle."""

    service: SimulationService
    config: SchedulerConfig = field(default_factory=SchedulerConfig)
    encoder: Callable[[Iterable[Particle]], str] = encode_snapshot

    ticks: int = field(default=0, init=False)
    _subscribers: list = field(default_factory=list, init=False)
    _thread: threading.Thread | None = field(default=None, init=False)
    _stop_event: threading.Event | None = field(default=None, init=False)

    @property
    def lock(self) -> threading.RLock:
        return self.service.lock

    @property
    def subscribers(self) -> tuple:
        with self.lock:
            return tuple(self._subscribers)

    @property
    def subscriber_count(self) -> int:
        with self.lock:
            return len(self._subscribers)

    @property
    def is_active(self) -> bool:
        """True while the periodic driver is running."""
        with self.lock:
            return self._stop_event is not None and not self._stop_event.is_set()

    # ═══════════════════════════════════════════════════════════════
    # SUBSCRIBER LIFECYCLE
    # ═══════════════════════════════════════════════════════════════

    def subscribe(self, handle: Subscriber) -> bool:
        """
        Register a subscriber; starts the driver on empty → non-empty.

        Returns:
            False if the handle was already subscribed
        """
        with self.lock:
            if handle in self._subscribers:
                return False
            self._subscribers.append(handle)
            logger.info("Subscriber added: %r (%d active)", handle, len(self._subscribers))
            if len(self._subscribers) == 1:
                self.start()
            return True

    def unsubscribe(self, handle: Subscriber) -> bool:
        """
        Remove a subscriber; stops the driver on non-empty → empty.

        Returns:
            False if the handle was not subscribed
        """
        with self.lock:
            if handle not in self._subscribers:
                return False
            self._subscribers.remove(handle)
            logger.info("Subscriber removed: %r (%d active)", handle, len(self._subscribers))
            if not self._subscribers:
                self.stop()
            return True

    # ═══════════════════════════════════════════════════════════════
    # DRIVER LIFECYCLE
    # ═══════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Start the periodic driver (no-op if already running)."""
        with self.lock:
            if self.is_active:
                return
            stop_event = threading.Event()
            thread = threading.Thread(
                target=self._run,
                args=(stop_event,),
                name=self.config.thread_name,
                daemon=True,
            )
            self._stop_event = stop_event
            self._thread = thread
            thread.start()
            logger.info("Broadcast started (period=%.3fs)", self.config.period)

    def stop(self) -> None:
        """
        Stop the periodic driver.

        Does not join the thread: a firing may be waiting on the lock we
        hold. It sees its stop event and exits after at most one more tick,
        which finds no subscribers and sends nothing.
        """
        with self.lock:
            if self._stop_event is None or self._stop_event.is_set():
                return
            self._stop_event.set()
            logger.info("No active subscribers, broadcast stopped")

    def shutdown(self, timeout: float | None = 1.0) -> None:
        """Drop all subscribers, stop the driver and wait for its thread."""
        with self.lock:
            self._subscribers.clear()
            self.stop()
            thread = self._thread
            self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _run(self, stop_event: threading.Event) -> None:
        """Fixed-rate loop, first firing one period after start. Missed firings are skipped."""
        period = self.config.period
        next_fire = time.monotonic() + period
        while not stop_event.wait(max(0.0, next_fire - time.monotonic())):
            try:
                self.tick(stop_event)
            except Exception:
                logger.exception("Broadcast tick failed")

            next_fire += period
            now = time.monotonic()
            if next_fire < now:
                next_fire = now + period - (now - next_fire) % period

    # ═══════════════════════════════════════════════════════════════
    # ONE FIRING
    # ═══════════════════════════════════════════════════════════════

    def tick(self, stop_event: threading.Event | None = None) -> int:
        """
        Step, encode and fan out one snapshot.

        Args:
            stop_event: Stop flag of the driver thread calling us; a stopped
                driver does nothing even if it was already waiting on the lock

        Returns:
            Number of subscribers the payload was handed to
        """
        with self.lock:
            if stop_event is not None and stop_event.is_set():
                return 0
            if not self._subscribers:
                return 0

            snapshot = self.service.step()
            self.ticks += 1

            try:
                payload = self.encoder(snapshot)
            except Exception:
                logger.exception("Snapshot serialization failed, skipping broadcast")
                return 0

            delivered = 0
            for handle in list(self._subscribers):
                try:
                    handle.send(payload)
                    delivered += 1
                except Exception as exc:
                    logger.warning("Failed to send to subscriber %r: %s", handle, exc)
            return delivered
