#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/asapnotes/server/heartbeat.py
"""Liveness monitoring for the notes server.

The browser editor pings the server periodically. When the tab is closed
the pings stop, and the monitor asks the server to shut itself down.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from asapnotes.constants import DEFAULT_HEARTBEAT_CHECK_INTERVAL, DEFAULT_HEARTBEAT_TIMEOUT

logger = logging.getLogger(__name__)


class LivenessMonitor:
    """Track client pings and fire a callback once they stop.

    Parameters
    ----------
    timeout : float, default 60.0
        Seconds without a ping after which the client is considered gone
    check_interval : float, default 10.0
        Seconds between checks in the background thread
    on_expire : callable, optional
        Called once, from the monitor thread, when the timeout elapses
    clock : callable, default time.monotonic
        Time source, in seconds

    """

    def __init__(
        self,
        timeout: float = DEFAULT_HEARTBEAT_TIMEOUT,
        check_interval: float = DEFAULT_HEARTBEAT_CHECK_INTERVAL,
        on_expire: Optional[Callable[[], None]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        if check_interval <= 0:
            raise ValueError(f"check_interval must be positive, got {check_interval}")

        self.timeout = timeout
        self.check_interval = check_interval
        self.on_expire = on_expire
        self._clock = clock
        self._lock = threading.Lock()
        self._last_ping = clock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._expired = False

    def ping(self) -> None:
        """Record that the client is still alive."""
        with self._lock:
            self._last_ping = self._clock()

    def seconds_since_ping(self) -> float:
        with self._lock:
            return self._clock() - self._last_ping

    def is_expired(self) -> bool:
        """Return True when no ping arrived within the timeout."""
        return self.seconds_since_ping() > self.timeout

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background check thread; a no-op if already running."""
        if self.running:
            return
        self.ping()
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="asapnotes-liveness", daemon=True)
        self._thread.start()
        logger.debug("Liveness monitor started (timeout=%ss, interval=%ss)", self.timeout, self.check_interval)

    def stop(self) -> None:
        """Stop the background thread and wait for it to exit."""
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.check_interval + 1.0)
        self._thread = None

    def check(self) -> bool:
        """Run one check, firing ``on_expire`` the first time the client is gone.

        Returns
        -------
        bool
            True if the monitor has expired

        """
        if self._expired:
            return True
        if not self.is_expired():
            return False

        self._expired = True
        logger.info("No heartbeat for %s seconds, shutting down...", self.timeout)
        if self.on_expire is not None:
            self.on_expire()
        return True

    def _run(self) -> None:
        while not self._stop_event.wait(self.check_interval):
            if self.check():
                break
