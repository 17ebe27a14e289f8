"""
Session sweeper service.

Background thread that periodically evicts expired sessions from memory.
Purely advisory: AuthService.validate() enforces expiry on its own, so a
late or skipped sweep only costs memory.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from filmfolio.services.auth_svc import AuthService

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL_S = 3600.0


class SessionSweeperService:
    """Runs AuthService.cleanup_expired_sessions() every ``interval_s`` seconds."""

    def __init__(self, auth_service: AuthService, interval_s: float = DEFAULT_SWEEP_INTERVAL_S) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be > 0")
        self.auth_service = auth_service
        self.interval_s = interval_s
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the sweep thread."""
        if self.is_running:
            logger.warning("[SessionSweeper] Already running")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._sweep_loop,
            daemon=True,
            name="SessionSweeper",
        )
        self._thread.start()
        logger.info(f"[SessionSweeper] Started (interval={self.interval_s}s)")

    def stop(self) -> None:
        """Signal the thread and wait briefly for it to exit."""
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=2)
            self._thread = None
        logger.info("[SessionSweeper] Stopped")

    def sweep_once(self) -> int:
        return self.auth_service.cleanup_expired_sessions()

    def _sweep_loop(self) -> None:
        # wait() returns True once stop() is called
        while not self._stop_event.wait(self.interval_s):
            try:
                self.sweep_once()
            except Exception as e:
                # Keep the thread alive; the next tick retries
                logger.error(f"[SessionSweeper] Sweep failed: {e}", exc_info=True)
