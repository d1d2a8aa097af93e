"""Background task that deletes expired sessions on a fixed interval."""

import asyncio
import logging

from shoal.services.store import Store

logger = logging.getLogger("shoal.reaper")


class SessionReaper:
    """Periodically reap expired sessions (and, by cascade, their fish)."""

    def __init__(self, store: Store, interval_seconds: float = 60.0):
        self.store = store
        self.interval_seconds = interval_seconds
        self.running = False
        self._stopped = asyncio.Event()

    async def start(self) -> None:
        """Run the reaper loop until stop() is called.

        A failed cycle is logged and the loop carries on with the next tick.
        """
        self.running = True
        self._stopped.clear()
        logger.info(f"Session reaper started (interval: {self.interval_seconds}s)")

        while self.running:
            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                pass
            if not self.running:
                break

            try:
                await self.reap_once()
            except Exception as e:
                logger.exception(f"Error reaping sessions: {e}")

    async def reap_once(self) -> list[str]:
        """Run a single reap cycle and return the deleted session ids."""
        sessions = await self.store.reap_expired_sessions()
        if sessions:
            logger.info(f"Deleted expired sessions: {sessions}")
        else:
            logger.debug("No expired sessions")
        return sessions

    def stop(self) -> None:
        """Stop the reaper loop."""
        self.running = False
        self._stopped.set()
        logger.info("Session reaper stopped")
