"""
DispatchGuard: keeps overlapping ticks from sending the same reminder twice.

Two layers:
1. A tick lock, so only one tick runs at a time. A tick that finds the lock
   held is skipped, not queued.
2. A per-reminder "last dispatched minute" marker, claimed atomically before
   a dispatch and dropped again if the dispatch fails.

Both live in Redis so Celery workers in different processes agree. When Redis
is not configured or errors, the guard falls back to process-local state.
"""

import logging
import threading
from contextlib import contextmanager

import redis
from django.conf import settings

logger = logging.getLogger(__name__)


class DispatchGuard:
    """Tick lock and dispatch markers, Redis-backed with an in-process fallback."""

    TICK_LOCK_KEY = "reminders:dispatch:tick"

    def __init__(self, redis_url: str | None = None):
        url = settings.REDIS_URL if redis_url is None else redis_url
        self.lock_timeout = settings.REMINDER_TICK_LOCK_TIMEOUT
        self.marker_ttl = settings.REMINDER_DISPATCH_MARKER_TTL

        self.redis_client = None
        if url:
            try:
                self.redis_client = redis.from_url(url)
            except Exception as e:
                logger.warning(f"Redis connection failed: {e}. Using in-process guard.")

        self._tick_lock = threading.Lock()
        self._markers: dict[str, str] = {}
        self._markers_lock = threading.Lock()

    def _get_marker_key(self, reminder_id: str, minute: str) -> str:
        """
        Generate Redis marker key.

        Format: reminders:dispatched:{reminder_id}:{minute}
        """
        return f"reminders:dispatched:{reminder_id}:{minute}"

    @contextmanager
    def hold_tick(self):
        """
        Try to take the tick lock without blocking.

        Yields:
            True if this caller holds the lock for the duration of the block,
            False if another tick is already running.
        """
        acquired, redis_lock = self._acquire_tick_lock()
        if not acquired:
            yield False
            return

        try:
            yield True
        finally:
            if redis_lock is None:
                self._tick_lock.release()
            else:
                self._release_redis_lock(redis_lock)

    def _acquire_tick_lock(self):
        """Return (acquired, redis_lock); redis_lock is None for the local lock."""
        if self.redis_client is not None:
            try:
                redis_lock = self.redis_client.lock(
                    self.TICK_LOCK_KEY, timeout=self.lock_timeout
                )
                return redis_lock.acquire(blocking=False), redis_lock
            except redis.RedisError as e:
                logger.warning(f"Redis tick lock unavailable: {e}. Using in-process lock.")

        return self._tick_lock.acquire(blocking=False), None

    def _release_redis_lock(self, redis_lock) -> None:
        try:
            redis_lock.release()
        except redis.RedisError as e:
            # LockError included: the lock expired while the tick was running
            logger.warning(f"Tick lock release failed: {e}")

    def claim(self, reminder_id: str, minute: str) -> bool:
        """
        Mark a reminder as dispatched for the given minute.

        Returns:
            True if the claim is new, False if the reminder was already
            dispatched (or is being dispatched) for this minute.
        """
        if self.redis_client is not None:
            key = self._get_marker_key(reminder_id, minute)
            try:
                return bool(self.redis_client.set(key, "1", nx=True, ex=self.marker_ttl))
            except redis.RedisError as e:
                logger.warning(f"Marker claim failed for {key}: {e}. Using in-process marker.")

        with self._markers_lock:
            if self._markers.get(reminder_id) == minute:
                return False
            self._markers[reminder_id] = minute
            return True

    def release(self, reminder_id: str, minute: str) -> None:
        """Drop a claim after a failed dispatch."""
        if self.redis_client is not None:
            key = self._get_marker_key(reminder_id, minute)
            try:
                self.redis_client.delete(key)
            except redis.RedisError as e:
                logger.warning(f"Marker release failed for {key}: {e}")

        with self._markers_lock:
            if self._markers.get(reminder_id) == minute:
                del self._markers[reminder_id]
