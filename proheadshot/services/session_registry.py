"""Per-device orchestrator sessions held in process memory."""

from __future__ import annotations

from collections import OrderedDict
from typing import Callable, Optional

from proheadshot.config import DAILY_GENERATION_LIMIT, QUOTA_STORAGE_KEY, logger
from proheadshot.core.gemini import ImageServiceAdapter
from proheadshot.core.quota_store import QuotaStore
from proheadshot.core.rate_limit import QuotaTracker, today_key
from proheadshot.services.generation_service import GenerationOrchestrator

MAX_SESSIONS = 1000


class SessionRegistry:
    """
    Hands out one GenerationOrchestrator per device id.

    All sessions share a quota store; each device has its own usage record.
    Least recently used sessions are evicted past ``max_sessions``; their
    usage records stay in the store. A session that is generating is kept.
    """

    def __init__(
        self,
        store: QuotaStore,
        adapter: ImageServiceAdapter,
        limit: int = DAILY_GENERATION_LIMIT,
        clock: Callable[[], str] = today_key,
        max_sessions: int = MAX_SESSIONS,
    ):
        self.store = store
        self.adapter = adapter
        self.limit = limit
        self.clock = clock
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, GenerationOrchestrator] = OrderedDict()

    def quota_key(self, device_id: str) -> str:
        return f"{QUOTA_STORAGE_KEY}:{device_id}"

    def get(self, device_id: str) -> GenerationOrchestrator:
        session = self._sessions.get(device_id)
        if session is not None:
            self._sessions.move_to_end(device_id)
            return session

        tracker = QuotaTracker(self.store, key=self.quota_key(device_id), limit=self.limit)
        session = GenerationOrchestrator(tracker, self.adapter, clock=self.clock)
        self._sessions[device_id] = session
        logger.info("Session created", extra={"device_id": device_id})

        self._evict(keep=device_id)
        return session

    def _evict(self, keep: str) -> None:
        # Sessions with a request in flight are never evicted, so the registry
        # may stay over capacity until those requests finish.
        overflow = len(self._sessions) - self.max_sessions
        if overflow <= 0:
            return
        idle_ids = [
            device_id
            for device_id, session in self._sessions.items()
            if device_id != keep and not session.is_generating
        ]
        for evicted_id in idle_ids[:overflow]:
            del self._sessions[evicted_id]
            logger.info("Session evicted", extra={"device_id": evicted_id})

    def peek(self, device_id: str) -> Optional[GenerationOrchestrator]:
        return self._sessions.get(device_id)

    def __len__(self) -> int:
        return len(self._sessions)


__all__ = ["SessionRegistry", "MAX_SESSIONS"]
