"""
Daily generation quota per device.
Allows DAILY_GENERATION_LIMIT attempts per calendar day (client local date).
Storage faults never deny service: reads fail open and writes are best-effort.
"""

import json
from datetime import date
from typing import Any, Dict, Optional

from proheadshot.config import DAILY_GENERATION_LIMIT, QUOTA_STORAGE_KEY, logger
from proheadshot.core.quota_store import QuotaStore


def today_key(today: Optional[date] = None) -> str:
    """Render a calendar date as a day key, e.g. ``"Mon Oct 19 2026"``."""
    today = today or date.today()
    return today.strftime("%a %b %d %Y")


class QuotaTracker:
    """Read-then-write usage counter over a single named record."""

    def __init__(
        self,
        store: QuotaStore,
        key: str = QUOTA_STORAGE_KEY,
        limit: int = DAILY_GENERATION_LIMIT,
    ):
        self.store = store
        self.key = key
        self.limit = limit

    def _read_record(self) -> Optional[Dict[str, Any]]:
        """Return the stored record, raising on storage or parse failures."""
        raw = self.store.get(self.key)
        if raw is None:
            return None

        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"Usage record is not an object: {raw!r}")

        count = data.get("count")
        if not isinstance(count, int) or isinstance(count, bool) or count < 0:
            raise ValueError(f"Usage record has invalid count: {raw!r}")
        if not isinstance(data.get("date"), str):
            raise ValueError(f"Usage record has invalid date: {raw!r}")

        return data

    def used_today(self, today: str) -> int:
        """Attempts charged on ``today``. Raises on storage faults."""
        record = self._read_record()
        if record is None or record["date"] != today:
            return 0
        return record["count"]

    def may_generate(self, today: str) -> bool:
        try:
            used = self.used_today(today)
        except Exception as exc:
            logger.error(
                f"Error reading usage data, allowing generation: {exc}",
                extra={"quota_key": self.key},
            )
            return True

        allowed = used < self.limit
        logger.debug(
            "Quota check",
            extra={
                "quota_key": self.key,
                "today": today,
                "used": used,
                "limit": self.limit,
                "allowed": allowed,
            },
        )
        return allowed

    def record_attempt(self, today: str) -> None:
        try:
            count = self.used_today(today)
        except Exception as exc:
            logger.warning(
                f"Stored usage unreadable, restarting count: {exc}",
                extra={"quota_key": self.key},
            )
            count = 0

        try:
            self.store.set(self.key, json.dumps({"date": today, "count": count + 1}))
        except Exception as exc:
            logger.error(
                f"Failed to save usage: {exc}", extra={"quota_key": self.key}
            )
            return

        logger.info(
            "Generation attempt recorded",
            extra={"quota_key": self.key, "today": today, "count": count + 1},
        )

    def status(self, today: str) -> Dict[str, Any]:
        """
        Report quota usage without charging an attempt.

        Returns:
            Dict containing:
                - allowed: bool - Whether another attempt is allowed
                - remaining: int - Attempts left today
                - total_today: int - Attempts charged today
                - limit: int - Daily allowance
        """
        try:
            used = self.used_today(today)
        except Exception as exc:
            logger.error(f"Error reading usage data for status: {exc}")
            used = 0

        return {
            "allowed": used < self.limit,
            "remaining": max(0, self.limit - used),
            "total_today": used,
            "limit": self.limit,
        }


__all__ = ["QuotaTracker", "today_key"]
