"""
Key-value backends for persisting daily usage records.
A record is stored as a JSON string under a single named key.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Dict, Optional, Protocol

from supabase import Client

from proheadshot.config import (
    QUOTA_BACKEND,
    QUOTA_FILE_PATH,
    SUPABASE_SERVICE_KEY,
    SUPABASE_URL,
    logger,
)

USAGE_TABLE = "device_daily_usage"


class QuotaStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class InMemoryQuotaStore:
    """Process-local store, used in tests and for the ``memory`` backend."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileQuotaStore:
    """All records kept in one JSON object on disk, keyed by record name."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = Lock()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Quota file {self.path} does not hold a JSON object")
        return data

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            try:
                data = self._load()
            except ValueError:
                logger.warning(
                    "Quota file unreadable, starting a fresh one",
                    extra={"path": str(self.path)},
                )
                data = {}
            data[key] = value
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(data), encoding="utf-8")
            tmp_path.replace(self.path)


class SupabaseQuotaStore:
    """Records kept in the ``device_daily_usage`` table (see database_schema.py)."""

    def __init__(self, client: Optional[Client] = None):
        self._client = client

    def _get_client(self) -> Client:
        if self._client is None:
            if not SUPABASE_URL or not SUPABASE_SERVICE_KEY:
                error_msg = "SUPABASE_URL or SUPABASE_SERVICE_KEY is not configured"
                logger.error(error_msg)
                raise ValueError(error_msg)

            from supabase import create_client

            self._client = create_client(SUPABASE_URL, SUPABASE_SERVICE_KEY)
            logger.info("Supabase client initialized successfully for quota storage")

        return self._client

    def get(self, key: str) -> Optional[str]:
        response = (
            self._get_client()
            .table(USAGE_TABLE)
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("value")

    def set(self, key: str, value: str) -> None:
        self._get_client().table(USAGE_TABLE).upsert(
            {
                "key": key,
                "value": value,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            },
            on_conflict="key",
        ).execute()


def create_quota_store(backend: str = QUOTA_BACKEND) -> QuotaStore:
    """Build the store selected by ``QUOTA_BACKEND``."""
    if backend == "memory":
        return InMemoryQuotaStore()
    if backend == "file":
        return JsonFileQuotaStore(QUOTA_FILE_PATH)
    if backend == "supabase":
        return SupabaseQuotaStore()
    raise ValueError(f"Unknown QUOTA_BACKEND: {backend}")


__all__ = [
    "QuotaStore",
    "InMemoryQuotaStore",
    "JsonFileQuotaStore",
    "SupabaseQuotaStore",
    "create_quota_store",
]
