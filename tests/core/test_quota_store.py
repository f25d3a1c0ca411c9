"""Tests for the quota store backends."""

import json
from unittest.mock import MagicMock

import pytest

from proheadshot.core.quota_store import (
    InMemoryQuotaStore,
    JsonFileQuotaStore,
    SupabaseQuotaStore,
    USAGE_TABLE,
    create_quota_store,
)


def test_in_memory_store_get_set():
    store = InMemoryQuotaStore()

    assert store.get("usage") is None
    store.set("usage", '{"date": "d", "count": 1}')
    assert store.get("usage") == '{"date": "d", "count": 1}'


def test_file_store_missing_file_reads_none(tmp_path):
    store = JsonFileQuotaStore(tmp_path / "usage.json")

    assert store.get("usage") is None


def test_file_store_persists_between_instances(tmp_path):
    path = tmp_path / "usage.json"
    JsonFileQuotaStore(path).set("a", "1")
    JsonFileQuotaStore(path).set("b", "2")

    reopened = JsonFileQuotaStore(path)
    assert reopened.get("a") == "1"
    assert reopened.get("b") == "2"
    assert json.loads(path.read_text()) == {"a": "1", "b": "2"}


def test_file_store_corrupt_file_raises_on_read(tmp_path):
    path = tmp_path / "usage.json"
    path.write_text("{not json")

    with pytest.raises(ValueError):
        JsonFileQuotaStore(path).get("a")


def test_file_store_overwrites_corrupt_file_on_write(tmp_path):
    path = tmp_path / "usage.json"
    path.write_text("[]")
    store = JsonFileQuotaStore(path)

    store.set("a", "1")

    assert store.get("a") == "1"


def test_supabase_store_reads_value():
    client = MagicMock()
    query = client.table.return_value.select.return_value.eq.return_value.limit.return_value
    query.execute.return_value.data = [{"value": '{"date": "d", "count": 4}'}]

    store = SupabaseQuotaStore(client=client)

    assert store.get("usage:dev") == '{"date": "d", "count": 4}'
    client.table.assert_called_with(USAGE_TABLE)
    client.table.return_value.select.return_value.eq.assert_called_with("key", "usage:dev")


def test_supabase_store_missing_row():
    client = MagicMock()
    query = client.table.return_value.select.return_value.eq.return_value.limit.return_value
    query.execute.return_value.data = []

    assert SupabaseQuotaStore(client=client).get("usage") is None


def test_supabase_store_upserts():
    client = MagicMock()

    SupabaseQuotaStore(client=client).set("usage", "v")

    row = client.table.return_value.upsert.call_args.args[0]
    assert row["key"] == "usage"
    assert row["value"] == "v"
    assert client.table.return_value.upsert.call_args.kwargs == {"on_conflict": "key"}
    client.table.return_value.upsert.return_value.execute.assert_called_once()


def test_create_quota_store_backends():
    assert isinstance(create_quota_store("memory"), InMemoryQuotaStore)
    assert isinstance(create_quota_store("file"), JsonFileQuotaStore)
    assert isinstance(create_quota_store("supabase"), SupabaseQuotaStore)

    with pytest.raises(ValueError):
        create_quota_store("redis")
