# tests/test_kv_store.py

from __future__ import annotations

import sqlite3
from pathlib import Path

from todo_tracker.storage.kv_store import MemoryKeyValueStore, SqliteKeyValueStore
from todo_tracker.tasks.task_manager import TaskManager


def test_sqlite_save_load_remove(tmp_path: Path) -> None:
    store = SqliteKeyValueStore(tmp_path / "kv.sqlite3")

    assert store.load("items", []) == []
    store.save("items", [{"id": 1, "text": "Buy milk"}])
    store.save("nextId", 2)

    assert store.load("items") == [{"id": 1, "text": "Buy milk"}]
    assert store.load("nextId", 1) == 2
    assert store.keys() == ["items", "nextId"]

    store.save("nextId", 5)
    assert store.load("nextId") == 5

    store.remove("items")
    assert store.load("items", "default") == "default"


def test_sqlite_values_survive_new_instance(tmp_path: Path) -> None:
    db = tmp_path / "kv.sqlite3"
    SqliteKeyValueStore(db).save("items", ["a", "b"])
    assert SqliteKeyValueStore(db).load("items") == ["a", "b"]


def test_sqlite_clear_only_touches_own_namespace(tmp_path: Path) -> None:
    db = tmp_path / "kv.sqlite3"
    mine = SqliteKeyValueStore(db, namespace="todos")
    # A LIKE 'todos_%' prefix match would also hit this namespace.
    other = SqliteKeyValueStore(db, namespace="todosX")

    mine.save("items", [1])
    other.save("items", [2])

    mine.clear()
    assert mine.load("items") is None
    assert other.load("items") == [2]


def test_sqlite_bad_json_returns_default(tmp_path: Path) -> None:
    db = tmp_path / "kv.sqlite3"
    store = SqliteKeyValueStore(db)
    conn = sqlite3.connect(str(db))
    try:
        conn.execute(
            "INSERT INTO kv(key, value, updated_at) VALUES (?, ?, ?)",
            ("todos_items", "{not json", 0.0),
        )
        conn.commit()
    finally:
        conn.close()

    assert store.load("items", []) == []


def test_sqlite_unserializable_value_is_not_raised(tmp_path: Path) -> None:
    store = SqliteKeyValueStore(tmp_path / "kv.sqlite3")
    store.save("items", object())
    assert store.load("items", "missing") == "missing"


def test_memory_store_returns_fresh_objects() -> None:
    store = MemoryKeyValueStore()
    value = [{"id": 1}]
    store.save("items", value)
    value.append({"id": 2})

    loaded = store.load("items")
    assert loaded == [{"id": 1}]
    loaded.append("x")
    assert store.load("items") == [{"id": 1}]


def test_memory_store_clear_by_namespace() -> None:
    store = MemoryKeyValueStore(namespace="a")
    store.save("k", 1)
    store.clear()
    assert store.load("k") is None
    assert store.keys() == []


def test_manager_round_trip_through_sqlite(tmp_path: Path) -> None:
    db = tmp_path / "todos.sqlite3"
    manager = TaskManager(SqliteKeyValueStore(db))
    manager.add_task("A")
    manager.add_task("B")
    manager.toggle_completion(2)
    manager.archive_completed()

    reloaded = TaskManager(SqliteKeyValueStore(db))
    assert [t.text for t in reloaded.active] == ["A"]
    assert [t.text for t in reloaded.archived] == ["B"]
    assert reloaded.archived[0].completed_at is not None
    assert reloaded.next_id == 3


def test_sqlite_keys_failure_returns_empty(tmp_path: Path) -> None:
    db = tmp_path / "kv.sqlite3"
    store = SqliteKeyValueStore(db)
    store.save("items", [1])

    conn = sqlite3.connect(str(db))
    try:
        conn.execute("DROP TABLE kv")
        conn.commit()
    finally:
        conn.close()

    assert store.keys() == []
