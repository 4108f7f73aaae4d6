import sqlite3

import pytest

from habitual import db
from habitual.core.errors import StoreError


def table_names(conn: sqlite3.Connection) -> set[str]:
    rows = conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
    return {r[0] for r in rows}


def test_init_creates_schema(tmp_habitual_dir):
    with db.get_db() as conn:
        names = table_names(conn)
    assert "blobs" in names
    assert db.MIGRATIONS_TABLE in names


def test_migrations_recorded_once(tmp_habitual_dir):
    db.init()
    with db.get_db() as conn:
        assert db.applied_migrations(conn) == {name for name, _ in db.MIGRATIONS}
        count = conn.execute(f"SELECT COUNT(*) FROM {db.MIGRATIONS_TABLE}").fetchone()[0]
    assert count == len(db.MIGRATIONS)


def test_get_db_auto_commit(tmp_habitual_dir):
    with db.get_db() as conn:
        conn.execute("INSERT INTO blobs (key, value) VALUES (?, ?)", ("k", "v"))
    with db.get_db() as conn:
        assert conn.execute("SELECT value FROM blobs WHERE key = 'k'").fetchone()[0] == "v"


def test_get_db_auto_rollback(tmp_habitual_dir):
    try:
        with db.get_db() as conn:
            conn.execute("INSERT INTO blobs (key, value) VALUES (?, ?)", ("k", "v"))
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    with db.get_db() as conn:
        assert conn.execute("SELECT value FROM blobs WHERE key = 'k'").fetchone() is None


def test_init_custom_path(tmp_path):
    path = tmp_path / "nested" / "other.db"
    db.init(path)
    with db.get_db(path) as conn:
        assert "blobs" in table_names(conn)


def test_init_rejects_non_database_file(tmp_path):
    path = tmp_path / "habitual.db"
    path.write_bytes(b"this is not a sqlite database" * 64)
    with pytest.raises(StoreError, match="cannot open store"):
        db.init(path)


def test_failed_snapshot_raises_store_error(tmp_path):
    path = tmp_path / "habitual.db"
    path.write_bytes(b"this is not a sqlite database" * 64)
    with pytest.raises(StoreError, match="cannot back up"):
        db._snapshot(path)
    assert list(tmp_path.glob("*.backup")) == []
