# habitual/db.py
import logging
import shutil
import sqlite3
from collections.abc import Callable
from contextlib import closing, contextmanager
from datetime import datetime
from pathlib import Path

from fncli import cli

from . import config
from .core.errors import StoreError
from .lib.errors import echo

logger = logging.getLogger(__name__)

MIGRATIONS_TABLE = "_migrations"

MigrationFn = Callable[[sqlite3.Connection], None]
Migration = tuple[str, str | MigrationFn]

MIGRATIONS: list[Migration] = [
    (
        "0001_blobs",
        """
        CREATE TABLE IF NOT EXISTS blobs (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """,
    ),
]


def _connect(db_path: Path) -> sqlite3.Connection:
    try:
        conn = sqlite3.connect(db_path, timeout=30)
    except sqlite3.Error as e:
        raise StoreError(f"cannot open store {db_path}: {e}") from e
    try:
        conn.execute("PRAGMA journal_mode=WAL")
    except sqlite3.Error as e:
        conn.close()
        raise StoreError(f"cannot open store {db_path}: {e}") from e
    return conn


@contextmanager
def get_db(db_path: Path | None = None):
    conn = _connect(db_path or config.DB_PATH)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def _snapshot(db_path: Path) -> Path:
    """Copy the live database next to itself before migrating."""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    snapshot = db_path.with_name(f"{db_path.stem}.{stamp}.backup")
    try:
        with closing(sqlite3.connect(db_path)) as src, closing(sqlite3.connect(snapshot)) as dst:
            src.backup(dst)
    except sqlite3.Error as e:
        snapshot.unlink(missing_ok=True)
        raise StoreError(f"cannot back up {db_path} before migrating: {e}") from e
    return snapshot


def applied_migrations(conn: sqlite3.Connection) -> set[str]:
    return {name for (name,) in conn.execute(f"SELECT name FROM {MIGRATIONS_TABLE}")}  # noqa: S608


def _has_user_tables(conn: sqlite3.Connection) -> bool:
    row = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name != ? AND name NOT LIKE 'sqlite_%' LIMIT 1",
        (MIGRATIONS_TABLE,),
    ).fetchone()
    return row is not None


def _run(conn: sqlite3.Connection, name: str, migration: str | MigrationFn) -> None:
    if callable(migration):
        migration(conn)
    else:
        conn.executescript(migration)
    conn.execute(f"INSERT OR IGNORE INTO {MIGRATIONS_TABLE} (name) VALUES (?)", (name,))  # noqa: S608
    conn.commit()


def _apply_migrations(conn: sqlite3.Connection, db_path: Path) -> None:
    conn.execute(
        f"CREATE TABLE IF NOT EXISTS {MIGRATIONS_TABLE} ("
        "id INTEGER PRIMARY KEY AUTOINCREMENT, "
        "name TEXT NOT NULL UNIQUE, "
        "applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP)"
    )
    conn.commit()

    done = applied_migrations(conn)
    pending = sorted((m for m in MIGRATIONS if m[0] not in done), key=lambda m: m[0])
    if not pending:
        return

    snapshot = _snapshot(db_path) if _has_user_tables(conn) else None
    for name, migration in pending:
        try:
            _run(conn, name, migration)
        except Exception:
            conn.rollback()
            logger.warning("migration %s failed", name)
            if snapshot:
                shutil.copy2(snapshot, db_path)
            raise
        logger.info("applied migration %s", name)

    if snapshot:
        snapshot.unlink(missing_ok=True)


def init(db_path: Path | None = None) -> None:
    db_path = db_path or config.DB_PATH
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with closing(_connect(db_path)) as conn:
        _apply_migrations(conn, db_path)


@cli("habitual db", name="migrate")
def db_migrate():
    """Run pending store migrations"""
    init()
    echo(f"store up to date ({len(MIGRATIONS)} migrations)")
