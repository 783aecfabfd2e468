import sqlite3
import threading
from pathlib import Path
from typing import List, Optional, Tuple

from ogclaim.utils.logger import get_logger

logger = get_logger("storage.sqlite")


class SQLiteAdapter:
    """
    SQLite backend for registry state.

    Provides:
    1. Root history (every published root, by version)
    2. Claim flags (token_id -> claimer, root version)
    3. Registry metadata (owner address)

    Token IDs are uint256 and exceed SQLite's 64-bit INTEGER, so they are
    stored as decimal TEXT.
    """

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self._conn_local = threading.local()

        if not db_path.parent.exists():
            db_path.parent.mkdir(parents=True, exist_ok=True)

        self._init_schema()

    def _get_conn(self) -> sqlite3.Connection:
        """Get or create connection for current thread."""
        if not hasattr(self._conn_local, "conn"):
            self._conn_local.conn = sqlite3.connect(
                self.db_path,
                timeout=30.0,
                check_same_thread=False
            )
            self._conn_local.conn.row_factory = sqlite3.Row
            self._conn_local.conn.execute("PRAGMA journal_mode=WAL;")
            self._conn_local.conn.execute("PRAGMA synchronous=NORMAL;")
        return self._conn_local.conn

    def _init_schema(self):
        """Initialize database schema."""
        conn = self._get_conn()
        with conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS roots (
                    version INTEGER PRIMARY KEY,
                    root BLOB NOT NULL,
                    published_at INTEGER NOT NULL,
                    leaf_count INTEGER NOT NULL DEFAULT 0
                )
            """)

            # Written once per token; never updated
            conn.execute("""
                CREATE TABLE IF NOT EXISTS claims (
                    token_id TEXT PRIMARY KEY,
                    claimer BLOB NOT NULL,
                    root_version INTEGER NOT NULL,
                    claimed_at INTEGER NOT NULL
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS registry_meta (
                    key TEXT PRIMARY KEY,
                    value TEXT
                )
            """)
        logger.debug(f"SQLite schema ready at {self.db_path}")

    def close(self):
        """Close this thread's connection."""
        conn = getattr(self._conn_local, "conn", None)
        if conn is not None:
            conn.close()
            del self._conn_local.conn

    # =========================================================================
    # Root History
    # =========================================================================

    def save_root(self, version: int, root: bytes, published_at: int, leaf_count: int):
        conn = self._get_conn()
        with conn:
            conn.execute(
                "INSERT INTO roots (version, root, published_at, leaf_count) VALUES (?, ?, ?, ?)",
                (version, root, published_at, leaf_count)
            )

    def get_all_roots(self) -> List[Tuple[int, bytes, int, int]]:
        """Get all (version, root, published_at, leaf_count) ordered by version."""
        conn = self._get_conn()
        cursor = conn.execute(
            "SELECT version, root, published_at, leaf_count FROM roots ORDER BY version ASC"
        )
        return [(row['version'], bytes(row['root']), row['published_at'], row['leaf_count']) for row in cursor]

    # =========================================================================
    # Claims
    # =========================================================================

    def save_claim(self, token_id: int, claimer: bytes, root_version: int, claimed_at: int) -> bool:
        """
        Record a claim.

        Returns:
            False if the token was already claimed
        """
        conn = self._get_conn()
        with conn:
            cursor = conn.execute(
                "INSERT OR IGNORE INTO claims (token_id, claimer, root_version, claimed_at) VALUES (?, ?, ?, ?)",
                (str(token_id), claimer, root_version, claimed_at)
            )
        return cursor.rowcount == 1

    def get_claim(self, token_id: int) -> Optional[Tuple[bytes, int, int]]:
        """Get (claimer, root_version, claimed_at) for a token."""
        conn = self._get_conn()
        cursor = conn.execute(
            "SELECT claimer, root_version, claimed_at FROM claims WHERE token_id = ?",
            (str(token_id),)
        )
        row = cursor.fetchone()
        return (bytes(row['claimer']), row['root_version'], row['claimed_at']) if row else None

    def get_all_claims(self) -> List[Tuple[int, bytes, int, int]]:
        """Get all (token_id, claimer, root_version, claimed_at)."""
        conn = self._get_conn()
        cursor = conn.execute("SELECT token_id, claimer, root_version, claimed_at FROM claims")
        return [
            (int(row['token_id']), bytes(row['claimer']), row['root_version'], row['claimed_at'])
            for row in cursor
        ]

    def get_claims_count(self) -> int:
        conn = self._get_conn()
        cursor = conn.execute("SELECT COUNT(*) as cnt FROM claims")
        return cursor.fetchone()['cnt']

    # =========================================================================
    # Registry Metadata
    # =========================================================================

    def set_meta(self, key: str, value: str):
        conn = self._get_conn()
        with conn:
            conn.execute("INSERT OR REPLACE INTO registry_meta (key, value) VALUES (?, ?)", (key, value))

    def get_meta(self, key: str) -> Optional[str]:
        conn = self._get_conn()
        cursor = conn.execute("SELECT value FROM registry_meta WHERE key = ?", (key,))
        row = cursor.fetchone()
        return row['value'] if row else None
