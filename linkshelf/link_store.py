"""
Link persistence: the LinkStore interface and its SQLite implementation.
"""

import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from .errors import DuplicateLinkError, LinkQueryFailedError, LinkSaveFailedError
from .logging_config import get_logger
from .models import CanonicalUrl, LinkRecord, Owner, OwnerSummary, PageMetadata

logger = get_logger("link_store")


class LinkStore(ABC):
    """Owner-scoped storage of link records"""

    @abstractmethod
    def create(self, owner: Owner, url: CanonicalUrl, category: str, metadata: PageMetadata) -> LinkRecord:
        """Insert a record. Raises DuplicateLinkError on an (owner, url) clash."""

    @abstractmethod
    def find_by_owner_and_url(self, owner: Owner, url: CanonicalUrl) -> Optional[LinkRecord]:
        """Find the owner's record with the same dedup key."""

    @abstractmethod
    def list_by_owner(self, owner: Owner, category: Optional[str] = None,
                      limit: Optional[int] = None) -> List[LinkRecord]:
        """List the owner's records, newest first."""

    @abstractmethod
    def get(self, owner: Owner, link_id: int) -> Optional[LinkRecord]:
        """Get one of the owner's records by id."""

    @abstractmethod
    def delete(self, owner: Owner, link_id: int) -> bool:
        """Delete one of the owner's records. Returns False if it did not exist."""

    @abstractmethod
    def count_by_owner(self, owner: Owner) -> int:
        """Count the owner's records."""

    @abstractmethod
    def record_open(self, owner: Owner, link_id: int) -> None:
        """Remember that the owner opened a link."""

    @abstractmethod
    def list_recently_opened(self, owner: Owner, limit: int = 5) -> List[LinkRecord]:
        """List distinct links the owner opened, most recent first."""

    def close(self) -> None:
        """Release any held resources."""


class SqliteLinkStore(LinkStore):
    """LinkStore backed by a SQLite database file"""

    COLUMNS = "id, url, category, title, description, thumbnail, created_at, updated_at"

    def __init__(self, db_path: Union[str, Path] = Path("linkshelf.db")):
        self.db_path = str(db_path)
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(self.db_path)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        if self.db_path != ":memory:":
            self._conn.execute("PRAGMA journal_mode=WAL")
        self._create_tables()

    def _create_tables(self) -> None:
        """Create tables if they don't exist."""
        self._conn.executescript("""
            CREATE TABLE IF NOT EXISTS links (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                owner_id INTEGER NOT NULL,
                url TEXT NOT NULL,
                url_key TEXT NOT NULL,
                category TEXT NOT NULL,
                title TEXT NOT NULL DEFAULT '',
                description TEXT NOT NULL DEFAULT '',
                thumbnail TEXT NOT NULL DEFAULT '',
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                UNIQUE (owner_id, url_key)
            );
            CREATE INDEX IF NOT EXISTS idx_links_owner_created
                ON links (owner_id, created_at);
            CREATE TABLE IF NOT EXISTS link_open_history (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                owner_id INTEGER NOT NULL,
                link_id INTEGER NOT NULL REFERENCES links (id) ON DELETE CASCADE,
                opened_at TEXT NOT NULL
            );
        """)
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()

    def _row_to_record(self, row: sqlite3.Row, owner: Owner) -> LinkRecord:
        """Convert a DB row to a LinkRecord."""
        return LinkRecord(
            id=row["id"],
            url=row["url"],
            category=row["category"],
            title=row["title"],
            description=row["description"],
            thumbnail=row["thumbnail"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
            owner=OwnerSummary.from_owner(owner),
        )

    def _query(self, owner: Owner, sql: str, params: tuple) -> List[LinkRecord]:
        try:
            rows = self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            logger.error("Link query failed for owner %s: %s", owner.id, e)
            raise LinkQueryFailedError() from e
        return [self._row_to_record(row, owner) for row in rows]

    def create(self, owner: Owner, url: CanonicalUrl, category: str, metadata: PageMetadata) -> LinkRecord:
        now = datetime.now().isoformat()
        try:
            with self._conn:
                cursor = self._conn.execute(
                    "INSERT INTO links (owner_id, url, url_key, category, title, description, "
                    "thumbnail, created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    (owner.id, url.url, url.key, category, metadata.title, metadata.description,
                     metadata.thumbnail, now, now),
                )
        except sqlite3.IntegrityError as e:
            logger.warning("Duplicate link for owner %s: %s", owner.id, url.key)
            raise DuplicateLinkError() from e
        except sqlite3.Error as e:
            logger.error("Failed to save link %s: %s", url.url, e)
            raise LinkSaveFailedError() from e

        return LinkRecord(
            id=cursor.lastrowid,
            url=url.url,
            category=category,
            title=metadata.title,
            description=metadata.description,
            thumbnail=metadata.thumbnail,
            created_at=datetime.fromisoformat(now),
            updated_at=datetime.fromisoformat(now),
            owner=OwnerSummary.from_owner(owner),
        )

    def find_by_owner_and_url(self, owner: Owner, url: CanonicalUrl) -> Optional[LinkRecord]:
        records = self._query(
            owner,
            f"SELECT {self.COLUMNS} FROM links WHERE owner_id = ? AND url_key = ?",
            (owner.id, url.key),
        )
        return records[0] if records else None

    def list_by_owner(self, owner: Owner, category: Optional[str] = None,
                      limit: Optional[int] = None) -> List[LinkRecord]:
        sql = f"SELECT {self.COLUMNS} FROM links WHERE owner_id = ?"
        params: tuple = (owner.id,)
        if category is not None:
            sql += " AND category = ?"
            params += (category,)
        sql += " ORDER BY created_at DESC, id DESC LIMIT ?"
        params += (limit if limit is not None else -1,)
        return self._query(owner, sql, params)

    def get(self, owner: Owner, link_id: int) -> Optional[LinkRecord]:
        records = self._query(
            owner,
            f"SELECT {self.COLUMNS} FROM links WHERE owner_id = ? AND id = ?",
            (owner.id, link_id),
        )
        return records[0] if records else None

    def delete(self, owner: Owner, link_id: int) -> bool:
        try:
            with self._conn:
                cursor = self._conn.execute(
                    "DELETE FROM links WHERE owner_id = ? AND id = ?", (owner.id, link_id)
                )
        except sqlite3.Error as e:
            logger.error("Failed to delete link %s: %s", link_id, e)
            raise LinkSaveFailedError() from e
        return cursor.rowcount > 0

    def count_by_owner(self, owner: Owner) -> int:
        try:
            row = self._conn.execute(
                "SELECT COUNT(*) FROM links WHERE owner_id = ?", (owner.id,)
            ).fetchone()
        except sqlite3.Error as e:
            logger.error("Link count failed for owner %s: %s", owner.id, e)
            raise LinkQueryFailedError() from e
        return row[0]

    def record_open(self, owner: Owner, link_id: int) -> None:
        try:
            with self._conn:
                self._conn.execute(
                    "INSERT INTO link_open_history (owner_id, link_id, opened_at) VALUES (?, ?, ?)",
                    (owner.id, link_id, datetime.now().isoformat()),
                )
        except sqlite3.Error as e:
            logger.error("Failed to record open of link %s: %s", link_id, e)
            raise LinkSaveFailedError() from e

    def list_recently_opened(self, owner: Owner, limit: int = 5) -> List[LinkRecord]:
        columns = ", ".join(f"l.{c.strip()}" for c in self.COLUMNS.split(","))
        return self._query(
            owner,
            f"SELECT {columns} FROM links l "
            "JOIN (SELECT link_id, MAX(id) AS last_open FROM link_open_history "
            "      WHERE owner_id = ? GROUP BY link_id) h ON h.link_id = l.id "
            "WHERE l.owner_id = ? ORDER BY h.last_open DESC LIMIT ?",
            (owner.id, owner.id, limit),
        )
