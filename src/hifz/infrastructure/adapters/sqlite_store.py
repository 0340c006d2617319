"""
SQLite adapters.

The card collection is one JSON payload per namespace in a key-value
table, so reads and writes stay whole-collection like the file backend.
Review history gets its own table.
"""

import json
import logging
import sqlite3
from contextlib import closing
from pathlib import Path

from hifz.domain.constants import DEFAULT_NAMESPACE
from hifz.domain.errors import StoreUnavailableError
from hifz.domain.models import Card, Grade, ReviewEntry
from hifz.domain.ports import CardStore, ReviewLog

from .records import card_from_record, card_to_record

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS kv_store (
    namespace TEXT PRIMARY KEY,
    payload TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS reviews (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    namespace TEXT NOT NULL,
    card_id TEXT NOT NULL,
    reviewed_at INTEGER NOT NULL,
    grade TEXT NOT NULL,
    box INTEGER NOT NULL,
    interval_days INTEGER NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_reviews_namespace ON reviews(namespace, reviewed_at);
"""


def connect(db_path: Path) -> sqlite3.Connection:
    """Connect to the SQLite database and create tables if missing."""
    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(db_path))
        conn.row_factory = sqlite3.Row
        conn.executescript(SCHEMA_SQL)
    except (OSError, sqlite3.Error) as e:
        logger.error(f"Failed to open {db_path}: {e}")
        raise StoreUnavailableError(f"Cannot open {db_path}: {e}") from e
    return conn


class SqliteCardStore(CardStore):
    def __init__(self, db_path: Path, namespace: str = DEFAULT_NAMESPACE):
        self.db_path = Path(db_path)
        self.namespace = namespace

    def load(self) -> list[Card] | None:
        try:
            with closing(connect(self.db_path)) as conn:
                row = conn.execute(
                    "SELECT payload FROM kv_store WHERE namespace = ?", (self.namespace,)
                ).fetchone()
        except sqlite3.Error as e:
            logger.error(f"Failed to load cards from {self.db_path}: {e}")
            raise StoreUnavailableError(f"Cannot read {self.db_path}: {e}") from e

        if row is None:
            return None
        try:
            return [card_from_record(r) for r in json.loads(row["payload"])]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise StoreUnavailableError(f"Malformed card data in {self.db_path}: {e}") from e

    def save(self, cards: list[Card]) -> None:
        payload = json.dumps([card_to_record(c) for c in cards], ensure_ascii=False)
        try:
            with closing(connect(self.db_path)) as conn, conn:
                conn.execute(
                    """
                    INSERT INTO kv_store (namespace, payload) VALUES (?, ?)
                    ON CONFLICT(namespace) DO UPDATE SET payload = excluded.payload
                    """,
                    (self.namespace, payload),
                )
        except sqlite3.Error as e:
            logger.error(f"Failed to save cards to {self.db_path}: {e}")
            raise StoreUnavailableError(f"Cannot write {self.db_path}: {e}") from e


class SqliteReviewLog(ReviewLog):
    def __init__(self, db_path: Path, namespace: str = DEFAULT_NAMESPACE):
        self.db_path = Path(db_path)
        self.namespace = namespace

    def append(self, entry: ReviewEntry) -> None:
        try:
            with closing(connect(self.db_path)) as conn, conn:
                conn.execute(
                    """
                    INSERT INTO reviews (namespace, card_id, reviewed_at, grade, box, interval_days)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        self.namespace,
                        entry.card_id,
                        entry.reviewed_at,
                        entry.grade.value,
                        entry.box,
                        entry.interval,
                    ),
                )
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Cannot append review to {self.db_path}: {e}") from e

    def load(self) -> list[ReviewEntry]:
        try:
            with closing(connect(self.db_path)) as conn:
                rows = conn.execute(
                    """
                    SELECT card_id, reviewed_at, grade, box, interval_days FROM reviews
                    WHERE namespace = ?
                    ORDER BY reviewed_at ASC, id ASC
                    """,
                    (self.namespace,),
                ).fetchall()
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Cannot read reviews from {self.db_path}: {e}") from e

        try:
            return [
                ReviewEntry(
                    card_id=row["card_id"],
                    reviewed_at=row["reviewed_at"],
                    grade=Grade.parse(row["grade"]),
                    box=row["box"],
                    interval=row["interval_days"],
                )
                for row in rows
            ]
        except ValueError as e:
            raise StoreUnavailableError(f"Malformed review log in {self.db_path}: {e}") from e
