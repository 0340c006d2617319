import json
from contextlib import closing

import pytest
from conftest import DAY, T0

from hifz.application.seed import load_seed
from hifz.domain.errors import StoreUnavailableError
from hifz.domain.models import Card, Grade, ReviewEntry, SrsState
from hifz.infrastructure.adapters.sqlite_store import SqliteCardStore, SqliteReviewLog, connect


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "srs.sqlite3"


def test_uninitialized(db_path):
    assert SqliteCardStore(db_path).load() is None
    assert SqliteReviewLog(db_path).load() == []


def test_round_trip(db_path):
    cards = load_seed().build_cards(T0)
    cards[1] = cards[1].with_srs(
        SrsState(box=4, interval=14, due_date=T0 + 14 * DAY, last_reviewed=T0, ease_factor=1.3)
    )
    store = SqliteCardStore(db_path)

    store.save(cards)
    assert SqliteCardStore(db_path).load() == cards

    # Save replaces the whole collection
    store.save(cards[:1])
    assert SqliteCardStore(db_path).load() == cards[:1]


def test_namespaces_are_isolated(db_path):
    SqliteCardStore(db_path, namespace="a").save([Card(id="1", deck_id="d")])

    assert SqliteCardStore(db_path, namespace="b").load() is None


def test_review_log_ordered_by_time(db_path):
    log = SqliteReviewLog(db_path)
    later = ReviewEntry("b", T0 + DAY, Grade.HARD, 1, 1)
    earlier = ReviewEntry("a", T0, Grade.AGAIN, 1, 1)

    log.append(later)
    log.append(earlier)
    SqliteReviewLog(db_path, namespace="other").append(earlier)

    assert log.load() == [earlier, later]


def test_corrupt_database_raises(db_path):
    db_path.write_bytes(b"definitely not sqlite" * 100)

    with pytest.raises(StoreUnavailableError):
        SqliteCardStore(db_path).load()
    with pytest.raises(StoreUnavailableError):
        SqliteCardStore(db_path).save([])


def test_wrong_payload_shape_raises(db_path):
    with closing(connect(db_path)) as conn, conn:
        conn.execute(
            "INSERT INTO kv_store (namespace, payload) VALUES (?, ?)",
            ("ijtihad_srs_data", json.dumps(["garbage"])),
        )

    with pytest.raises(StoreUnavailableError, match="Malformed card data"):
        SqliteCardStore(db_path).load()


def test_unknown_grade_in_review_log_raises(db_path):
    with closing(connect(db_path)) as conn, conn:
        conn.execute(
            """
            INSERT INTO reviews (namespace, card_id, reviewed_at, grade, box, interval_days)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            ("ijtihad_srs_data", "a", T0, "bogus", 1, 1),
        )

    with pytest.raises(StoreUnavailableError, match="Malformed review log"):
        SqliteReviewLog(db_path).load()
