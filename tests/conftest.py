import logging

import pytest

from hifz.application.scheduler import ReviewScheduler
from hifz.domain.errors import StoreUnavailableError
from hifz.domain.models import Card, SrsState
from hifz.domain.ports import CardStore
from hifz.infrastructure.adapters.memory_store import InMemoryCardStore, InMemoryReviewLog
from hifz.infrastructure.clock import ManualClock

# 2023-11-14 22:13:20 UTC
T0 = 1_700_000_000_000
DAY = 86_400_000


class BrokenCardStore(CardStore):
    """A store whose backend is gone."""

    def load(self):
        raise StoreUnavailableError("disk on fire")

    def save(self, cards):
        raise StoreUnavailableError("disk on fire")


def make_card(card_id: str, deck_id: str = "nawawi40", box: int = 0, due: int = T0, **kw) -> Card:
    return Card(
        id=card_id,
        deck_id=deck_id,
        title=kw.pop("title", f"Card {card_id}"),
        srs=SrsState(box=box, interval=kw.pop("interval", 0), due_date=due, **kw),
    )


@pytest.fixture
def clock():
    return ManualClock(T0)


@pytest.fixture
def store():
    return InMemoryCardStore()


@pytest.fixture
def review_log():
    return InMemoryReviewLog()


@pytest.fixture
def scheduler(store, clock, review_log):
    return ReviewScheduler(store=store, clock=clock, review_log=review_log)


@pytest.fixture
def hifz_logger():
    """The package logger, restored to its level after the test."""
    logger = logging.getLogger("hifz")
    level = logger.level
    yield logger
    logger.setLevel(level)


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Isolate config files and the default data dir
    monkeypatch.setenv("HOME", str(home))
    for var in ("BACKEND", "DATA_DIR", "NAMESPACE", "SEED_FILE", "VERBOSE"):
        monkeypatch.delenv(f"HIFZ_{var}", raising=False)
    return home
