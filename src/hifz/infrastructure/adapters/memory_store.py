from hifz.domain.models import Card, ReviewEntry
from hifz.domain.ports import CardStore, ReviewLog


class InMemoryCardStore(CardStore):
    """Process-local card store. Starts uninitialized unless ``cards`` is given."""

    def __init__(self, cards: list[Card] | None = None):
        self._cards = list(cards) if cards is not None else None
        self.save_count = 0

    def load(self) -> list[Card] | None:
        return list(self._cards) if self._cards is not None else None

    def save(self, cards: list[Card]) -> None:
        self._cards = list(cards)
        self.save_count += 1


class InMemoryReviewLog(ReviewLog):
    def __init__(self, entries: list[ReviewEntry] | None = None):
        self._entries = list(entries or [])

    def append(self, entry: ReviewEntry) -> None:
        self._entries.append(entry)

    def load(self) -> list[ReviewEntry]:
        return list(self._entries)
