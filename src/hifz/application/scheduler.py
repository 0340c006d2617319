"""
Leitner review scheduler.

Decides the next box and due date for a graded card and answers which
cards of a deck are due. Cards move through boxes 0 (new) to 5
(mastered); each box maps to a fixed review interval.
"""

import logging

from hifz.domain.constants import INTERVALS, MAX_BOX, MS_PER_DAY
from hifz.domain.errors import CardNotFoundError
from hifz.domain.models import Card, Deck, Grade, ReviewEntry, SchedulerStats, SrsState
from hifz.domain.ports import CardStore, Clock, ReviewLog

from .seed import SeedSet, load_seed
from .streak import compute_streak

logger = logging.getLogger(__name__)


def interval_for_box(box: int) -> int:
    """Interval in days for a box in 1..5; boxes past the table reuse the last interval."""
    return INTERVALS[min(max(box, 1) - 1, len(INTERVALS) - 1)]


def schedule_next(state: SrsState, grade: Grade | str, now: int) -> SrsState:
    """
    Compute the review state after grading a card at ``now``.

    Transition table:
        again -> box 1, interval 1
        hard  -> box max(1, box)
        good  -> box min(5, box + 1)
        easy  -> box min(5, box + 2)

    The due date is always pushed to ``now + interval`` days. ``ease_factor``
    is carried unchanged.
    """
    grade = Grade.parse(grade)

    if grade is Grade.AGAIN:
        new_box = 1
    elif grade is Grade.HARD:
        new_box = max(1, state.box)
    elif grade is Grade.GOOD:
        new_box = min(MAX_BOX, state.box + 1)
    else:
        new_box = min(MAX_BOX, state.box + 2)

    interval = interval_for_box(new_box)
    return SrsState(
        box=new_box,
        interval=interval,
        due_date=now + interval * MS_PER_DAY,
        last_reviewed=now,
        ease_factor=state.ease_factor,
    )


class ReviewScheduler:
    """
    Application service for grading cards and querying due cards.

    Depends on the CardStore, ReviewLog and Clock ports, not on concrete
    adapters. Every grading is a read-modify-write of the full collection.
    """

    def __init__(
        self,
        store: CardStore,
        clock: Clock,
        review_log: ReviewLog | None = None,
        seed: SeedSet | None = None,
    ):
        """
        Args:
            store: Persistence port for the card collection.
            clock: Source of the current time.
            review_log: Optional history port; without it the streak is always 0.
            seed: Seed set used while the store is uninitialized; packaged default if None.
        """
        self._store = store
        self._clock = clock
        self._log = review_log
        self._seed = seed or load_seed()

    def _resolve_now(self, now: int | None) -> int:
        return self._clock.now() if now is None else now

    def _cards(self, now: int) -> tuple[list[Card], bool]:
        """Return the collection and whether it came from the store."""
        stored = self._store.load()
        if stored is None:
            return self._seed.build_cards(now), False
        return stored, True

    def get_decks(self) -> list[Deck]:
        return list(self._seed.decks)

    def get_due_cards(self, deck_id: str, now: int | None = None) -> list[Card]:
        """
        All cards of ``deck_id`` with ``due_date <= now``, in storage order.

        Falls back to the seed set when the store was never written; the
        fallback is not persisted.
        """
        now = self._resolve_now(now)
        cards, _ = self._cards(now)
        return [c for c in cards if c.deck_id == deck_id and c.is_due(now)]

    def get_next_card(self, deck_id: str, now: int | None = None) -> Card | None:
        due = self.get_due_cards(deck_id, now)
        return due[0] if due else None

    def process_review(self, card_id: str, grade: Grade | str, now: int | None = None) -> Card:
        """
        Grade a card and persist the updated collection.

        Returns:
            The card with its new review state.

        Raises:
            InvalidGradeError: ``grade`` is not a known grade.
            CardNotFoundError: No card with ``card_id`` exists; nothing is written.
            StoreUnavailableError: The store or review log failed.
        """
        grade = Grade.parse(grade)
        now = self._resolve_now(now)
        cards, from_store = self._cards(now)

        index = next((i for i, c in enumerate(cards) if c.id == card_id), None)
        if index is None:
            raise CardNotFoundError(card_id)

        card = cards[index]
        updated = card.with_srs(schedule_next(card.srs, grade, now))
        cards = [*cards[:index], updated, *cards[index + 1 :]]

        if not from_store:
            logger.info(f"Initializing store with {len(cards)} seed cards")
        self._store.save(cards)

        if self._log is not None:
            self._log.append(
                ReviewEntry(
                    card_id=card_id,
                    reviewed_at=now,
                    grade=grade,
                    box=updated.srs.box,
                    interval=updated.srs.interval,
                )
            )

        logger.debug(
            f"Reviewed {card_id} as {grade.value}: box {card.srs.box} -> {updated.srs.box}, "
            f"next in {updated.srs.interval}d"
        )
        return updated

    def get_stats(self, now: int | None = None) -> SchedulerStats:
        now = self._resolve_now(now)
        cards, _ = self._cards(now)
        history = self._log.load() if self._log is not None else []
        return SchedulerStats(
            total_cards=len(cards),
            due_now=sum(1 for c in cards if c.is_due(now)),
            mastered=sum(1 for c in cards if c.is_mastered),
            streak=compute_streak(history, now),
        )
