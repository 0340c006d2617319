"""
Domain models for review scheduling.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field, replace
from enum import Enum

from .constants import DEFAULT_EASE_FACTOR, MAX_BOX
from .errors import InvalidGradeError


class Grade(str, Enum):
    """Self-assessed recall quality submitted after a review."""

    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"

    @classmethod
    def parse(cls, value: "str | Grade") -> "Grade":
        if isinstance(value, Grade):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidGradeError(value) from None


@dataclass(frozen=True)
class SrsState:
    """
    Review state of a single card.

    Attributes:
        box: Leitner box, 0 (new) through 5 (mastered).
        interval: Days until the next review, derived from box.
        due_date: Epoch milliseconds when the card becomes reviewable.
        last_reviewed: Epoch milliseconds of the last grading, 0 if never.
        ease_factor: Carried for storage compatibility; scheduling ignores it.
    """

    box: int = 0
    interval: int = 0
    due_date: int = 0
    last_reviewed: int = 0
    ease_factor: float = DEFAULT_EASE_FACTOR


@dataclass(frozen=True)
class Card:
    """A memorization card: fixed identity and content plus review state."""

    id: str
    deck_id: str
    title: str = ""
    arabic_text: str = ""
    english_text: str = ""
    narrator: str = ""
    reference: str = ""
    topics: tuple[str, ...] = ()
    srs: SrsState = field(default_factory=SrsState)

    def is_due(self, now: int) -> bool:
        return self.srs.due_date <= now

    @property
    def is_mastered(self) -> bool:
        return self.srs.box == MAX_BOX

    def with_srs(self, srs: SrsState) -> "Card":
        return replace(self, srs=srs)


@dataclass(frozen=True)
class Deck:
    """
    A named grouping of cards.

    The counters are display metadata shipped with the deck, not derived
    from card state.
    """

    id: str
    title: str
    description: str = ""
    total_cards: int = 0
    mastered_cards: int = 0
    cover_image: str = ""


@dataclass(frozen=True)
class ReviewEntry:
    """
    A single grading event.

    Attributes:
        card_id: The card that was graded.
        reviewed_at: Epoch milliseconds of the review.
        grade: Grade submitted.
        box: Box assigned after this review.
        interval: Interval assigned after this review (days).
    """

    card_id: str
    reviewed_at: int
    grade: Grade
    box: int
    interval: int


@dataclass(frozen=True)
class SchedulerStats:
    total_cards: int
    due_now: int
    mastered: int
    streak: int
