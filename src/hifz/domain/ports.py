"""
Ports (interfaces) for persistence and time.

These define the contract that infrastructure adapters must implement.
The scheduler depends on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import Card, ReviewEntry


class CardStore(ABC):
    """
    Port for the card collection blob.

    The whole collection is read and written at once; there is no partial
    write and no locking. A single writer is assumed.

    Implementations:
        - JsonFileCardStore: one JSON file keyed by namespace.
        - SqliteCardStore: key-value row in an SQLite database.
        - InMemoryCardStore: process-local, for tests and dry runs.
    """

    @abstractmethod
    def load(self) -> list[Card] | None:
        """
        Read the full card collection.

        Returns:
            The stored cards in storage order, or None if nothing was ever saved.

        Raises:
            StoreUnavailableError: The backing store could not be read.
        """
        pass

    @abstractmethod
    def save(self, cards: list[Card]) -> None:
        """
        Replace the stored collection with ``cards``.

        Raises:
            StoreUnavailableError: The backing store could not be written.
        """
        pass


class ReviewLog(ABC):
    """Port for the append-only history of grading events."""

    @abstractmethod
    def append(self, entry: ReviewEntry) -> None:
        pass

    @abstractmethod
    def load(self) -> list[ReviewEntry]:
        """Return all entries, oldest first."""
        pass


class Clock(ABC):
    """Port for the current time, injected so scheduling is deterministic in tests."""

    @abstractmethod
    def now(self) -> int:
        """Current time as epoch milliseconds."""
        pass
