# Domain Package
from .errors import (
    CardNotFoundError,
    HifzError,
    InvalidGradeError,
    SeedError,
    StoreUnavailableError,
)
from .models import Card, Deck, Grade, ReviewEntry, SchedulerStats, SrsState
from .ports import CardStore, Clock, ReviewLog

__all__ = [
    "Card",
    "Deck",
    "Grade",
    "ReviewEntry",
    "SchedulerStats",
    "SrsState",
    "CardStore",
    "Clock",
    "ReviewLog",
    "HifzError",
    "CardNotFoundError",
    "StoreUnavailableError",
    "InvalidGradeError",
    "SeedError",
]
