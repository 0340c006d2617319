"""Error taxonomy for review scheduling."""


class HifzError(Exception):
    """Base class for all hifz errors."""


class CardNotFoundError(HifzError):
    """Raised when grading a card id that does not exist in the store."""

    def __init__(self, card_id: str):
        super().__init__(f"Card not found: {card_id}")
        self.card_id = card_id


class StoreUnavailableError(HifzError):
    """Raised when a store or review log cannot be read or written."""


class InvalidGradeError(HifzError, ValueError):
    """Raised when a grade string is not one of again/hard/good/easy."""

    def __init__(self, value: object):
        super().__init__(f"Invalid grade {value!r}; expected one of again, hard, good, easy")
        self.value = value


class SeedError(HifzError, ValueError):
    """Raised when a seed file cannot be read or does not describe decks and cards."""
