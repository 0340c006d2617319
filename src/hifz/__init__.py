"""hifz: Leitner-box review scheduling for memorization decks."""

from .consts import VERSION

__version__ = VERSION
