"""Seed decks and cards used when no stored collection exists yet."""

import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

from hifz.domain.constants import DEFAULT_EASE_FACTOR
from hifz.domain.errors import SeedError
from hifz.domain.models import Card, Deck, SrsState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeedSet:
    """Deck metadata plus card templates; review state is stamped at build time."""

    decks: list[Deck]
    cards: list[dict[str, Any]]

    def build_cards(self, now: int) -> list[Card]:
        """
        Materialize fresh cards.

        New cards start in box 0 and are due at ``now``, so they show up
        in the first due query.
        """
        fresh = SrsState(
            box=0, interval=0, due_date=now, last_reviewed=0, ease_factor=DEFAULT_EASE_FACTOR
        )
        return [
            Card(
                id=str(raw["id"]),
                deck_id=str(raw["deck_id"]),
                title=raw.get("title", ""),
                arabic_text=raw.get("arabic_text", ""),
                english_text=raw.get("english_text", ""),
                narrator=raw.get("narrator", ""),
                reference=raw.get("reference", ""),
                topics=tuple(raw.get("topics") or ()),
                srs=fresh,
            )
            for raw in self.cards
        ]


def parse_seed(text: str) -> SeedSet:
    """
    Raises:
        SeedError: The text is not YAML or does not describe decks and cards.
    """
    try:
        data = yaml.safe_load(text) or {}
        decks = [Deck(**d) for d in data.get("decks") or []]
        cards = list(data.get("cards") or [])
    except (yaml.YAMLError, AttributeError, TypeError) as e:
        raise SeedError(f"Invalid seed data: {e}") from e

    for raw in cards:
        if not isinstance(raw, dict) or "id" not in raw or "deck_id" not in raw:
            raise SeedError(f"Seed card is missing id or deck_id: {raw!r}")
    return SeedSet(decks=decks, cards=cards)


def load_seed(path: Path | None = None) -> SeedSet:
    """
    Load the seed set from ``path``, or the packaged default when None.
    """
    if path is not None:
        logger.debug(f"Loading seed set from {path}")
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to read seed file {path}: {e}")
            raise SeedError(f"Cannot read seed file {path}: {e}") from e
        return parse_seed(text)

    text = resources.files("hifz.data").joinpath("seed.yaml").read_text(encoding="utf-8")
    return parse_seed(text)
