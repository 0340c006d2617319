"""
Record codec shared by the persistent adapters.

Cards are stored in the camelCase shape the browser client kept in
local storage (``deckId``, ``srs.dueDate``...), so an exported blob
loads without conversion.
"""

from typing import Any

from hifz.domain.constants import DEFAULT_EASE_FACTOR
from hifz.domain.models import Card, Grade, ReviewEntry, SrsState


def card_to_record(card: Card) -> dict[str, Any]:
    return {
        "id": card.id,
        "deckId": card.deck_id,
        "title": card.title,
        "arabicText": card.arabic_text,
        "englishText": card.english_text,
        "narrator": card.narrator,
        "reference": card.reference,
        "topics": list(card.topics),
        "srs": {
            "box": card.srs.box,
            "interval": card.srs.interval,
            "dueDate": card.srs.due_date,
            "lastReviewed": card.srs.last_reviewed,
            "easeFactor": card.srs.ease_factor,
        },
    }


def card_from_record(record: dict[str, Any]) -> Card:
    """
    Decode a stored card.

    Raises:
        KeyError: ``id`` or ``deckId`` is missing.
    """
    srs = record.get("srs") or {}
    return Card(
        id=record["id"],
        deck_id=record["deckId"],
        title=record.get("title", ""),
        arabic_text=record.get("arabicText", ""),
        english_text=record.get("englishText", ""),
        narrator=record.get("narrator", ""),
        reference=record.get("reference", ""),
        topics=tuple(record.get("topics") or ()),
        srs=SrsState(
            box=int(srs.get("box", 0)),
            interval=int(srs.get("interval", 0)),
            due_date=int(srs.get("dueDate", 0)),
            last_reviewed=int(srs.get("lastReviewed", 0)),
            ease_factor=float(srs.get("easeFactor", DEFAULT_EASE_FACTOR)),
        ),
    )


def entry_to_record(entry: ReviewEntry) -> dict[str, Any]:
    return {
        "cardId": entry.card_id,
        "reviewedAt": entry.reviewed_at,
        "grade": entry.grade.value,
        "box": entry.box,
        "interval": entry.interval,
    }


def entry_from_record(record: dict[str, Any]) -> ReviewEntry:
    return ReviewEntry(
        card_id=record["cardId"],
        reviewed_at=int(record["reviewedAt"]),
        grade=Grade.parse(record["grade"]),
        box=int(record["box"]),
        interval=int(record["interval"]),
    )
