"""
JSON file adapters.

A single JSON object maps namespace keys to lists of records, mirroring
the key-value blob the browser client kept in local storage. The card
collection and the review log live under separate keys of the same file.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from hifz.domain.constants import DEFAULT_NAMESPACE, REVIEW_LOG_SUFFIX
from hifz.domain.errors import StoreUnavailableError
from hifz.domain.models import Card, ReviewEntry
from hifz.domain.ports import CardStore, ReviewLog

from .records import card_from_record, card_to_record, entry_from_record, entry_to_record

logger = logging.getLogger(__name__)


class JsonBlobFile:
    """Key-value access to one JSON file; writes replace the file atomically."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read {self.path}: {e}")
            raise StoreUnavailableError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StoreUnavailableError(f"{self.path} does not contain a JSON object")
        return data

    def get(self, key: str) -> Any | None:
        return self.read().get(key)

    def put(self, key: str, value: Any) -> None:
        data = self.read()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
                os.replace(tmp, self.path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as e:
            logger.error(f"Failed to write {self.path}: {e}")
            raise StoreUnavailableError(f"Cannot write {self.path}: {e}") from e


class JsonFileCardStore(CardStore):
    """Stores the card collection as a JSON list under ``namespace``."""

    def __init__(self, path: Path, namespace: str = DEFAULT_NAMESPACE):
        self.blob = JsonBlobFile(path)
        self.namespace = namespace

    def load(self) -> list[Card] | None:
        records = self.blob.get(self.namespace)
        if records is None:
            return None
        try:
            return [card_from_record(r) for r in records]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed card record in {self.blob.path}: {e}")
            raise StoreUnavailableError(f"Malformed card data in {self.blob.path}: {e}") from e

    def save(self, cards: list[Card]) -> None:
        self.blob.put(self.namespace, [card_to_record(c) for c in cards])
        logger.debug(f"Saved {len(cards)} cards to {self.blob.path}")


class JsonFileReviewLog(ReviewLog):
    """Review history kept under ``<namespace>_reviews`` in the same file format."""

    def __init__(self, path: Path, namespace: str = DEFAULT_NAMESPACE):
        self.blob = JsonBlobFile(path)
        self.key = f"{namespace}{REVIEW_LOG_SUFFIX}"

    def load(self) -> list[ReviewEntry]:
        records = self.blob.get(self.key) or []
        try:
            return [entry_from_record(r) for r in records]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise StoreUnavailableError(f"Malformed review log in {self.blob.path}: {e}") from e

    def append(self, entry: ReviewEntry) -> None:
        records = self.blob.get(self.key) or []
        if not isinstance(records, list):
            raise StoreUnavailableError(f"Malformed review log in {self.blob.path}")
        records.append(entry_to_record(entry))
        self.blob.put(self.key, records)
