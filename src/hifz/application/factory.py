"""
Scheduler Factory
Centralizes the logic for selecting storage adapters from configuration.
"""

import logging

from hifz.application.config import AppConfig
from hifz.application.scheduler import ReviewScheduler
from hifz.application.seed import load_seed
from hifz.domain.ports import CardStore, Clock, ReviewLog
from hifz.infrastructure.adapters.json_store import JsonFileCardStore, JsonFileReviewLog
from hifz.infrastructure.adapters.memory_store import InMemoryCardStore, InMemoryReviewLog
from hifz.infrastructure.adapters.sqlite_store import SqliteCardStore, SqliteReviewLog
from hifz.infrastructure.clock import SystemClock

logger = logging.getLogger(__name__)


def get_card_store(config: AppConfig) -> CardStore:
    """
    Returns the CardStore implementation for the configured backend.
    """
    if config.backend == "sqlite":
        return SqliteCardStore(config.sqlite_path, namespace=config.namespace)
    if config.backend == "memory":
        return InMemoryCardStore()
    return JsonFileCardStore(config.json_path, namespace=config.namespace)


def get_review_log(config: AppConfig) -> ReviewLog:
    """
    Returns the ReviewLog implementation for the configured backend.
    """
    if config.backend == "sqlite":
        return SqliteReviewLog(config.sqlite_path, namespace=config.namespace)
    if config.backend == "memory":
        return InMemoryReviewLog()
    return JsonFileReviewLog(config.json_path, namespace=config.namespace)


def build_scheduler(config: AppConfig, clock: Clock | None = None) -> ReviewScheduler:
    logger.debug(f"Backend: {config.backend} ({config.data_dir})")
    return ReviewScheduler(
        store=get_card_store(config),
        clock=clock or SystemClock(),
        review_log=get_review_log(config),
        seed=load_seed(config.seed_file),
    )
