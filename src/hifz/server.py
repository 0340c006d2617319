import logging
import time
from contextlib import asynccontextmanager
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from hifz.application.config import log_level, resolve_config
from hifz.application.factory import build_scheduler
from hifz.application.scheduler import ReviewScheduler
from hifz.consts import VERSION
from hifz.domain.errors import CardNotFoundError, InvalidGradeError, StoreUnavailableError
from hifz.domain.models import Card, Deck, Grade

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("hifz.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"hifz server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("hifz server shutting down...")


app = FastAPI(
    title="hifz",
    description="Leitner review scheduling for memorization decks.",
    version=VERSION,
    lifespan=lifespan,
)


@lru_cache(maxsize=1)
def get_scheduler() -> ReviewScheduler:
    """Scheduler built once from the resolved configuration."""
    config = resolve_config()
    logging.getLogger("hifz").setLevel(log_level(config.verbose))
    return build_scheduler(config)


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class SrsStateModel(BaseModel):
    box: int
    interval: int
    due_date: int
    last_reviewed: int
    ease_factor: float


class CardModel(BaseModel):
    id: str
    deck_id: str
    title: str
    arabic_text: str
    english_text: str
    narrator: str
    reference: str
    topics: list[str]
    srs: SrsStateModel

    @classmethod
    def from_card(cls, card: Card) -> "CardModel":
        return cls(
            id=card.id,
            deck_id=card.deck_id,
            title=card.title,
            arabic_text=card.arabic_text,
            english_text=card.english_text,
            narrator=card.narrator,
            reference=card.reference,
            topics=list(card.topics),
            srs=SrsStateModel(
                box=card.srs.box,
                interval=card.srs.interval,
                due_date=card.srs.due_date,
                last_reviewed=card.srs.last_reviewed,
                ease_factor=card.srs.ease_factor,
            ),
        )


class DeckModel(BaseModel):
    id: str
    title: str
    description: str
    total_cards: int
    mastered_cards: int
    cover_image: str

    @classmethod
    def from_deck(cls, deck: Deck) -> "DeckModel":
        return cls(
            id=deck.id,
            title=deck.title,
            description=deck.description,
            total_cards=deck.total_cards,
            mastered_cards=deck.mastered_cards,
            cover_image=deck.cover_image,
        )


class ReviewRequest(BaseModel):
    grade: str
    # Epoch ms; the server clock is used when omitted.
    now: int | None = None


class StatsResponse(BaseModel):
    total_cards: int
    due_now: int
    mastered: int
    streak: int


start_time = time.time()


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


@app.get("/decks", response_model=list[DeckModel])
def list_decks(scheduler: ReviewScheduler = Depends(get_scheduler)):
    return [DeckModel.from_deck(d) for d in scheduler.get_decks()]


@app.get("/decks/{deck_id}/due", response_model=list[CardModel])
def due_cards(
    deck_id: str,
    now: int | None = None,
    scheduler: ReviewScheduler = Depends(get_scheduler),
):
    """Cards of a deck due at ``now`` (defaults to the server clock)."""
    try:
        return [CardModel.from_card(c) for c in scheduler.get_due_cards(deck_id, now)]
    except StoreUnavailableError as e:
        logger.error(f"Due query failed: {e}")
        raise HTTPException(status_code=503, detail=str(e)) from e


@app.get("/decks/{deck_id}/next", response_model=CardModel | None)
def next_card(
    deck_id: str,
    now: int | None = None,
    scheduler: ReviewScheduler = Depends(get_scheduler),
):
    try:
        card = scheduler.get_next_card(deck_id, now)
    except StoreUnavailableError as e:
        logger.error(f"Next card query failed: {e}")
        raise HTTPException(status_code=503, detail=str(e)) from e
    return CardModel.from_card(card) if card else None


@app.post("/cards/{card_id}/review", response_model=CardModel)
def review_card(
    card_id: str,
    req: ReviewRequest,
    scheduler: ReviewScheduler = Depends(get_scheduler),
):
    """
    Grade a card and return its new review state.
    """
    try:
        grade = Grade.parse(req.grade)
        card = scheduler.process_review(card_id, grade, req.now)
    except InvalidGradeError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except CardNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except StoreUnavailableError as e:
        logger.error(f"Review failed: {e}", exc_info=True)
        raise HTTPException(status_code=503, detail=str(e)) from e

    logger.info(f"Reviewed {card_id} as {grade.value} via API")
    return CardModel.from_card(card)


@app.get("/stats", response_model=StatsResponse)
def get_stats(now: int | None = None, scheduler: ReviewScheduler = Depends(get_scheduler)):
    try:
        result = scheduler.get_stats(now)
    except StoreUnavailableError as e:
        logger.error(f"Stats fetch failed: {e}")
        raise HTTPException(status_code=503, detail=str(e)) from e
    return StatsResponse(
        total_cards=result.total_cards,
        due_now=result.due_now,
        mastered=result.mastered,
        streak=result.streak,
    )
