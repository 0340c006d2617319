"""hifz CLI: deck browsing, grading, stats and the HTTP server."""

import json
import logging
import os
import sys
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from hifz.application.config import AppConfig, log_level, resolve_config
from hifz.application.factory import build_scheduler
from hifz.application.scheduler import ReviewScheduler
from hifz.domain.errors import (
    CardNotFoundError,
    InvalidGradeError,
    SeedError,
    StoreUnavailableError,
)
from hifz.domain.models import Card, Grade

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="hifz: Leitner-box review scheduler for memorization decks.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage hifz configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    backend: Annotated[
        str | None, typer.Option(help="Storage backend: json, sqlite, memory.")
    ] = None,
    data_dir: Annotated[Path | None, typer.Option(help="Directory holding the store.")] = None,
):
    """Global settings for hifz."""
    ctx.ensure_object(dict)
    ctx.obj["overrides"] = {
        "backend": backend,
        "data_dir": data_dir,
        "verbose": 1 + verbose if verbose else None,
    }


def _resolve(ctx: typer.Context) -> AppConfig:
    overrides = (ctx.obj or {}).get("overrides", {})
    config = resolve_config(overrides)
    logging.getLogger("hifz").setLevel(log_level(config.verbose))
    return config


def _scheduler(ctx: typer.Context) -> ReviewScheduler:
    try:
        return build_scheduler(_resolve(ctx))
    except SeedError as e:
        _fail(f"Cannot load seed file: {e}")


def _fail(message: str, code: int = 1) -> NoReturn:
    typer.secho(message, fg="red", err=True)
    raise typer.Exit(code)


def _fmt_time(epoch_ms: int) -> str:
    if not epoch_ms:
        return "never"
    return datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M")


def _card_line(card: Card) -> str:
    return (
        f"{card.id:<12} box {card.srs.box}  due {_fmt_time(card.srs.due_date)}  {card.title}"
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def decks(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List available decks."""
    result = _scheduler(ctx).get_decks()
    if json_output:
        typer.echo(json.dumps([asdict(d) for d in result], indent=2, ensure_ascii=False))
        return
    for deck in result:
        typer.echo(f"{deck.id:<12} {deck.title}  ({deck.total_cards} cards)")


@app.command()
def due(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Deck identifier.")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show cards in a deck that are due for review now."""
    try:
        cards = _scheduler(ctx).get_due_cards(deck_id)
    except StoreUnavailableError as e:
        _fail(f"Store unavailable: {e}")

    if json_output:
        typer.echo(json.dumps([asdict(c) for c in cards], indent=2, ensure_ascii=False))
        return
    if not cards:
        typer.secho("No cards due.", fg="green")
        return
    typer.echo(f"Due: {len(cards)}")
    for card in cards:
        typer.echo(f"  {_card_line(card)}")


@app.command("next")
def next_card(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Deck identifier.")],
):
    """Show the next card to review in a deck."""
    try:
        card = _scheduler(ctx).get_next_card(deck_id)
    except StoreUnavailableError as e:
        _fail(f"Store unavailable: {e}")

    if card is None:
        typer.secho("No cards due.", fg="green")
        return
    typer.secho(card.title, bold=True)
    if card.arabic_text:
        typer.echo(card.arabic_text)
    if card.english_text:
        typer.echo(card.english_text)
    if card.narrator or card.reference:
        typer.echo(f"-- {card.narrator}, {card.reference}".rstrip(", "))
    typer.echo(f"[{card.id}]")


@app.command()
def review(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Argument(help="Card identifier.")],
    grade: Annotated[str, typer.Argument(help="Recall grade: again, hard, good, easy.")],
):
    """Grade a card and reschedule it."""
    try:
        parsed = Grade.parse(grade)
    except InvalidGradeError as e:
        _fail(str(e), code=2)

    try:
        card = _scheduler(ctx).process_review(card_id, parsed)
    except CardNotFoundError as e:
        _fail(str(e))
    except StoreUnavailableError as e:
        _fail(f"Store unavailable: {e}")

    typer.secho(
        f"{card.id}: box {card.srs.box}, next review in {card.srs.interval} day(s) "
        f"({_fmt_time(card.srs.due_date)})",
        fg="green",
    )


@app.command()
def stats(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show totals, due count, mastered count and review streak."""
    try:
        result = _scheduler(ctx).get_stats()
    except StoreUnavailableError as e:
        _fail(f"Store unavailable: {e}")

    if json_output:
        typer.echo(json.dumps(asdict(result), indent=2))
        return
    typer.echo(
        f"Total: {result.total_cards}  Due: {result.due_now}  "
        f"Mastered: {result.mastered}  Streak: {result.streak} day(s)"
    )


@app.command()
def serve(
    ctx: typer.Context,
    port: Annotated[int | None, typer.Option(help="Port to bind the server to.")] = None,
    host: Annotated[str | None, typer.Option(help="Host to bind the server to.")] = None,
    reload: Annotated[bool, typer.Option(help="Enable auto-reload.")] = False,
):
    """Run the HTTP API."""
    import uvicorn

    config = _resolve(ctx)
    # The app module resolves its own config; hand the CLI overrides to it.
    os.environ["HIFZ_BACKEND"] = config.backend
    os.environ["HIFZ_DATA_DIR"] = str(config.data_dir)
    os.environ["HIFZ_NAMESPACE"] = config.namespace
    os.environ["HIFZ_VERBOSE"] = str(config.verbose)
    if config.seed_file is not None:
        os.environ["HIFZ_SEED_FILE"] = str(config.seed_file)

    from hifz.server import get_scheduler

    get_scheduler.cache_clear()
    uvicorn.run(
        "hifz.server:app",
        host=host or config.host,
        port=port or config.port,
        reload=reload,
    )


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _resolve(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))


def main():
    app()


if __name__ == "__main__":
    main()
