"""Tests for CLI commands: decks, due, next, review, stats, serve and config."""

import json
import logging
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from hifz import server
from hifz.infrastructure.adapters.sqlite_store import SqliteCardStore
from hifz.interface.cli import app

runner = CliRunner()


@pytest.fixture
def invoke(mock_home, tmp_path):
    data_dir = tmp_path / "data"

    def _invoke(*args):
        return runner.invoke(app, ["--data-dir", str(data_dir), *args])

    return _invoke


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Leitner-box review scheduler" in result.stdout
    for command in ("decks", "due", "next", "review", "stats", "serve", "config"):
        assert command in result.stdout


def test_decks(invoke):
    result = invoke("decks")
    assert result.exit_code == 0
    assert "nawawi40" in result.stdout
    assert "The 40 Hadith of Imam Nawawi" in result.stdout


def test_decks_json(invoke):
    result = invoke("decks", "--json")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data[1]["id"] == "daily_life"


def test_due_on_fresh_install(invoke):
    result = invoke("due", "nawawi40")
    assert result.exit_code == 0
    assert "Due: 2" in result.stdout
    assert "nawawi-1" in result.stdout


def test_due_empty_deck(invoke):
    result = invoke("due", "daily_life")
    assert result.exit_code == 0
    assert "No cards due." in result.stdout


def test_review_then_due(invoke, tmp_path):
    result = invoke("review", "nawawi-1", "good")
    assert result.exit_code == 0
    assert "nawawi-1: box 1, next review in 1 day(s)" in result.stdout
    assert (tmp_path / "data" / "srs.json").exists()

    result = invoke("due", "nawawi40", "--json")
    assert [c["id"] for c in json.loads(result.stdout)] == ["nawawi-2"]


def test_next(invoke):
    result = invoke("next", "nawawi40")
    assert result.exit_code == 0
    assert "Hadith 1: Actions & Intentions" in result.stdout
    assert "[nawawi-1]" in result.stdout


def test_review_unknown_card(invoke):
    result = invoke("review", "nawawi-99", "good")
    assert result.exit_code == 1
    assert "Card not found: nawawi-99" in result.output


def test_review_invalid_grade(invoke):
    result = invoke("review", "nawawi-1", "perfect")
    assert result.exit_code == 2
    assert "Invalid grade" in result.output


def test_stats_json(invoke):
    invoke("review", "nawawi-1", "easy")

    result = invoke("stats", "--json")

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data == {"total_cards": 2, "due_now": 1, "mastered": 0, "streak": 1}


def test_stats_text(invoke):
    result = invoke("stats")
    assert result.exit_code == 0
    assert "Total: 2  Due: 2  Mastered: 0  Streak: 0 day(s)" in result.stdout


def test_sqlite_backend(invoke, tmp_path):
    result = runner.invoke(
        app,
        ["--backend", "sqlite", "--data-dir", str(tmp_path / "db"), "review", "nawawi-2", "hard"],
    )
    assert result.exit_code == 0
    assert (tmp_path / "db" / "srs.sqlite3").exists()


def test_corrupt_store_reported(invoke, tmp_path):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "srs.json").write_text("{broken")

    result = invoke("due", "nawawi40")

    assert result.exit_code == 1
    assert "Store unavailable" in result.output


def test_config_show(invoke):
    result = invoke("config", "show")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["backend"] == "json"
    assert data["data_dir"].endswith("data")


@patch("uvicorn.run")
def test_serve_command(mock_run, invoke):
    result = invoke("serve", "--port", "9000")
    assert result.exit_code == 0
    mock_run.assert_called_with("hifz.server:app", host="127.0.0.1", port=9000, reload=False)


def test_serve_uses_cli_storage_options(mock_home, monkeypatch, tmp_path):
    monkeypatch.setenv("HIFZ_BACKEND", "json")
    monkeypatch.setenv("HIFZ_DATA_DIR", str(tmp_path / "env"))
    built = []

    def fake_run(*args, **kwargs):
        built.append(server.get_scheduler())

    server.get_scheduler.cache_clear()
    try:
        with patch("uvicorn.run", side_effect=fake_run):
            result = runner.invoke(
                app, ["--backend", "sqlite", "--data-dir", str(tmp_path / "mine"), "serve"]
            )
    finally:
        server.get_scheduler.cache_clear()

    assert result.exit_code == 0
    store = built[0]._store
    assert isinstance(store, SqliteCardStore)
    assert store.db_path == (tmp_path / "mine" / "srs.sqlite3").resolve()


def test_verbose_flag_sets_log_level(invoke, hifz_logger, monkeypatch):
    assert invoke("config", "show").exit_code == 0
    assert hifz_logger.level == logging.INFO

    assert invoke("-v", "config", "show").exit_code == 0
    assert hifz_logger.level == logging.DEBUG

    monkeypatch.setenv("HIFZ_VERBOSE", "0")
    result = invoke("config", "show")
    assert json.loads(result.stdout)["verbose"] == 0
    assert hifz_logger.level == logging.WARNING


def test_missing_seed_file_reported(invoke, monkeypatch, tmp_path):
    monkeypatch.setenv("HIFZ_SEED_FILE", str(tmp_path / "missing.yaml"))

    result = invoke("decks")

    assert result.exit_code == 1
    assert "Cannot load seed file" in result.output
