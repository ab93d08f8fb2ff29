from datetime import datetime, timezone

import pytest

from db import database
from db.memory_store import InMemoryFlashcardStore
from db.store import SQLiteFlashcardStore
from models.flashcard import Flashcard, FlashcardType


def utc(year, month, day, hour=0, minute=0):
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


@pytest.fixture
def sqlite_conn(tmp_path, monkeypatch):
    monkeypatch.setattr(database, "CONFIG_DIR", tmp_path)
    monkeypatch.setattr(database, "DB_PATH", tmp_path / "vaultrecall.db")
    database.init_db()
    conn = database.connect()
    yield conn
    conn.close()


@pytest.fixture(params=["sqlite", "memory"])
def store(request):
    if request.param == "sqlite":
        conn = request.getfixturevalue("sqlite_conn")
        return SQLiteFlashcardStore(conn)
    return InMemoryFlashcardStore()


@pytest.fixture
def make_card():
    def _make_card(card_id, due, repetition_count=0, review_interval=1, ease_factor=2.5, item_id="item-1"):
        return Flashcard(
            id=card_id,
            item_id=item_id,
            type=FlashcardType.BASIC_QA,
            question=f"Explain: {card_id}",
            answer=f"Answer for {card_id}",
            difficulty=2,
            next_review_date=due,
            repetition_count=repetition_count,
            review_interval=review_interval,
            ease_factor=ease_factor,
            created_at=utc(2026, 1, 1),
            updated_at=utc(2026, 1, 1),
        )
    return _make_card
