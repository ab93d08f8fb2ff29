"""Flashcard persistence boundary.

The scheduling core talks to storage only through `FlashcardStore`. Two
backends implement it: `SQLiteFlashcardStore` here and
`InMemoryFlashcardStore` in `db.memory_store`. Every storage failure surfaces
as `PersistenceError`.
"""

import logging
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone, tzinfo
from typing import ContextManager, Iterator, List, Optional, Protocol

from config import DEFAULT_PAGE_SIZE
from models.flashcard import Flashcard
from models.rating import Rating
from models.review import ReviewEvent
from models.stats import DashboardStats
from utils.dates import day_bounds, ensure_aware, format_ts, parse_ts, utc_now
from utils.mastery import MASTERY_REPETITIONS, mastery_from_totals
from utils.sm2 import SchedulingState

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """A store operation failed; nothing from that operation was kept."""


class CardNotFoundError(PersistenceError):
    def __init__(self, card_id: str):
        super().__init__(f"Flashcard {card_id!r} not found")
        self.card_id = card_id


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


class FlashcardStore(Protocol):
    tz: tzinfo
    page_size: int

    def transaction(self) -> ContextManager[None]: ...

    def get_due_cards(self, as_of: datetime, limit: Optional[int] = None) -> List[Flashcard]: ...

    def get_dashboard_counts(self, as_of: datetime) -> DashboardStats: ...

    def update_scheduling(
        self,
        card_id: str,
        state: SchedulingState,
        next_review_date: datetime,
        updated_at: Optional[datetime] = None,
    ) -> None: ...

    def append_review_event(
        self, card_id: str, rating: Rating, reviewed_at: Optional[datetime] = None
    ) -> ReviewEvent: ...

    def insert(self, card: Flashcard) -> Flashcard: ...

    def list(self) -> List[Flashcard]: ...

    def get_card(self, card_id: str) -> Optional[Flashcard]: ...

    def get_review_events(self, card_id: str) -> List[ReviewEvent]: ...


def _row_to_flashcard(row: sqlite3.Row) -> Flashcard:
    return Flashcard(
        id=row["id"],
        item_id=row["item_id"],
        type=row["card_type"],
        question=row["question"],
        answer=row["answer"],
        difficulty=row["difficulty"],
        next_review_date=parse_ts(row["next_review_date"]),
        repetition_count=row["repetition_count"],
        review_interval=row["review_interval"],
        ease_factor=row["ease_factor"],
        created_at=parse_ts(row["created_at"]),
        updated_at=parse_ts(row["updated_at"]),
    )


def _row_to_event(row: sqlite3.Row) -> ReviewEvent:
    return ReviewEvent(
        id=row["id"],
        flashcard_id=row["flashcard_id"],
        rating=row["rating"],
        reviewed_at=parse_ts(row["reviewed_at"]),
    )


class SQLiteFlashcardStore:
    """`FlashcardStore` over one SQLite connection.

    Writes outside `transaction()` commit immediately; writes inside it commit
    or roll back together when the outermost block exits.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        tz: tzinfo = timezone.utc,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self.conn = conn
        self.tz = tz
        self.page_size = page_size
        self._in_transaction = False

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._in_transaction:
            yield
            return
        self._in_transaction = True
        try:
            yield
            self.conn.commit()
        except sqlite3.Error as exc:
            self.conn.rollback()
            logger.error("Transaction failed, rolled back: %s", exc)
            raise PersistenceError(f"Transaction failed: {exc}") from exc
        except BaseException:
            self.conn.rollback()
            raise
        finally:
            self._in_transaction = False

    def _write(self, sql: str, params: tuple, action: str) -> sqlite3.Cursor:
        try:
            cursor = self.conn.execute(sql, params)
            if not self._in_transaction:
                self.conn.commit()
            return cursor
        except sqlite3.Error as exc:
            if not self._in_transaction:
                self.conn.rollback()
            logger.error("Failed to %s: %s", action, exc)
            raise PersistenceError(f"Failed to {action}: {exc}") from exc

    def _read(self, sql: str, params: tuple, action: str) -> List[sqlite3.Row]:
        try:
            return self.conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            logger.error("Failed to %s: %s", action, exc)
            raise PersistenceError(f"Failed to {action}: {exc}") from exc

    def get_due_cards(self, as_of: datetime, limit: Optional[int] = None) -> List[Flashcard]:
        rows = self._read(
            """
            SELECT * FROM flashcards
            WHERE next_review_date <= ?
            ORDER BY next_review_date ASC, id ASC
            LIMIT ?
            """,
            (format_ts(as_of), limit or self.page_size),
            "load due cards",
        )
        return [_row_to_flashcard(row) for row in rows]

    def get_dashboard_counts(self, as_of: datetime) -> DashboardStats:
        start_of_today, start_of_tomorrow = day_bounds(as_of, self.tz)
        rows = self._read(
            """
            SELECT
                COALESCE(SUM(CASE WHEN next_review_date < ? THEN 1 ELSE 0 END), 0) AS due_today,
                COALESCE(SUM(CASE WHEN next_review_date < ? THEN 1 ELSE 0 END), 0) AS overdue,
                COALESCE(SUM(CASE WHEN next_review_date >= ? THEN 1 ELSE 0 END), 0) AS upcoming,
                COALESCE(SUM(MIN(repetition_count, ?)), 0) AS capped_total,
                COUNT(*) AS card_count
            FROM flashcards
            """,
            (
                format_ts(start_of_tomorrow),
                format_ts(start_of_today),
                format_ts(start_of_tomorrow),
                MASTERY_REPETITIONS,
            ),
            "compute dashboard counts",
        )
        row = rows[0]
        return DashboardStats(
            due_today=row["due_today"],
            overdue=row["overdue"],
            upcoming=row["upcoming"],
            mastery=mastery_from_totals(row["capped_total"], row["card_count"]),
        )

    def update_scheduling(
        self,
        card_id: str,
        state: SchedulingState,
        next_review_date: datetime,
        updated_at: Optional[datetime] = None,
    ) -> None:
        cursor = self._write(
            """
            UPDATE flashcards
            SET repetition_count = ?, review_interval = ?, ease_factor = ?, next_review_date = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                state.repetition_count,
                state.review_interval,
                state.ease_factor,
                format_ts(next_review_date),
                format_ts(updated_at or utc_now()),
                card_id,
            ),
            f"update scheduling for {card_id}",
        )
        if cursor.rowcount == 0:
            raise CardNotFoundError(card_id)

    def append_review_event(
        self, card_id: str, rating: Rating, reviewed_at: Optional[datetime] = None
    ) -> ReviewEvent:
        event = ReviewEvent(
            id=new_id("evt"),
            flashcard_id=card_id,
            rating=Rating(rating),
            reviewed_at=ensure_aware(reviewed_at or utc_now()),
        )
        self._write(
            "INSERT INTO review_events (id, flashcard_id, rating, reviewed_at) VALUES (?, ?, ?, ?)",
            (event.id, event.flashcard_id, int(event.rating), format_ts(event.reviewed_at)),
            f"append review event for {card_id}",
        )
        return event

    def insert(self, card: Flashcard) -> Flashcard:
        self._write(
            """
            INSERT INTO flashcards (
                id,
                item_id,
                card_type,
                question,
                answer,
                difficulty,
                next_review_date,
                review_interval,
                ease_factor,
                repetition_count,
                created_at,
                updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                card.id,
                card.item_id,
                card.type.value,
                card.question,
                card.answer,
                card.difficulty,
                format_ts(card.next_review_date),
                card.review_interval,
                card.ease_factor,
                card.repetition_count,
                format_ts(card.created_at),
                format_ts(card.updated_at),
            ),
            f"insert flashcard {card.id}",
        )
        return card

    def list(self) -> List[Flashcard]:
        rows = self._read(
            "SELECT * FROM flashcards ORDER BY created_at ASC, id ASC", (), "list flashcards"
        )
        return [_row_to_flashcard(row) for row in rows]

    def get_card(self, card_id: str) -> Optional[Flashcard]:
        rows = self._read("SELECT * FROM flashcards WHERE id = ?", (card_id,), f"load flashcard {card_id}")
        return _row_to_flashcard(rows[0]) if rows else None

    def get_review_events(self, card_id: str) -> List[ReviewEvent]:
        rows = self._read(
            """
            SELECT * FROM review_events
            WHERE flashcard_id = ?
            ORDER BY reviewed_at ASC, rowid ASC
            """,
            (card_id,),
            f"load review events for {card_id}",
        )
        return [_row_to_event(row) for row in rows]
