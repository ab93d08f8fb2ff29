from contextlib import contextmanager
from datetime import datetime, timezone, tzinfo
from typing import Dict, Iterator, List, Optional

from config import DEFAULT_PAGE_SIZE
from models.flashcard import Flashcard
from models.rating import Rating
from models.review import ReviewEvent
from models.stats import DashboardStats
from utils.dashboard import compute_dashboard_stats
from utils.dates import ensure_aware, utc_now
from utils.sm2 import SchedulingState

from .store import CardNotFoundError, PersistenceError, new_id


class InMemoryFlashcardStore:
    """Process-local `FlashcardStore`; nothing survives the process.

    `transaction()` snapshots the card map and event log and restores them if
    the block raises.
    """

    def __init__(self, tz: tzinfo = timezone.utc, page_size: int = DEFAULT_PAGE_SIZE):
        self.tz = tz
        self.page_size = page_size
        self._cards: Dict[str, Flashcard] = {}
        self._events: List[ReviewEvent] = []
        self._in_transaction = False

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._in_transaction:
            yield
            return
        cards_snapshot = dict(self._cards)
        events_snapshot = len(self._events)
        self._in_transaction = True
        try:
            yield
        except BaseException:
            self._cards = cards_snapshot
            del self._events[events_snapshot:]
            raise
        finally:
            self._in_transaction = False

    def get_due_cards(self, as_of: datetime, limit: Optional[int] = None) -> List[Flashcard]:
        as_of = ensure_aware(as_of)
        due = [card for card in self._cards.values() if ensure_aware(card.next_review_date) <= as_of]
        due.sort(key=lambda card: (ensure_aware(card.next_review_date), card.id))
        return due[: limit or self.page_size]

    def get_dashboard_counts(self, as_of: datetime) -> DashboardStats:
        return compute_dashboard_stats(self._cards.values(), as_of, self.tz)

    def update_scheduling(
        self,
        card_id: str,
        state: SchedulingState,
        next_review_date: datetime,
        updated_at: Optional[datetime] = None,
    ) -> None:
        card = self._cards.get(card_id)
        if card is None:
            raise CardNotFoundError(card_id)
        self._cards[card_id] = card.model_copy(
            update={
                "repetition_count": state.repetition_count,
                "review_interval": state.review_interval,
                "ease_factor": state.ease_factor,
                "next_review_date": ensure_aware(next_review_date),
                "updated_at": ensure_aware(updated_at or utc_now()),
            }
        )

    def append_review_event(
        self, card_id: str, rating: Rating, reviewed_at: Optional[datetime] = None
    ) -> ReviewEvent:
        if card_id not in self._cards:
            raise PersistenceError(f"Cannot log a review for unknown flashcard {card_id!r}")
        event = ReviewEvent(
            id=new_id("evt"),
            flashcard_id=card_id,
            rating=Rating(rating),
            reviewed_at=ensure_aware(reviewed_at or utc_now()),
        )
        self._events.append(event)
        return event

    def insert(self, card: Flashcard) -> Flashcard:
        if card.id in self._cards:
            raise PersistenceError(f"Flashcard {card.id!r} already exists")
        self._cards[card.id] = card
        return card

    def list(self) -> List[Flashcard]:
        return sorted(self._cards.values(), key=lambda card: (ensure_aware(card.created_at), card.id))

    def get_card(self, card_id: str) -> Optional[Flashcard]:
        return self._cards.get(card_id)

    def get_review_events(self, card_id: str) -> List[ReviewEvent]:
        events = [event for event in self._events if event.flashcard_id == card_id]
        # stable sort keeps append order for equal timestamps
        return sorted(events, key=lambda event: event.reviewed_at)
