"""Review session state machine.

Idle --start()--> Active(queue, revealed=False)
Active(revealed=False) --reveal()--> Active(revealed=True)
Active(revealed=True) --rate()--> Active(queue[1:], revealed=False)
any --close()--> Idle

An Active session with an empty queue is "caught up" and stays Active until
close(). reveal() and rate() in any other state do nothing, since double
clicks and stale UI state routinely produce them.

A session is driven by one caller at a time: each action runs to completion,
store I/O included, before the next one is accepted.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from models.flashcard import Flashcard
from models.rating import Rating
from models.review import ReviewEvent
from models.stats import ActiveCard, DashboardStats, SessionView
from utils.sm2 import SchedulingState, compute_next

logger = logging.getLogger(__name__)


class ReviewSession:
    def __init__(self, store, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self._clock = clock or (lambda: datetime.now(store.tz))
        self.active = False
        self.revealed = False
        self.queue: List[Flashcard] = []
        self.stats = DashboardStats()

    @property
    def current_card(self) -> Optional[Flashcard]:
        if not self.active or not self.queue:
            return None
        return self.queue[0]

    @property
    def caught_up(self) -> bool:
        return self.active and not self.queue

    def start(self) -> None:
        """Load stats and the due queue; on failure the session is left as it was."""
        now = self._clock()
        stats = self.store.get_dashboard_counts(now)
        queue = self.store.get_due_cards(now)
        self.stats = stats
        self.queue = list(queue)
        self.active = True
        self.revealed = False
        logger.info("Review session started with %d due card(s)", len(self.queue))

    def reveal(self) -> bool:
        if self.current_card is None or self.revealed:
            logger.debug("Ignoring reveal (active=%s, revealed=%s)", self.active, self.revealed)
            return False
        self.revealed = True
        return True

    def rate(self, rating: Rating) -> Optional[ReviewEvent]:
        """Schedule the head card and log the rating.

        Returns the appended review event, or None when the session is not in
        a state that accepts a rating. A store failure propagates and leaves
        the session unchanged, with no review event written.
        """
        card = self.current_card
        if card is None or not self.revealed:
            logger.debug("Ignoring rate (active=%s, revealed=%s, queued=%d)",
                         self.active, self.revealed, len(self.queue))
            return None
        rating = Rating(rating)
        now = self._clock()
        result = compute_next(
            SchedulingState(
                repetition_count=card.repetition_count,
                review_interval=card.review_interval,
                ease_factor=card.ease_factor,
            ),
            rating,
            now,
        )
        with self.store.transaction():
            self.store.update_scheduling(card.id, result.state, result.next_review_date, now)
            event = self.store.append_review_event(card.id, rating, now)
            stats = self.store.get_dashboard_counts(now)
        self.queue = self.queue[1:]
        self.stats = stats
        self.revealed = False
        logger.info(
            "Rated %s as %s: next review in %d day(s), ease %.2f",
            card.id, rating.name, result.review_interval, result.ease_factor,
        )
        if not self.queue:
            logger.info("Review session caught up")
        return event

    def close(self) -> None:
        self.active = False
        self.revealed = False
        self.queue = []

    def view(self) -> SessionView:
        card = self.current_card
        active_card = None
        if card is not None:
            active_card = ActiveCard(
                id=card.id,
                type=card.type,
                question=card.question,
                answer=card.answer if self.revealed else None,
                revealed=self.revealed,
            )
        return SessionView(
            active=self.active,
            caught_up=self.caught_up,
            revealed=self.revealed,
            remaining=len(self.queue),
            stats=self.stats,
            active_card=active_card,
        )
