from __future__ import annotations

from datetime import tzinfo
from typing import Iterable, Optional

from models.flashcard import Flashcard
from models.review import ReviewEvent
from utils.dates import ensure_aware
from utils.sm2 import ScheduleResult, SchedulingState, compute_next, initial_state


def replay_review_events(events: Iterable[ReviewEvent], tz: tzinfo) -> Optional[ScheduleResult]:
    """Re-run SM-2 over a card's review log, starting from a fresh card.

    Each event is scheduled as of its own `reviewed_at` in `tz`, the same
    way the review session scheduled it. Returns None for an empty log.
    """
    ordered = sorted(events, key=lambda event: ensure_aware(event.reviewed_at))
    state: SchedulingState = initial_state()
    result: Optional[ScheduleResult] = None
    for event in ordered:
        reviewed_at = ensure_aware(event.reviewed_at).astimezone(tz)
        result = compute_next(state, event.rating, reviewed_at)
        state = result.state
    return result


def is_consistent(card: Flashcard, events: Iterable[ReviewEvent], tz: tzinfo) -> bool:
    """True when the card's stored scheduling fields match its review log."""
    result = replay_review_events(events, tz)
    if result is None:
        fresh = initial_state()
        return (
            card.repetition_count == fresh.repetition_count
            and card.review_interval == fresh.review_interval
            and card.ease_factor == fresh.ease_factor
        )
    return (
        card.repetition_count == result.repetition_count
        and card.review_interval == result.review_interval
        and card.ease_factor == result.ease_factor
        and ensure_aware(card.next_review_date) == ensure_aware(result.next_review_date)
    )
