from datetime import datetime, tzinfo
from typing import Iterable

from models.flashcard import Flashcard
from models.stats import DashboardStats
from utils.dates import day_bounds, ensure_aware
from utils.mastery import mastery_score


def compute_dashboard_stats(cards: Iterable[Flashcard], as_of: datetime, tz: tzinfo) -> DashboardStats:
    """Due/overdue/upcoming counts relative to the local day of `as_of`, plus mastery.

    `due_today` includes overdue cards; `upcoming` is everything due from
    tomorrow on.
    """
    start_of_today, start_of_tomorrow = day_bounds(as_of, tz)
    due_today = overdue = upcoming = 0
    repetition_counts = []
    for card in cards:
        due = ensure_aware(card.next_review_date)
        if due < start_of_tomorrow:
            due_today += 1
        else:
            upcoming += 1
        if due < start_of_today:
            overdue += 1
        repetition_counts.append(card.repetition_count)
    return DashboardStats(
        due_today=due_today,
        overdue=overdue,
        upcoming=upcoming,
        mastery=mastery_score(repetition_counts),
    )
