import math
from dataclasses import dataclass
from datetime import datetime

from models.rating import Rating
from utils.dates import add_calendar_days

MIN_EASE = 1.3
INITIAL_EASE = 2.5

# Again, Hard, Good, Easy => SM-2 quality 0, 3, 4, 5.
# Hard maps to 3, which is not a lapse (lapse means quality < 3).
QUALITY_BY_RATING = {
    Rating.AGAIN: 0,
    Rating.HARD: 3,
    Rating.GOOD: 4,
    Rating.EASY: 5,
}


@dataclass(frozen=True)
class SchedulingState:
    repetition_count: int = 0
    review_interval: int = 1
    ease_factor: float = INITIAL_EASE


@dataclass(frozen=True)
class ScheduleResult:
    repetition_count: int
    review_interval: int
    ease_factor: float
    next_review_date: datetime

    @property
    def state(self) -> SchedulingState:
        return SchedulingState(
            repetition_count=self.repetition_count,
            review_interval=self.review_interval,
            ease_factor=self.ease_factor,
        )


def initial_state() -> SchedulingState:
    return SchedulingState()


def map_rating_to_quality(rating: Rating) -> int:
    return QUALITY_BY_RATING[Rating(rating)]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_next(state: SchedulingState, rating: Rating, now: datetime) -> ScheduleResult:
    """Update SM-2 parameters and compute the next due timestamp."""
    quality = map_rating_to_quality(rating)
    if quality < 3:
        repetition_count = 0
        review_interval = 1
    else:
        if state.repetition_count == 0:
            review_interval = 1
        elif state.repetition_count == 1:
            review_interval = 6
        else:
            review_interval = max(1, _round_half_up(state.review_interval * state.ease_factor))
        repetition_count = state.repetition_count + 1
    ease_factor = max(
        MIN_EASE,
        state.ease_factor + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02)),
    )
    return ScheduleResult(
        repetition_count=repetition_count,
        review_interval=review_interval,
        ease_factor=round(ease_factor, 2),
        next_review_date=add_calendar_days(now, review_interval),
    )
