from datetime import datetime, timedelta, timezone

import pytest

from models.rating import Rating
from utils.sm2 import (
    MIN_EASE,
    QUALITY_BY_RATING,
    SchedulingState,
    compute_next,
    initial_state,
    map_rating_to_quality,
)

DAY1 = datetime(2026, 1, 1, tzinfo=timezone.utc)
DAY2 = datetime(2026, 1, 2, tzinfo=timezone.utc)


def test_quality_table_is_literal_mapping():
    assert [QUALITY_BY_RATING[rating] for rating in Rating] == [0, 3, 4, 5]
    assert map_rating_to_quality(1) == 3


def test_initial_state_defaults():
    state = initial_state()
    assert (state.repetition_count, state.review_interval, state.ease_factor) == (0, 1, 2.5)


@pytest.mark.parametrize(
    "state",
    [
        SchedulingState(0, 1, 2.5),
        SchedulingState(1, 1, 2.5),
        SchedulingState(4, 20, 2.5),
        SchedulingState(12, 300, 1.3),
    ],
)
def test_again_resets_repetitions_and_interval(state):
    result = compute_next(state, Rating.AGAIN, DAY1)
    assert result.repetition_count == 0
    assert result.review_interval == 1
    assert result.next_review_date == DAY1 + timedelta(days=1)


def test_again_from_reference_state():
    result = compute_next(SchedulingState(4, 20, 2.5), Rating.AGAIN, DAY1)
    assert (result.repetition_count, result.review_interval) == (0, 1)


@pytest.mark.parametrize("rating", [Rating.HARD, Rating.GOOD, Rating.EASY])
def test_first_success_interval_is_one_day(rating):
    result = compute_next(SchedulingState(0, 1, 2.5), rating, DAY1)
    assert result.review_interval == 1
    assert result.repetition_count == 1


@pytest.mark.parametrize("rating", [Rating.HARD, Rating.GOOD, Rating.EASY])
def test_second_success_interval_is_six_days(rating):
    result = compute_next(SchedulingState(1, 1, 2.5), rating, DAY1)
    assert result.review_interval == 6
    assert result.repetition_count == 2


def test_graduating_interval_multiplies_by_ease():
    result = compute_next(SchedulingState(2, 6, 2.5), Rating.GOOD, DAY1)
    assert result.review_interval == 15
    assert result.repetition_count == 3
    assert result.next_review_date == datetime(2026, 1, 16, tzinfo=timezone.utc)


def test_graduating_interval_rounds_half_up():
    result = compute_next(SchedulingState(2, 3, 2.5), Rating.GOOD, DAY1)
    assert result.review_interval == 8


def test_chained_good_then_easy():
    first = compute_next(SchedulingState(0, 1, 2.5), Rating.GOOD, DAY1)
    second = compute_next(first.state, Rating.EASY, DAY2)
    assert first.review_interval == 1
    assert second.review_interval == 6
    assert second.repetition_count == 2


def test_hard_is_a_successful_recall_with_ease_penalty():
    result = compute_next(SchedulingState(3, 15, 2.5), Rating.HARD, DAY1)
    assert result.repetition_count == 4
    assert result.review_interval == 38
    assert result.ease_factor == 2.36


@pytest.mark.parametrize(
    "rating, expected_ease",
    [
        (Rating.AGAIN, 1.7),
        (Rating.HARD, 2.36),
        (Rating.GOOD, 2.5),
        (Rating.EASY, 2.6),
    ],
)
def test_ease_update_per_rating(rating, expected_ease):
    result = compute_next(SchedulingState(2, 6, 2.5), rating, DAY1)
    assert result.ease_factor == expected_ease


def test_lapse_still_updates_ease():
    result = compute_next(SchedulingState(5, 40, 2.2), Rating.AGAIN, DAY1)
    assert result.review_interval == 1
    assert result.ease_factor == 1.4


def test_repeated_again_never_drops_below_floor():
    state = SchedulingState(6, 50, 2.5)
    for _ in range(10):
        result = compute_next(state, Rating.AGAIN, DAY1)
        assert result.ease_factor >= MIN_EASE
        state = result.state
    assert state.ease_factor == MIN_EASE


def test_compute_next_is_deterministic():
    state = SchedulingState(3, 15, 2.36)
    assert compute_next(state, Rating.GOOD, DAY1) == compute_next(state, Rating.GOOD, DAY1)


def test_interval_stays_positive_for_tiny_ease_products():
    result = compute_next(SchedulingState(2, 1, 1.3), Rating.GOOD, DAY1)
    assert result.review_interval >= 1
