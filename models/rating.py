from enum import IntEnum


class Rating(IntEnum):
    """Four-level self-assessment given after revealing an answer."""

    AGAIN = 0
    HARD = 1
    GOOD = 2
    EASY = 3
