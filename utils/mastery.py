from typing import Iterable

# A card with this many consecutive successful recalls counts as fully mastered.
MASTERY_REPETITIONS = 3


def capped_repetitions(repetition_count: int) -> int:
    return min(repetition_count, MASTERY_REPETITIONS)


def mastery_from_totals(capped_total: int, card_count: int) -> int:
    """Average of capped_repetitions * 100 / 3 per card, rounded half-up.

    Works on integers so SQL and Python callers agree exactly on .5 cases.
    """
    if card_count <= 0:
        return 0
    denominator = 2 * MASTERY_REPETITIONS * card_count
    return (200 * capped_total + MASTERY_REPETITIONS * card_count) // denominator


def mastery_score(repetition_counts: Iterable[int]) -> int:
    counts = list(repetition_counts)
    return mastery_from_totals(sum(capped_repetitions(count) for count in counts), len(counts))
