from typing import Optional

from Levenshtein import ratio as lev_ratio


def recall_similarity(expected_text: str, typed_text: Optional[str]) -> int:
    """Score a typed recall attempt against the card answer, 0-100.

    Informational only: the user still picks the rating.
    """
    if not typed_text or not typed_text.strip():
        return 0
    typed_clean = typed_text.strip().lower()
    expected_clean = (expected_text or "").strip().lower()
    if not expected_clean:
        return 0
    return round(lev_ratio(typed_clean, expected_clean) * 100)
