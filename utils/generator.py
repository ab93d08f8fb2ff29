import logging
from datetime import datetime
from typing import Callable, List, Sequence

from db.store import new_id
from models.flashcard import Flashcard, FlashcardType
from models.vault_item import VaultItemRef
from utils.dates import utc_now
from utils.sm2 import initial_state

logger = logging.getLogger(__name__)

CardStrategy = Callable[[VaultItemRef, datetime], Flashcard]


def basic_qa_card(item: VaultItemRef, now: datetime) -> Flashcard:
    state = initial_state()
    return Flashcard(
        id=new_id("card"),
        item_id=item.id,
        type=FlashcardType.BASIC_QA,
        question=f"Explain: {item.title}",
        answer=item.content,
        difficulty=2,
        next_review_date=now,
        repetition_count=state.repetition_count,
        review_interval=state.review_interval,
        ease_factor=state.ease_factor,
        created_at=now,
        updated_at=now,
    )


DEFAULT_STRATEGIES: Sequence[CardStrategy] = (basic_qa_card,)


class FlashcardGenerator:
    """Turns a vault item into flashcards and persists them in one transaction."""

    def __init__(self, store, strategies: Sequence[CardStrategy] = DEFAULT_STRATEGIES, clock=utc_now):
        self.store = store
        self.strategies = tuple(strategies)
        self._clock = clock

    def generate(self, item: VaultItemRef) -> List[Flashcard]:
        now = self._clock()
        cards = [strategy(item, now) for strategy in self.strategies]
        with self.store.transaction():
            for card in cards:
                self.store.insert(card)
        logger.info("Generated %d flashcard(s) for item %s", len(cards), item.id)
        return cards
