from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from models.flashcard import Flashcard
from models.review import ReviewHistory
from models.vault_item import VaultItemRef
from utils.generator import FlashcardGenerator
from utils.progress import is_consistent
from .dependencies import get_generator, get_store

router = APIRouter()

@router.post("/generate", response_model=List[Flashcard], status_code=status.HTTP_201_CREATED)
async def generate_flashcards(item: VaultItemRef, generator: FlashcardGenerator = Depends(get_generator)):
    """Create flashcards for a vault item; they are due immediately."""
    return generator.generate(item)

@router.get("", response_model=List[Flashcard])
async def list_flashcards(store = Depends(get_store)):
    return store.list()

@router.get("/{card_id}/history", response_model=ReviewHistory)
async def flashcard_history(card_id: str, store = Depends(get_store)):
    """Review log for a card and whether its scheduling state agrees with it."""
    card = store.get_card(card_id)
    if card is None:
        raise HTTPException(status_code=404, detail="Flashcard not found")
    events = store.get_review_events(card_id)
    return ReviewHistory(
        flashcard_id=card_id,
        events=events,
        consistent=is_consistent(card, events, store.tz),
    )
