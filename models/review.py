from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from .rating import Rating


class ReviewCreate(BaseModel):
    rating: Rating


class ReviewEvent(BaseModel):
    id: str
    flashcard_id: str
    rating: Rating
    reviewed_at: datetime

    class Config:
        from_attributes = True


class RevealRequest(BaseModel):
    typed_answer: Optional[str] = None


class ReviewHistory(BaseModel):
    flashcard_id: str
    events: list[ReviewEvent]
    consistent: bool
