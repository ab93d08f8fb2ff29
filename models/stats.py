from pydantic import BaseModel
from typing import Optional

from .flashcard import FlashcardType


class DashboardStats(BaseModel):
    due_today: int = 0
    overdue: int = 0
    upcoming: int = 0
    mastery: int = 0


class ActiveCard(BaseModel):
    id: str
    type: FlashcardType
    question: str
    answer: Optional[str] = None  # hidden until revealed
    revealed: bool = False


class SessionView(BaseModel):
    active: bool
    caught_up: bool
    revealed: bool
    remaining: int
    stats: DashboardStats
    active_card: Optional[ActiveCard] = None
    recall_similarity: Optional[int] = None
