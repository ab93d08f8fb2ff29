from pydantic import BaseModel, Field
from datetime import datetime
from enum import Enum


class FlashcardType(str, Enum):
    BASIC_QA = "basic_qa"
    CLOZE = "cloze"
    CODE_COMPLETION = "code_completion"
    FLOW_RECALL = "flow_recall"
    REVERSE_EXPLANATION = "reverse_explanation"


class FlashcardBase(BaseModel):
    item_id: str
    type: FlashcardType = FlashcardType.BASIC_QA
    question: str
    answer: str
    difficulty: int = 2


class Flashcard(FlashcardBase):
    id: str
    next_review_date: datetime
    repetition_count: int = Field(default=0, ge=0)
    review_interval: int = Field(default=1, ge=1)
    ease_factor: float = Field(default=2.5, ge=1.3)
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
