from typing import Optional

from fastapi import APIRouter, Body, Depends

from models.review import ReviewCreate, RevealRequest
from models.stats import SessionView
from utils.grading import recall_similarity
from utils.review_session import ReviewSession
from .dependencies import get_review_session

router = APIRouter()

@router.get("", response_model=SessionView)
async def session_view(session: ReviewSession = Depends(get_review_session)):
    """Current session state for the presentation layer."""
    return session.view()

@router.post("/start", response_model=SessionView)
async def start_review(session: ReviewSession = Depends(get_review_session)):
    session.start()
    return session.view()

@router.post("/reveal", response_model=SessionView)
async def reveal_answer(
    payload: Optional[RevealRequest] = Body(None),
    session: ReviewSession = Depends(get_review_session),
):
    """Show the answer; a typed attempt, if sent, is scored against it."""
    session.reveal()
    view = session.view()
    if payload and payload.typed_answer is not None and view.active_card and view.revealed:
        view.recall_similarity = recall_similarity(view.active_card.answer, payload.typed_answer)
    return view

@router.post("/rate", response_model=SessionView)
async def rate_card(payload: ReviewCreate, session: ReviewSession = Depends(get_review_session)):
    session.rate(payload.rating)
    return session.view()

@router.post("/close", response_model=SessionView)
async def close_review(session: ReviewSession = Depends(get_review_session)):
    session.close()
    return session.view()
