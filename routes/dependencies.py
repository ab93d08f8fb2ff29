from fastapi import Request

from utils.generator import FlashcardGenerator
from utils.review_session import ReviewSession


# Built once in the app lifespan and kept on app.state
def get_store(request: Request):
    return request.app.state.store

def get_review_session(request: Request) -> ReviewSession:
    return request.app.state.review_session

def get_generator(request: Request) -> FlashcardGenerator:
    return request.app.state.generator
