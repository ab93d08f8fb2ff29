import argparse
import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

import sys
from pathlib import Path

# Add project root to path for package imports
base_dir = Path(__file__).parent
sys.path.insert(0, str(base_dir))

from db import database
from db.store import PersistenceError, SQLiteFlashcardStore
from config import load_config, get_review_timezone
from utils.generator import FlashcardGenerator
from utils.review_session import ReviewSession
from routes import flashcards, review, stats  # Import routers

logger = logging.getLogger(__name__)

def configure_logging(config) -> None:
    logging.basicConfig(
        level=config["logging"]["level"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

# First-run init; one store connection and one review session per process
@asynccontextmanager
async def lifespan(app: FastAPI):
    config = load_config()  # Ensures config exists
    configure_logging(config)
    database.init_db()
    conn = database.connect()
    store = SQLiteFlashcardStore(
        conn,
        tz=get_review_timezone(config),
        page_size=config["review"]["page_size"],
    )
    app.state.store = store
    app.state.generator = FlashcardGenerator(store)
    app.state.review_session = ReviewSession(store)
    try:
        yield
    finally:
        conn.close()

app = FastAPI(
    title="VaultRecall",
    description="Local knowledge vault with SM-2 flashcard review",
    lifespan=lifespan,
)

# Include routers
app.include_router(flashcards.router, prefix="/flashcards", tags=["flashcards"])
app.include_router(review.router, prefix="/review", tags=["review"])
app.include_router(stats.router, prefix="/stats", tags=["stats"])

@app.exception_handler(PersistenceError)
async def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": str(exc)})

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="VaultRecall App")
    parser.add_argument("--init", action="store_true", help="Initialize DB and config")
    parser.add_argument("--dev", action="store_true", help="Run in dev mode with reload")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on")
    args = parser.parse_args()
    if args.init:
        configure_logging(load_config())  # Ensures config is copied if missing
        database.init_db()
        print("DB initialized and config copied to ~/.vaultrecall/")
        exit(0)
    # Run server
    uvicorn.run("main:app", host="127.0.0.1", port=args.port, reload=args.dev, log_level="info")
