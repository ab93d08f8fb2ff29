# SQL schema for the VaultRecall flashcard store

SCHEMA_VERSION = 1

SCHEMA_SQL = """
-- Flashcards (with SM-2 fields); item_id points at the owning vault item
CREATE TABLE IF NOT EXISTS flashcards (
    id TEXT PRIMARY KEY,
    item_id TEXT NOT NULL,
    card_type TEXT NOT NULL DEFAULT 'basic_qa' CHECK(card_type IN ('basic_qa', 'cloze', 'code_completion', 'flow_recall', 'reverse_explanation')),
    question TEXT NOT NULL,
    answer TEXT NOT NULL,
    difficulty INTEGER NOT NULL DEFAULT 2,
    next_review_date TEXT NOT NULL,
    review_interval INTEGER NOT NULL DEFAULT 1 CHECK(review_interval >= 1),
    ease_factor REAL NOT NULL DEFAULT 2.5 CHECK(ease_factor >= 1.3),
    repetition_count INTEGER NOT NULL DEFAULT 0 CHECK(repetition_count >= 0),
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

-- Review log (append-only)
CREATE TABLE IF NOT EXISTS review_events (
    id TEXT PRIMARY KEY,
    flashcard_id TEXT NOT NULL,
    rating INTEGER NOT NULL CHECK(rating BETWEEN 0 AND 3),
    reviewed_at TEXT NOT NULL,
    FOREIGN KEY (flashcard_id) REFERENCES flashcards (id) ON DELETE CASCADE
);

CREATE TRIGGER IF NOT EXISTS review_events_no_update BEFORE UPDATE ON review_events BEGIN
    SELECT RAISE(ABORT, 'review_events is append-only');
END;
"""

# Indexes for performance
INDEXES_SQL = """
CREATE INDEX IF NOT EXISTS idx_flashcards_due ON flashcards (next_review_date);
CREATE INDEX IF NOT EXISTS idx_flashcards_item ON flashcards (item_id);
CREATE INDEX IF NOT EXISTS idx_review_events_card ON review_events (flashcard_id, reviewed_at);
CREATE INDEX IF NOT EXISTS idx_review_events_ts ON review_events (reviewed_at);
"""
