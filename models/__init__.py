from .rating import Rating
from .flashcard import Flashcard, FlashcardType
from .review import ReviewCreate, ReviewEvent, RevealRequest, ReviewHistory
from .vault_item import VaultItemRef
from .stats import DashboardStats, ActiveCard, SessionView

__all__ = [
    'Rating', 'Flashcard', 'FlashcardType', 'ReviewCreate', 'ReviewEvent', 'RevealRequest',
    'ReviewHistory', 'VaultItemRef', 'DashboardStats', 'ActiveCard', 'SessionView',
]
