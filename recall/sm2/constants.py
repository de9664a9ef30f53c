"""
SM-2 Constants and Parameters

All configurable parameters for the SM-2 scheduler in one place.
"""

from enum import Enum


# ---- User Responses ----

class Response(str, Enum):
    """Coarse user-facing answer to a card."""
    FORGOT = "forgot"  # Retrieval failed
    HARD = "hard"      # Recalled with serious effort
    GOOD = "good"      # Recalled normally
    EASY = "easy"      # Recalled fluently


# ---- Quality Scale ----

QUALITY_MIN = 0
QUALITY_MAX = 5
SUCCESS_THRESHOLD = 3  # quality >= 3 counts as a successful recall

QUALITY_BY_RESPONSE = {
    Response.FORGOT: 0,
    Response.HARD: 3,
    Response.GOOD: 4,
    Response.EASY: 5,
}


# ---- Card Defaults ----

DEFAULT_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3  # Hard floor, keeps intervals from collapsing to 1 day
DEFAULT_TOPIC = "general"


# ---- Interval Steps ----
# Fixed intervals (days) for the first two successful reviews

FIRST_INTERVAL = 1
SECOND_INTERVAL = 6
FAILED_INTERVAL = 1


# ---- Ease Factor Update ----
# ef' = ef + (EASE_BONUS - (5 - q) * (EASE_LINEAR + (5 - q) * EASE_QUADRATIC))

EASE_BONUS = 0.1
EASE_LINEAR = 0.08
EASE_QUADRATIC = 0.02
