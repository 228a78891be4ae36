"""Deal-quality scoring.

Turns a GameRecord into an Insight with a fixed rule ladder. The rules are evaluated
in order and the first match wins. Discounts are not clamped: a negative
or >100 value walks the same ladder as any other number.
"""

# ===== IMPORTS & DEPENDENCIES =====
import logging
import math
from typing import Optional, Any

from gamescout.config import (
    DISCOUNT_TIERS, BARELY_ON_SALE_TIER, BUY_NOW_MIN_DISCOUNT,
    STRONG_BUY_MIN_DISCOUNT, GOOD_TONE_MIN_SCORE, BAD_TONE_MAX_SCORE
)
from gamescout.models.game import GameRecord, Insight

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

FREE_REASON = "No cost to try; decide based on tags and reviews instead of discounts."
NOT_ON_SALE_REASON = "No discount detected; consider waiting for a seasonal sale."
STRONG_BUY_REASON = "Large discount: strong buy signal if you already like this genre."
MODEST_REASON = "Discount is modest; you might get a better price during major sales."

# ===== UTILITY FUNCTIONS =====
def _as_number(value: Any) -> Optional[float]:
    """Returns the value as a float, or None when it is missing, NaN or not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


def score_tone(score: int) -> str:
    """Maps a score onto the UI badge tone."""
    if score >= GOOD_TONE_MIN_SCORE:
        return "good"
    if score <= BAD_TONE_MAX_SCORE:
        return "bad"
    return "neutral"


def _insight(verdict: str, score: int, reason: str, action: str) -> Insight:
    return Insight(verdict=verdict, score=score, reason=reason, action=action, tone=score_tone(score))

# ===== CORE BUSINESS LOGIC =====
def compute_insight(game: GameRecord) -> Insight:
    """
    Scores a game's current deal. Never raises.

    1. A price of exactly 0 is free-to-play, whatever the discount says.
    2. An unknown discount means the game is not on sale.
    3. Otherwise the discount is bucketed by DISCOUNT_TIERS.
    """
    price = _as_number(game.current_price)
    if price == 0:
        return _insight("Free-to-play", 85, FREE_REASON, "Try it now")

    discount = _as_number(game.discount_percent)
    if discount is None:
        return _insight("Not on sale", 55, NOT_ON_SALE_REASON, "Wait")

    score, verdict = BARELY_ON_SALE_TIER
    for min_discount, tier_score, tier_verdict in DISCOUNT_TIERS:
        if discount >= min_discount:
            score, verdict = tier_score, tier_verdict
            break

    action = "Buy now (if you want it)" if discount >= BUY_NOW_MIN_DISCOUNT else "Wait"
    reason = STRONG_BUY_REASON if discount >= STRONG_BUY_MIN_DISCOUNT else MODEST_REASON

    logger.debug(f"[compute_insight] '{game.title}' discount={discount} -> {verdict} ({score})")
    return _insight(verdict, score, reason, action)
