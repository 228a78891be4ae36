# ===== TYPES & INTERFACES =====

from dataclasses import dataclass, field, asdict
from typing import Tuple, Optional, Dict, Any


@dataclass(frozen=True)
class GameRecord:
    """
    Normalized storefront metadata for a single game, whichever strategy produced it.

    `None` means the value is unknown; `0` means free (price) or no discount. The two
    are never interchangeable, so downstream code must test `is None` explicitly.

    Attributes:
        title (Optional[str]): Display name of the game.
        current_price (Optional[float]): Price the store charges right now.
        original_price (Optional[float]): Pre-discount price.
        discount_percent (Optional[float]): Discount as reported, not clamped.
        release_date (Optional[str]): Release date string exactly as the store formats it.
        tags (Tuple[str, ...]): Genre-style tags, in store order.
        review_summary (Optional[str]): Review text; only the extraction strategy fills it.
    """
    title: Optional[str] = None
    current_price: Optional[float] = None
    original_price: Optional[float] = None
    discount_percent: Optional[float] = None
    release_date: Optional[str] = None
    tags: Tuple[str, ...] = field(default_factory=tuple)
    review_summary: Optional[str] = None

    def is_empty(self) -> bool:
        """True when nothing at all is known about the game."""
        return not self.tags and all(
            value is None for value in (
                self.title, self.current_price, self.original_price,
                self.discount_percent, self.release_date, self.review_summary,
            )
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['tags'] = list(self.tags)
        return data


@dataclass(frozen=True)
class Insight:
    """A deal-quality verdict derived solely from a GameRecord."""
    verdict: str
    score: int
    reason: str
    action: str
    tone: str = "neutral"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RankedResult:
    identifier: str
    source_url: str
    game: GameRecord
    insight: Insight

    def to_dict(self) -> Dict[str, Any]:
        return {
            'identifier': self.identifier,
            'source_url': self.source_url,
            'game': self.game.to_dict(),
            'insight': self.insight.to_dict(),
        }


@dataclass(frozen=True)
class SearchResult:
    identifier: str
    title: str
    store_url: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class EnrichedEntry:
    url: str
    game: Optional[GameRecord] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'url': self.url, 'game': self.game.to_dict() if self.game is not None else None}


@dataclass(frozen=True)
class Analysis:
    """Outcome of analyzing a single title: where the data came from and how good the deal is."""
    source: str
    source_url: str
    game: GameRecord
    insight: Insight

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source': self.source,
            'source_url': self.source_url,
            'game': self.game.to_dict(),
            'insight': self.insight.to_dict(),
        }
