# ===== IMPORTS & DEPENDENCIES =====
import logging
from typing import List, Optional, Any, Tuple

from gamescout.config import (
    DEFAULT_REGION, DEFAULT_LANGUAGE, COMPARE_CAP,
    ENRICH_DEFAULT_LIMIT, ENRICH_MAX_LIMIT, SEARCH_DEFAULT_LIMIT
)
from gamescout.core.errors import GameScoutError, InvalidInput, NoDataError
from gamescout.core.scoring import compute_insight
from gamescout.models.game import Analysis, RankedResult, SearchResult, EnrichedEntry
from gamescout.sources.resolver import SourceResolver

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

SOURCE_DIRECT = "direct"
SOURCE_EXTRACTION = "extraction"

# ===== UTILITY FUNCTIONS =====
def _is_present(value: Any) -> bool:
    return value is not None and str(value).strip() != ""


def _clamp_enrich_limit(limit: Any) -> int:
    try:
        requested = int(limit) if limit is not None else ENRICH_DEFAULT_LIMIT
    except (TypeError, ValueError):
        requested = ENRICH_DEFAULT_LIMIT
    return min(max(1, requested), ENRICH_MAX_LIMIT)


def _require_list(value: Any, field_name: str) -> list:
    if not isinstance(value, list) or not value:
        raise InvalidInput(f"Provide {field_name}: [..]")
    return value

# ===== CORE BUSINESS LOGIC =====
class DealScout:
    """Sequences resolution and scoring for the four public operations."""

    def __init__(self, resolver: SourceResolver):
        self.resolver = resolver

    async def analyze(
        self,
        identifier: Optional[Any] = None,
        url: Optional[str] = None,
        region: str = DEFAULT_REGION,
        language: str = DEFAULT_LANGUAGE
    ) -> Analysis:
        """Resolves one title (identifier first, URL otherwise) and scores it. Errors propagate."""
        if _is_present(identifier):
            game, source_url = await self.resolver.resolve_identifier(identifier, region, language)
            source = SOURCE_DIRECT
        elif _is_present(url):
            source_url = str(url).strip()
            game = await self.resolver.resolve_url(source_url)
            source = SOURCE_EXTRACTION
        else:
            raise InvalidInput("Provide either identifier or url")

        if game.is_empty():
            raise NoDataError("Resolved record contains no game fields.", debug=source_url)

        insight = compute_insight(game)
        logger.info(f"[{self.__class__.__name__}] Analyzed '{game.title}' via {source}: {insight.verdict} ({insight.score})")
        return Analysis(source=source, source_url=source_url, game=game, insight=insight)

    async def compare(
        self,
        identifiers: Any,
        region: str = DEFAULT_REGION,
        language: str = DEFAULT_LANGUAGE
    ) -> List[RankedResult]:
        """
        Resolves up to COMPARE_CAP identifiers one after another and ranks them by score.
        Entries that fail to resolve are skipped; ties keep their input order.
        """
        identifiers = _require_list(identifiers, "identifiers")
        batch = identifiers[:COMPARE_CAP]
        if len(identifiers) > COMPARE_CAP:
            logger.info(f"[{self.__class__.__name__}] Compare truncated from {len(identifiers)} to {COMPARE_CAP} identifiers.")

        results: List[RankedResult] = []
        for identifier in batch:
            try:
                game, source_url = await self.resolver.resolve_identifier(identifier, region, language)
            except GameScoutError as e:
                logger.warning(f"⚠️ [{self.__class__.__name__}] Skipping '{identifier}' in compare: {e.message}")
                continue
            except Exception as e:
                logger.error(f"❌ [{self.__class__.__name__}] Unexpected error resolving '{identifier}': {e}", exc_info=True)
                continue

            if game.is_empty():
                logger.warning(f"⚠️ [{self.__class__.__name__}] Skipping '{identifier}' in compare: resolved record is empty")
                continue

            results.append(RankedResult(
                identifier=str(identifier).strip(),
                source_url=source_url,
                game=game,
                insight=compute_insight(game),
            ))

        # sorted() is stable, so equal scores keep input order
        ranked = sorted(results, key=lambda r: r.insight.score, reverse=True)
        logger.info(f"[{self.__class__.__name__}] Compare ranked {len(ranked)}/{len(batch)} identifiers.")
        return ranked

    async def search(self, query: Any, limit: Any = SEARCH_DEFAULT_LIMIT) -> Tuple[List[SearchResult], str]:
        if not isinstance(query, str) or not query.strip():
            raise InvalidInput("Provide query")
        return await self.resolver.search(query.strip(), limit)

    async def enrich(self, urls: Any, limit: Any = ENRICH_DEFAULT_LIMIT) -> List[EnrichedEntry]:
        """
        Extracts each URL in turn, in input order. A failed entry yields `game=None`
        and the batch carries on.
        """
        urls = _require_list(urls, "urls")
        batch = urls[:_clamp_enrich_limit(limit)]

        enriched: List[EnrichedEntry] = []
        for url in batch:
            if not isinstance(url, str) or not url.strip():
                logger.warning(f"⚠️ [{self.__class__.__name__}] Skipping malformed URL entry: {url!r}")
                enriched.append(EnrichedEntry(url=str(url) if url is not None else "", game=None))
                continue
            try:
                game = await self.resolver.resolve_url(url.strip())
            except GameScoutError as e:
                logger.warning(f"⚠️ [{self.__class__.__name__}] Extraction failed for {url}: {e.message}")
                game = None
            except Exception as e:
                logger.error(f"❌ [{self.__class__.__name__}] Unexpected error extracting {url}: {e}", exc_info=True)
                game = None
            enriched.append(EnrichedEntry(url=url.strip(), game=game))

        logger.info(f"[{self.__class__.__name__}] Enriched {sum(1 for e in enriched if e.game is not None)}/{len(enriched)} URLs.")
        return enriched
